"""Core utilities -- re-exports all public symbols for convenience."""

from .errors import (
    TextureDecodeError,
    MalformedHeaderError,
    TruncatedDataError,
    UnsupportedEndiannessError,
    UnrecognizedFormatError,
    UnsupportedFormatError,
    InvalidFieldCombinationError,
    UnsupportedFeatureError,
)
from .formats import (
    PixelFormat, BlockFamily, FormatInfo, FormatCatalog,
    FORMAT_TABLE, DEFAULT_CATALOG,
)
from .reader import ByteReader
from .levels import size_of_level0
from .records import DecodedTexture, TextureRecord
from .io import (
    container_for_path,
    detect_container,
    decode_texture,
    read_texture_file,
    dump_level0,
)
from .scanning import (
    file_hash,
    file_hash_bytes,
    scan_textures,
    iter_textures,
    inspect_file,
    inspect_texture,
    save_manifest,
    load_manifest,
)
from .logging import setup_logging

__all__ = [
    "TextureDecodeError", "MalformedHeaderError", "TruncatedDataError",
    "UnsupportedEndiannessError", "UnrecognizedFormatError", "UnsupportedFormatError",
    "InvalidFieldCombinationError", "UnsupportedFeatureError",
    "PixelFormat", "BlockFamily", "FormatInfo", "FormatCatalog",
    "FORMAT_TABLE", "DEFAULT_CATALOG",
    "ByteReader",
    "size_of_level0",
    "DecodedTexture", "TextureRecord",
    "container_for_path", "detect_container", "decode_texture",
    "read_texture_file", "dump_level0",
    "file_hash", "file_hash_bytes", "scan_textures", "iter_textures",
    "inspect_file", "inspect_texture",
    "save_manifest", "load_manifest",
    "setup_logging",
]
