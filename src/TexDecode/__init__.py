"""Decode DDS and KTX texture containers into level-0 texel views."""

import logging as _logging

__version__ = "1.0.0"
_logger = _logging.getLogger("texture_decode")

from .core import (  # noqa: E402
    DecodedTexture,
    PixelFormat,
    FormatCatalog,
    DEFAULT_CATALOG,
    TextureDecodeError,
    MalformedHeaderError,
    TruncatedDataError,
    UnsupportedEndiannessError,
    UnrecognizedFormatError,
    UnsupportedFormatError,
    InvalidFieldCombinationError,
    UnsupportedFeatureError,
    size_of_level0,
    decode_texture,
    detect_container,
)
from .containers.dds import decode_dds  # noqa: E402
from .containers.ktx import decode_ktx  # noqa: E402
from .loader import fetch_bytes, load_texture  # noqa: E402

__all__ = [
    "__version__",
    "DecodedTexture", "PixelFormat", "FormatCatalog", "DEFAULT_CATALOG",
    "TextureDecodeError", "MalformedHeaderError", "TruncatedDataError",
    "UnsupportedEndiannessError", "UnrecognizedFormatError", "UnsupportedFormatError",
    "InvalidFieldCombinationError", "UnsupportedFeatureError",
    "size_of_level0", "decode_texture", "detect_container",
    "decode_dds", "decode_ktx",
    "fetch_bytes", "load_texture",
]
