"""Decode level 0 of a KTX 1.1 container.

Byte swapping, key/value metadata, texture arrays, cubemaps and 3D textures
are not supported and raise instead of degrading.
"""

from dataclasses import dataclass, fields

from ..core.errors import (
    InvalidFieldCombinationError, MalformedHeaderError, TruncatedDataError,
    UnrecognizedFormatError, UnsupportedEndiannessError, UnsupportedFeatureError,
)
from ..core.formats import DEFAULT_CATALOG, PixelFormat
from ..core.levels import size_of_level0
from ..core.reader import ByteReader
from ..core.records import DecodedTexture

KTX_IDENTIFIER = bytes([
    0xAB, 0x4B, 0x54, 0x58, 0x20, 0x31, 0x31, 0xBB, 0x0D, 0x0A, 0x1A, 0x0A,
])
KTX_ENDIANNESS = 0x04030201


@dataclass(frozen=True)
class KTXHeader:
    """The twelve u32 fields that follow the endianness marker, in file order."""

    gl_type: int
    gl_type_size: int
    gl_format: int
    gl_internal_format: int
    gl_base_internal_format: int
    pixel_width: int
    pixel_height: int
    pixel_depth: int
    number_of_array_elements: int
    number_of_faces: int
    number_of_mipmap_levels: int
    bytes_of_key_value_data: int

    @classmethod
    def read(cls, reader: ByteReader) -> "KTXHeader":
        if reader.bytes_at(0, len(KTX_IDENTIFIER)) != KTX_IDENTIFIER:
            raise MalformedHeaderError("Invalid KTX file identifier")
        reader.offset = len(KTX_IDENTIFIER)

        endianness = reader.u32()
        if endianness != KTX_ENDIANNESS:
            raise UnsupportedEndiannessError(
                f"KTX endianness marker 0x{endianness:08X} requires byte swapping"
            )
        return cls(*(reader.u32() for _ in fields(cls)))


def _validate(header: KTXHeader, compressed: bool) -> None:
    if compressed:
        if header.gl_type != 0:
            raise InvalidFieldCombinationError(
                "glType must be zero when the texture is compressed"
            )
        if header.gl_type_size != 1:
            raise InvalidFieldCombinationError(
                "The type size for compressed textures must be 1"
            )
        if header.gl_format != 0:
            raise InvalidFieldCombinationError(
                "glFormat must be zero when the texture is compressed"
            )
        if header.number_of_mipmap_levels == 0:
            raise InvalidFieldCombinationError(
                "Generating mipmaps for a compressed texture is unsupported"
            )
    elif header.gl_base_internal_format != header.gl_format:
        raise InvalidFieldCombinationError(
            "The base internal format must match glFormat for uncompressed textures"
        )

    if header.pixel_depth != 0:
        raise UnsupportedFeatureError("3D textures are unsupported")
    if header.number_of_array_elements != 0:
        raise UnsupportedFeatureError("Texture arrays are unsupported")
    if header.number_of_faces != 1:
        raise UnsupportedFeatureError("Cubemaps are unsupported")


def decode_ktx(buffer, catalog=DEFAULT_CATALOG) -> DecodedTexture:
    """Decode ``buffer`` as a KTX 1.1 file and return a view onto mip level 0."""
    reader = ByteReader(buffer)
    header = KTXHeader.read(reader)

    reader.skip(header.bytes_of_key_value_data)
    image_size = reader.u32()
    data_offset = reader.offset
    texels = reader.take(image_size)

    code = header.gl_internal_format
    if not catalog.is_valid(code):
        raise UnrecognizedFormatError(
            f"glInternalFormat 0x{code:04X} is not a valid format", code=code
        )
    compressed = catalog.is_compressed_format(code)
    _validate(header, compressed)

    if compressed and header.number_of_mipmap_levels > 1:
        level_size = size_of_level0(code, header.pixel_width, header.pixel_height, catalog)
        if level_size:
            if level_size > image_size:
                raise TruncatedDataError(data_offset, level_size, data_offset + image_size)
            texels = reader.view_at(data_offset, level_size)

    try:
        internal_format = PixelFormat(code)
    except ValueError:
        raise UnrecognizedFormatError(
            f"glInternalFormat 0x{code:04X} has no PixelFormat member", code=code
        ) from None

    return DecodedTexture(
        buffer_view=texels,
        width=header.pixel_width,
        height=header.pixel_height,
        internal_format=internal_format,
    )
