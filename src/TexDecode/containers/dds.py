"""Decode level 0 of a DDS container with a four-character-code pixel format.

DDS values and structures follow the DirectDraw Surface reference at
http://msdn.microsoft.com/en-us/library/bb943991.aspx
"""

from dataclasses import dataclass
from types import MappingProxyType

from ..core.errors import (
    MalformedHeaderError, TruncatedDataError,
    UnrecognizedFormatError, UnsupportedFormatError,
)
from ..core.formats import DEFAULT_CATALOG, PixelFormat
from ..core.levels import size_of_level0
from ..core.reader import ByteReader
from ..core.records import DecodedTexture

DDS_MAGIC = 0x20534444  # b"DDS "
DDSD_MIPMAPCOUNT = 0x20000
DDPF_FOURCC = 0x4

# Word offsets into the header, magic included.
_WORD_MAGIC = 0
_WORD_SIZE = 1
_WORD_FLAGS = 2
_WORD_HEIGHT = 3
_WORD_WIDTH = 4
_WORD_MIPMAPCOUNT = 7
_WORD_PF_FLAGS = 20
_WORD_PF_FOURCC = 21


def fourcc_to_int(value: str) -> int:
    """Build the little-endian numeric code for a four-character string."""
    if len(value) != 4:
        raise ValueError(f"Four-character code must be 4 characters, got {value!r}")
    return (ord(value[0]) | (ord(value[1]) << 8) |
            (ord(value[2]) << 16) | (ord(value[3]) << 24))


def fourcc_to_str(value: int) -> str:
    """Turn a numeric four-character code back into its text form."""
    return "".join(chr((value >> shift) & 0xFF) for shift in (0, 8, 16, 24))


FOURCC_FORMATS = MappingProxyType({
    fourcc_to_int("DXT1"): PixelFormat.RGB_DXT1,
    fourcc_to_int("DXT3"): PixelFormat.RGBA_DXT3,
    fourcc_to_int("DXT5"): PixelFormat.RGBA_DXT5,
    fourcc_to_int("ATC "): PixelFormat.RGB_ATC,
    fourcc_to_int("ATCA"): PixelFormat.RGBA_ATC_EXPLICIT_ALPHA,
    fourcc_to_int("ATCI"): PixelFormat.RGBA_ATC_INTERPOLATED_ALPHA,
})


@dataclass(frozen=True)
class DDSHeader:
    """Fields of the DDS header this decoder consumes."""

    size: int
    flags: int
    height: int
    width: int
    mipmap_count: int
    pf_flags: int
    fourcc: int

    @property
    def data_offset(self) -> int:
        return self.size + 4

    @property
    def levels(self) -> int:
        if self.flags & DDSD_MIPMAPCOUNT:
            return max(1, self.mipmap_count)
        return 1

    @classmethod
    def read(cls, reader: ByteReader) -> "DDSHeader":
        def word(index):
            return reader.u32_at(index * 4)

        if word(_WORD_MAGIC) != DDS_MAGIC:
            raise MalformedHeaderError("Invalid magic number in DDS header")
        return cls(
            size=word(_WORD_SIZE),
            flags=word(_WORD_FLAGS),
            height=word(_WORD_HEIGHT),
            width=word(_WORD_WIDTH),
            mipmap_count=word(_WORD_MIPMAPCOUNT),
            pf_flags=word(_WORD_PF_FLAGS),
            fourcc=word(_WORD_PF_FOURCC),
        )


def decode_dds(buffer, catalog=DEFAULT_CATALOG) -> DecodedTexture:
    """Decode ``buffer`` as a DDS file and return a view onto mip level 0."""
    reader = ByteReader(buffer)
    header = DDSHeader.read(reader)

    if not header.pf_flags & DDPF_FOURCC:
        raise UnsupportedFormatError("Unsupported format, must contain a four-character code")

    internal_format = FOURCC_FORMATS.get(header.fourcc)
    if internal_format is None:
        text = fourcc_to_str(header.fourcc)
        raise UnrecognizedFormatError(
            f"Unsupported four-character code: {text!r}",
            code=header.fourcc, fourcc=text,
        )

    offset = header.data_offset
    if offset > reader.size:
        raise TruncatedDataError(offset, 0, reader.size)
    texels = reader.view_at(offset, reader.size - offset)

    # Only level 0 is surfaced; the rest of the chain is not parsed.
    if header.levels > 1:
        level_size = size_of_level0(internal_format, header.width, header.height, catalog)
        if level_size:
            texels = reader.view_at(offset, level_size)

    return DecodedTexture(
        buffer_view=texels,
        width=header.width,
        height=header.height,
        internal_format=internal_format,
    )
