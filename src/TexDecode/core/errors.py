"""Exception types raised while decoding texture containers."""

from typing import Optional


class TextureDecodeError(ValueError):
    """Base class for every container decode failure."""


class MalformedHeaderError(TextureDecodeError):
    """Raised when a magic number or file identifier does not match."""


class TruncatedDataError(MalformedHeaderError):
    """Raised when a header field or texel range lies past the end of the buffer."""

    def __init__(self, offset: int, length: int, size: int):
        self.offset = offset
        self.length = length
        self.size = size
        super().__init__(
            f"Read of {length} byte(s) at offset {offset} exceeds buffer size {size}"
        )


class UnsupportedEndiannessError(TextureDecodeError):
    """Raised when a KTX endianness marker needs byte swapping."""


class UnrecognizedFormatError(TextureDecodeError):
    """Raised when a four-character code or internal format is unknown."""

    def __init__(self, message: str, code: Optional[int] = None,
                 fourcc: Optional[str] = None):
        self.code = code
        self.fourcc = fourcc
        super().__init__(message)


class UnsupportedFormatError(TextureDecodeError):
    """Raised when a DDS pixel format carries no four-character code."""


class InvalidFieldCombinationError(TextureDecodeError):
    """Raised when compressed/uncompressed header fields contradict each other."""


class UnsupportedFeatureError(TextureDecodeError):
    """Raised for 3D textures, texture arrays and cubemaps."""
