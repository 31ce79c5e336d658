"""Pixel-format catalog shared by the DDS and KTX decoders.

Codes are the WebGL enum values a GPU upload call expects. The table is
built once at import and exposed read-only.
"""

from dataclasses import dataclass
from enum import Enum, IntEnum
from types import MappingProxyType
from typing import Mapping, Optional

from .errors import UnrecognizedFormatError


class PixelFormat(IntEnum):
    """Enumerate every pixel format the decoders can surface."""

    DEPTH_COMPONENT = 0x1902
    DEPTH_STENCIL = 0x84F9
    ALPHA = 0x1906
    RGB = 0x1907
    RGBA = 0x1908
    LUMINANCE = 0x1909
    LUMINANCE_ALPHA = 0x190A

    RGB_DXT1 = 0x83F0
    RGBA_DXT1 = 0x83F1
    RGBA_DXT3 = 0x83F2
    RGBA_DXT5 = 0x83F3

    RGB_PVRTC_4BPPV1 = 0x8C00
    RGB_PVRTC_2BPPV1 = 0x8C01
    RGBA_PVRTC_4BPPV1 = 0x8C02
    RGBA_PVRTC_2BPPV1 = 0x8C03

    RGB_ETC1 = 0x8D64

    RGB_ATC = 0x8C92
    RGBA_ATC_EXPLICIT_ALPHA = 0x8C93
    RGBA_ATC_INTERPOLATED_ALPHA = 0x87EE


class BlockFamily(Enum):
    """Enumerate the size formulas used for mip level 0."""

    NONE = "none"
    BLOCK_4X4_8 = "block_4x4_8"
    BLOCK_4X4_16 = "block_4x4_16"
    PVRTC_4BPP = "pvrtc_4bpp"
    PVRTC_2BPP = "pvrtc_2bpp"


class FormatKind(Enum):
    COLOR = "color"
    DEPTH = "depth"
    COMPRESSED = "compressed"


@dataclass(frozen=True)
class FormatInfo:
    """Static capabilities of one pixel format."""

    format: PixelFormat
    kind: FormatKind
    family: BlockFamily = BlockFamily.NONE
    vendor: str = ""

    @property
    def is_compressed(self) -> bool:
        return self.kind is FormatKind.COMPRESSED


def _build_table() -> Mapping[int, FormatInfo]:
    P, K, B = PixelFormat, FormatKind, BlockFamily
    entries = [
        FormatInfo(P.DEPTH_COMPONENT, K.DEPTH),
        FormatInfo(P.DEPTH_STENCIL, K.DEPTH),
        FormatInfo(P.ALPHA, K.COLOR),
        FormatInfo(P.RGB, K.COLOR),
        FormatInfo(P.RGBA, K.COLOR),
        FormatInfo(P.LUMINANCE, K.COLOR),
        FormatInfo(P.LUMINANCE_ALPHA, K.COLOR),
        FormatInfo(P.RGB_DXT1, K.COMPRESSED, B.BLOCK_4X4_8, "dxt"),
        FormatInfo(P.RGBA_DXT1, K.COMPRESSED, B.BLOCK_4X4_8, "dxt"),
        FormatInfo(P.RGBA_DXT3, K.COMPRESSED, B.BLOCK_4X4_16, "dxt"),
        FormatInfo(P.RGBA_DXT5, K.COMPRESSED, B.BLOCK_4X4_16, "dxt"),
        FormatInfo(P.RGB_PVRTC_4BPPV1, K.COMPRESSED, B.PVRTC_4BPP, "pvrtc"),
        FormatInfo(P.RGBA_PVRTC_4BPPV1, K.COMPRESSED, B.PVRTC_4BPP, "pvrtc"),
        FormatInfo(P.RGB_PVRTC_2BPPV1, K.COMPRESSED, B.PVRTC_2BPP, "pvrtc"),
        FormatInfo(P.RGBA_PVRTC_2BPPV1, K.COMPRESSED, B.PVRTC_2BPP, "pvrtc"),
        FormatInfo(P.RGB_ETC1, K.COMPRESSED, B.BLOCK_4X4_8, "etc1"),
        FormatInfo(P.RGB_ATC, K.COMPRESSED, B.BLOCK_4X4_8, "atc"),
        FormatInfo(P.RGBA_ATC_EXPLICIT_ALPHA, K.COMPRESSED, B.BLOCK_4X4_16, "atc"),
        FormatInfo(P.RGBA_ATC_INTERPOLATED_ALPHA, K.COMPRESSED, B.BLOCK_4X4_16, "atc"),
    ]
    table = {int(e.format): e for e in entries}
    missing = set(PixelFormat) - {e.format for e in entries}
    if missing:
        raise RuntimeError(f"Format table is missing entries: {sorted(missing)}")
    return MappingProxyType(table)


FORMAT_TABLE: Mapping[int, FormatInfo] = _build_table()


class FormatCatalog:
    """Answer capability questions about numeric format codes.

    Decoders accept any object with this interface, so a host application
    can substitute its own catalog.
    """

    def __init__(self, table: Mapping[int, FormatInfo] = FORMAT_TABLE):
        self._table = table

    def info(self, code: int) -> Optional[FormatInfo]:
        return self._table.get(int(code))

    def is_valid(self, code: int) -> bool:
        return self.info(code) is not None

    def is_compressed_format(self, code: int) -> bool:
        info = self.info(code)
        return info is not None and info.is_compressed

    def is_color_format(self, code: int) -> bool:
        info = self.info(code)
        return info is not None and info.kind is FormatKind.COLOR

    def is_depth_format(self, code: int) -> bool:
        info = self.info(code)
        return info is not None and info.kind is FormatKind.DEPTH

    def _is_vendor(self, code: int, vendor: str) -> bool:
        info = self.info(code)
        return info is not None and info.vendor == vendor

    def is_dxt_format(self, code: int) -> bool:
        return self._is_vendor(code, "dxt")

    def is_pvrtc_format(self, code: int) -> bool:
        return self._is_vendor(code, "pvrtc")

    def is_etc1_format(self, code: int) -> bool:
        return self._is_vendor(code, "etc1")

    def is_atc_format(self, code: int) -> bool:
        return self._is_vendor(code, "atc")

    def family(self, code: int) -> BlockFamily:
        info = self.info(code)
        return info.family if info is not None else BlockFamily.NONE

    def lookup(self, code: int) -> PixelFormat:
        """Return the enum member for ``code`` or raise UnrecognizedFormatError."""
        info = self.info(code)
        if info is None:
            raise UnrecognizedFormatError(
                f"Unrecognized pixel format code 0x{int(code):04X}", code=int(code)
            )
        return info.format


DEFAULT_CATALOG = FormatCatalog()
