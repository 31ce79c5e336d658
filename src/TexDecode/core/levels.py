"""Byte size of mip level 0 for block-compressed formats."""

from .formats import DEFAULT_CATALOG, FORMAT_TABLE, BlockFamily


def _blocks_4x4(width: int, height: int) -> int:
    return ((width + 3) >> 2) * ((height + 3) >> 2)


def size_of_level0(fmt: int, width: int, height: int, catalog=DEFAULT_CATALOG) -> int:
    """Return the exact byte length of level 0, or 0 when no formula applies.

    ``catalog`` only needs ``is_compressed_format``; the block family comes
    from the closed ``FORMAT_TABLE``. A result of 0 tells the caller not to
    truncate the texel view.
    """
    if not catalog.is_compressed_format(fmt):
        return 0
    info = FORMAT_TABLE.get(int(fmt))
    family = info.family if info is not None else BlockFamily.NONE
    if family is BlockFamily.BLOCK_4X4_8:
        return _blocks_4x4(width, height) * 8
    if family is BlockFamily.BLOCK_4X4_16:
        return _blocks_4x4(width, height) * 16
    if family is BlockFamily.PVRTC_4BPP:
        return (max(width, 8) * max(height, 8) * 4 + 7) // 8
    if family is BlockFamily.PVRTC_2BPP:
        return (max(width, 16) * max(height, 8) * 2 + 7) // 8
    return 0
