"""Bounds-checked little-endian field reader over an immutable byte buffer."""

import struct

from .errors import TruncatedDataError

_U32 = struct.Struct("<I")


class ByteReader:
    """Read fixed-width fields from a read-only view of ``buffer``.

    Every accessor checks its range first and raises TruncatedDataError
    instead of letting ``struct.error`` or a short slice escape. Slices
    returned by ``take``/``rest`` are views, never copies.
    """

    def __init__(self, buffer, offset: int = 0):
        view = memoryview(buffer)
        if view.format != "B" or view.ndim != 1:
            view = view.cast("B")
        self._view = view.toreadonly()
        self._size = len(self._view)
        self._check(offset, 0)
        self.offset = offset

    @property
    def size(self) -> int:
        return self._size

    @property
    def remaining(self) -> int:
        return self._size - self.offset

    def _check(self, offset: int, length: int) -> None:
        if offset < 0 or length < 0 or offset + length > self._size:
            raise TruncatedDataError(offset, length, self._size)

    def u32_at(self, offset: int) -> int:
        self._check(offset, 4)
        return _U32.unpack_from(self._view, offset)[0]

    def u32(self) -> int:
        value = self.u32_at(self.offset)
        self.offset += 4
        return value

    def bytes_at(self, offset: int, length: int) -> bytes:
        self._check(offset, length)
        return self._view[offset:offset + length].tobytes()

    def view_at(self, offset: int, length: int) -> memoryview:
        self._check(offset, length)
        return self._view[offset:offset + length]

    def skip(self, length: int) -> None:
        self._check(self.offset, length)
        self.offset += length

    def take(self, length: int) -> memoryview:
        view = self.view_at(self.offset, length)
        self.offset += length
        return view

    def rest(self) -> memoryview:
        return self._view[self.offset:]
