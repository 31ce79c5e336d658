"""Decode result and manifest record dataclasses."""

from dataclasses import dataclass, asdict
from pathlib import PurePosixPath, PureWindowsPath

import numpy as np

from .formats import PixelFormat


@dataclass(frozen=True)
class DecodedTexture:
    """Level 0 of a decoded texture.

    ``buffer_view`` borrows the caller's buffer; keep that buffer alive for
    as long as the view (or ``as_array()``) is in use.
    """

    buffer_view: memoryview
    width: int
    height: int
    internal_format: PixelFormat

    @property
    def byte_length(self) -> int:
        return self.buffer_view.nbytes

    def as_array(self) -> np.ndarray:
        """Return a zero-copy uint8 array over the texel bytes."""
        return np.frombuffer(self.buffer_view, dtype=np.uint8)

    def tobytes(self) -> bytes:
        return self.buffer_view.tobytes()


@dataclass
class TextureRecord:
    """Single texture entry in the manifest."""

    filepath: str
    filename: str
    container: str = ""
    format_name: str = ""
    format_code: int = 0
    width: int = 0
    height: int = 0
    byte_length: int = 0
    file_size_kb: float = 0.0
    file_hash: str = ""
    status: str = "ok"
    error: str = ""

    def __post_init__(self) -> None:
        """Normalize and validate stored relative filepath for stable matching."""
        original = str(self.filepath)
        raw = original.replace("\\", "/")
        p = PurePosixPath(raw)
        win = PureWindowsPath(original)
        drive_like = len(raw) >= 2 and raw[1] == ":"
        if p.is_absolute() or win.is_absolute() or drive_like or raw.startswith("//"):
            raise ValueError(f"TextureRecord.filepath must be relative, got: {self.filepath}")

        parts = []
        for part in p.parts:
            if part in ("", "."):
                continue
            if part == "..":
                if not parts:
                    raise ValueError(
                        f"TextureRecord.filepath escapes root via '..': {self.filepath}"
                    )
                parts.pop()
                continue
            parts.append(part)

        if not parts:
            raise ValueError(f"TextureRecord.filepath is empty after normalization: {self.filepath}")
        self.filepath = "/".join(parts)

    @property
    def ok(self) -> bool:
        return self.status == "ok"

    def to_dict(self) -> dict:
        """Return dataclass fields as a plain dictionary."""
        return asdict(self)
