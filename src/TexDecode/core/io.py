"""Texture file I/O and container dispatch."""

import logging
import os
import threading
from pathlib import Path
from typing import Optional

from ..containers.dds import DDS_MAGIC, decode_dds
from ..containers.ktx import KTX_IDENTIFIER, decode_ktx
from .errors import MalformedHeaderError
from .formats import DEFAULT_CATALOG
from .records import DecodedTexture

logger = logging.getLogger("texture_decode.io")

CONTAINER_EXTENSIONS = {
    ".dds": "dds",
    ".ktx": "ktx",
}

_DECODERS = {
    "dds": decode_dds,
    "ktx": decode_ktx,
}


def container_for_path(path) -> Optional[str]:
    """Return the container name implied by a file extension, if any."""
    return CONTAINER_EXTENSIONS.get(Path(str(path)).suffix.lower())


def detect_container(buffer) -> str:
    """Identify the container from its leading magic bytes."""
    head = bytes(memoryview(buffer)[:len(KTX_IDENTIFIER)])
    if head[:4] == DDS_MAGIC.to_bytes(4, "little"):
        return "dds"
    if head == KTX_IDENTIFIER:
        return "ktx"
    raise MalformedHeaderError("Buffer is neither a DDS nor a KTX container")


def decode_texture(buffer, container: Optional[str] = None,
                   catalog=DEFAULT_CATALOG) -> DecodedTexture:
    """Decode ``buffer`` with the decoder for ``container`` (sniffed when None)."""
    if container is None:
        container = detect_container(buffer)
    decoder = _DECODERS.get(container)
    if decoder is None:
        raise ValueError(
            f"Unknown container '{container}'. Expected one of {sorted(_DECODERS)}"
        )
    texture = decoder(buffer, catalog=catalog)
    logger.debug(
        "Decoded %s: %dx%d %s, %d texel bytes",
        container, texture.width, texture.height,
        texture.internal_format.name, texture.byte_length,
    )
    return texture


def read_texture_file(path: str, max_bytes: int = 0) -> bytes:
    """Read a whole texture file, refusing files larger than ``max_bytes`` (0 = unlimited)."""
    if max_bytes < 0:
        raise ValueError("max_bytes must be >= 0 (0 = unlimited)")
    size = os.path.getsize(path)
    if max_bytes and size > max_bytes:
        raise ValueError(
            f"{path} is {size:,} bytes, exceeding max_bytes ({max_bytes:,})"
        )
    with open(path, "rb") as f:
        return f.read()


def dump_level0(texture: DecodedTexture, path: str) -> str:
    """Write the level-0 texel bytes of ``texture`` to ``path`` atomically."""
    os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
    tmp_path = f"{path}.tmp.{os.getpid()}.{threading.get_ident()}"
    try:
        with open(tmp_path, "wb") as f:
            f.write(texture.buffer_view)
        os.replace(tmp_path, path)
    finally:
        if os.path.exists(tmp_path):
            try:
                os.remove(tmp_path)
            except OSError:
                pass
    logger.debug("Wrote %d level-0 bytes to %s", texture.byte_length, path)
    return path
