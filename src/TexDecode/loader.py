"""Asynchronous fetch-then-decode adapter.

Decoding itself stays synchronous; this module only moves the blocking
byte fetch off the event loop.
"""

import asyncio
import logging
import urllib.request
from typing import Optional

from .config import DecoderConfig
from .core import DecodedTexture, container_for_path, decode_texture, read_texture_file

logger = logging.getLogger("texture_decode.loader")

_URL_SCHEMES = ("http://", "https://")


def _read_url(url: str, timeout: float, max_bytes: int) -> bytes:
    with urllib.request.urlopen(url, timeout=timeout) as response:
        if max_bytes:
            data = response.read(max_bytes + 1)
            if len(data) > max_bytes:
                raise ValueError(f"{url} exceeds max_bytes ({max_bytes:,})")
            return data
        return response.read()


async def fetch_bytes(source, timeout: float = 30.0, max_bytes: int = 0) -> bytes:
    """Fetch raw bytes from a URL or file path.

    Bytes-like sources are returned unchanged, so callers holding an
    in-memory buffer can use the same entry point.
    """
    if isinstance(source, (bytes, bytearray, memoryview)):
        return source
    source = str(source)
    if source.startswith(_URL_SCHEMES):
        logger.debug("Fetching %s", source)
        read = asyncio.to_thread(_read_url, source, timeout, max_bytes)
    else:
        logger.debug("Reading %s", source)
        read = asyncio.to_thread(read_texture_file, source, max_bytes)
    return await asyncio.wait_for(read, timeout=timeout)


async def load_texture(source, container: Optional[str] = None,
                       config: Optional[DecoderConfig] = None) -> DecodedTexture:
    """Fetch ``source`` and decode level 0 of the texture it holds.

    The container is taken from ``container``, then from the file extension,
    then from the magic bytes.
    """
    config = config or DecoderConfig()
    data = await fetch_bytes(
        source,
        timeout=config.fetch.timeout_seconds,
        max_bytes=config.fetch.max_bytes,
    )
    if container is None and not isinstance(source, (bytes, bytearray, memoryview)):
        container = container_for_path(str(source).split("?", 1)[0])
    return decode_texture(data, container)
