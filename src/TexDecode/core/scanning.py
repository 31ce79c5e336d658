"""Texture scanning, manifest I/O, and file hashing."""

import csv
import dataclasses
import hashlib
import logging
import os
import threading
import uuid
from pathlib import Path
from typing import Iterator, List, Optional, Tuple

from ..config import DecoderConfig
from .errors import TextureDecodeError
from .io import container_for_path, decode_texture, detect_container, read_texture_file
from .records import DecodedTexture, TextureRecord

logger = logging.getLogger("texture_decode")


def file_hash_bytes(data) -> str:
    """Compute SHA-256 hash from in-memory bytes."""
    return hashlib.sha256(data).hexdigest()


def file_hash(filepath: str) -> str:
    """Compute SHA-256 hash of a file."""
    h = hashlib.sha256()
    with open(filepath, "rb") as f:
        for chunk in iter(lambda: f.read(8192), b""):
            h.update(chunk)
    return h.hexdigest()


def _inspect(fpath: str, rel_path: str, config: DecoderConfig):
    """Return ``(record, texture)``; ``texture`` is None when decoding failed."""
    fname = os.path.basename(fpath)
    container = container_for_path(fpath) or ""
    record = TextureRecord(filepath=rel_path, filename=fname, container=container)
    try:
        data = read_texture_file(fpath, config.max_file_bytes)
        record.file_size_kb = round(len(data) / 1024.0, 1)
        record.file_hash = file_hash_bytes(data)
        if not container:
            container = record.container = detect_container(data)
        texture = decode_texture(data, container)
    except TextureDecodeError as e:
        logger.warning("Failed to decode %s: %s", fpath, e)
        record.status, record.error = "error", f"{type(e).__name__}: {e}"
        return record, None
    except (OSError, ValueError) as e:
        logger.warning("Failed to read %s: %s", fpath, e)
        record.status, record.error = "error", f"{type(e).__name__}: {e}"
        return record, None
    except Exception as e:
        logger.error("Unexpected error reading %s: %s", fpath, e, exc_info=True)
        record.status, record.error = "error", f"{type(e).__name__}: {e}"
        return record, None

    record.format_name = texture.internal_format.name
    record.format_code = int(texture.internal_format)
    record.width = texture.width
    record.height = texture.height
    record.byte_length = texture.byte_length
    return record, texture


def iter_textures(
    input_dir: str, config: DecoderConfig,
) -> Iterator[Tuple[str, TextureRecord, Optional[DecodedTexture]]]:
    """Yield ``(path, record, texture)`` for every container file under ``input_dir``.

    Each file is read and decoded once; ``texture`` is None for failed files.
    """
    supported = {ext.lower() for ext in config.scan.extensions}
    input_root_real = os.path.realpath(input_dir)

    for root, dirs, files in os.walk(input_dir, followlinks=config.scan.follow_symlinks):
        dirs.sort()
        for fname in sorted(files):
            if Path(fname).suffix.lower() not in supported:
                continue

            fpath = os.path.join(root, fname)
            real_fpath = os.path.realpath(fpath)
            try:
                if os.path.commonpath([input_root_real, real_fpath]) != input_root_real:
                    logger.warning(
                        "Skipping file outside input root via symlink/path traversal: %s",
                        fpath,
                    )
                    continue
            except ValueError:
                logger.warning("Skipping file with incompatible path root: %s", fpath)
                continue

            record, texture = _inspect(fpath, os.path.relpath(fpath, input_dir), config)
            yield fpath, record, texture


def scan_textures(input_dir: str, config: DecoderConfig) -> List[TextureRecord]:
    """Scan input directory, decode every container file, and build records."""
    records = [record for _, record, _ in iter_textures(input_dir, config)]
    failed = sum(1 for r in records if not r.ok)
    logger.info("Scanned %d textures from %s (%d failed)", len(records), input_dir, failed)
    return records


def inspect_texture(path: str, config: DecoderConfig):
    """Decode a single file; return ``(record, texture)`` with ``texture`` None on failure."""
    return _inspect(path, os.path.basename(path), config)


def inspect_file(path: str, config: DecoderConfig) -> TextureRecord:
    """Decode a single file into a record relative to its own directory."""
    return inspect_texture(path, config)[0]


def save_manifest(records: List[TextureRecord], path: str):
    """Write texture records to CSV manifest file."""
    os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
    fieldnames = [f.name for f in dataclasses.fields(TextureRecord)]
    tmp_path = f"{path}.tmp.{os.getpid()}.{threading.get_ident()}.{uuid.uuid4().hex[:8]}"
    try:
        with open(tmp_path, "w", newline="", encoding="utf-8") as f:
            writer = csv.DictWriter(f, fieldnames=fieldnames)
            writer.writeheader()
            for r in records:
                writer.writerow(r.to_dict())
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_path, path)
    finally:
        if os.path.exists(tmp_path):
            try:
                os.remove(tmp_path)
            except OSError:
                pass
    logger.info("Manifest saved: %s (%d entries)", path, len(records))


_INT_FIELDS = ("format_code", "width", "height", "byte_length")


def load_manifest(path: str) -> List[TextureRecord]:
    """Load texture records from a CSV manifest file."""
    records = []
    known_fields = {f.name for f in dataclasses.fields(TextureRecord)}
    try:
        with open(path, "r", newline="", encoding="utf-8") as f:
            reader = csv.DictReader(f)
            for row_idx, row in enumerate(reader, start=2):
                try:
                    required = ["filepath", "filename", "container", "status"]
                    missing = [name for name in required if row.get(name) is None]
                    if missing:
                        raise KeyError(f"missing required columns: {', '.join(missing)}")
                    for name in _INT_FIELDS:
                        if row.get(name) not in (None, ""):
                            row[name] = int(row[name])
                    if row.get("file_size_kb") not in (None, ""):
                        row["file_size_kb"] = float(row["file_size_kb"])
                    # Filter to known fields for forward compatibility.
                    filtered_row = {
                        k: v for k, v in row.items()
                        if k in known_fields and v not in (None, "")
                    }
                    records.append(TextureRecord(**filtered_row))
                except Exception as e:
                    raise ValueError(
                        f"Failed to parse manifest '{path}' at row {row_idx}: {e}"
                    ) from e
    except OSError as e:
        raise OSError(f"Failed to read manifest '{path}': {e}") from e
    except csv.Error as e:
        raise ValueError(f"Malformed CSV manifest '{path}': {e}") from e
    return records
