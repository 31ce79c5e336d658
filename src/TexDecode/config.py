"""Define typed configuration models for texture decoding tools.

Use `DecoderConfig` to load, validate, and persist runtime settings.
"""

import dataclasses
import logging
import os
import threading
from dataclasses import dataclass, field
from typing import List

import yaml

logger = logging.getLogger("texture_decode.config")


@dataclass
class ScanConfig:
    """Store settings for directory scanning."""

    extensions: List[str] = field(default_factory=lambda: [".dds", ".ktx"])
    follow_symlinks: bool = False


@dataclass
class FetchConfig:
    """Store settings for the async byte-fetch adapter."""

    timeout_seconds: float = 30.0
    max_bytes: int = 268435456  # 256 MB


_SUPPORTED_CONFIG_VERSION = 1
_VALID_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


@dataclass
class DecoderConfig:
    """Master decoder configuration."""

    config_version: int = 1
    log_level: str = "INFO"
    log_file: str = ""
    output_dir: str = "./decoded"
    manifest_path: str = ""
    max_file_bytes: int = 268435456  # 256 MB

    scan: ScanConfig = field(default_factory=ScanConfig)
    fetch: FetchConfig = field(default_factory=FetchConfig)

    @classmethod
    def from_yaml(cls, path: str) -> "DecoderConfig":
        """Load decoder configuration from YAML or return defaults."""
        if not os.path.exists(path):
            logger.info("Config file '%s' not found. Using defaults.", path)
            config = cls()
            config.validate()
            return config
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise ValueError(
                f"Failed to parse YAML config '{path}': {exc}"
            ) from exc
        if not isinstance(data, dict):
            raise ValueError(
                f"Config file '{path}' must contain a YAML mapping, "
                f"got {type(data).__name__}"
            )
        yaml_version = data.get("config_version", 1)
        if isinstance(yaml_version, int) and yaml_version > _SUPPORTED_CONFIG_VERSION:
            logger.warning(
                "Config file '%s' has config_version=%d, but this build only "
                "supports up to version %d. Some settings may be ignored.",
                path, yaml_version, _SUPPORTED_CONFIG_VERSION,
            )
        config = cls()
        _merge_dict_to_dataclass(config, data)
        try:
            config.validate()
        except ValueError as exc:
            raise ValueError(f"{path}: {exc}") from exc
        return config

    def to_yaml(self, path: str):
        """Write decoder configuration to a YAML file."""
        data = dataclasses.asdict(self)
        os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
        ext = os.path.splitext(path)[1]
        tmp_path = f"{path}.tmp.{os.getpid()}.{threading.get_ident()}{ext}"
        try:
            with open(tmp_path, "w", encoding="utf-8") as f:
                yaml.dump(data, f, default_flow_style=False, sort_keys=False)
            os.replace(tmp_path, path)
        finally:
            if os.path.exists(tmp_path):
                try:
                    os.remove(tmp_path)
                except OSError:
                    pass

    def validate(self):
        """Validate configuration values. Raises ValueError on invalid config."""
        errors = []

        if str(self.log_level).upper() not in _VALID_LOG_LEVELS:
            errors.append(
                f"log_level must be one of {sorted(_VALID_LOG_LEVELS)}, "
                f"got '{self.log_level}'"
            )
        if self.max_file_bytes < 0:
            errors.append("max_file_bytes must be >= 0 (0 = unlimited)")
        if not self.scan.extensions:
            errors.append("scan.extensions must list at least one extension")
        for ext in self.scan.extensions:
            if not isinstance(ext, str) or not ext.startswith("."):
                errors.append(f"scan.extensions entry must start with '.', got {ext!r}")
        if self.fetch.timeout_seconds <= 0:
            errors.append("fetch.timeout_seconds must be > 0")
        if self.fetch.max_bytes < 0:
            errors.append("fetch.max_bytes must be >= 0 (0 = unlimited)")

        if errors:
            raise ValueError(
                "Configuration validation failed:\n" +
                "\n".join(f"  - {e}" for e in errors)
            )

        self.scan.extensions = [ext.lower() for ext in self.scan.extensions]


def _merge_dict_to_dataclass(obj, data: dict, _path: str = ""):
    for key, value in data.items():
        full_key = f"{_path}{key}"
        if not hasattr(obj, key):
            logger.warning(f"Unknown config key ignored: '{full_key}'")
            continue
        field_val = getattr(obj, key)
        if dataclasses.is_dataclass(field_val) and isinstance(value, dict):
            _merge_dict_to_dataclass(field_val, value, f"{full_key}.")
            continue
        # Reject None for fields with non-None defaults
        if value is None and field_val is not None:
            logger.warning(
                f"Config key '{full_key}' is null but field default is "
                f"{type(field_val).__name__}. Using default value."
            )
            continue
        expected_type = type(field_val)
        # Check type compatibility (allow int->float and float->int promotion)
        if (field_val is not None
                and not isinstance(value, expected_type)
                and not (expected_type is float
                         and isinstance(value, int))
                and not (expected_type is int
                         and isinstance(value, float)
                         and value == int(value))):
            logger.warning(
                f"Config type mismatch for '{full_key}': "
                f"expected {expected_type.__name__}, "
                f"got {type(value).__name__} ({value!r}). "
                f"Using default value."
            )
            continue
        # Promote exact-integer floats to int (e.g. YAML 4.0 -> 4)
        if (expected_type is int and isinstance(value, float)
                and value == int(value)):
            value = int(value)
        setattr(obj, key, value)
