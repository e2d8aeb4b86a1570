"""Configuration loaded from the YAML document given on the command line."""

import logging
import os
from dataclasses import dataclass, field

import yaml

from journal_writer.errors import ConfigError
from journal_writer.source import FILES_CHOICES, SourceOptions

logger = logging.getLogger(__name__)


def _require(d: dict, key: str, section: str):
    if key not in d or d[key] in (None, ""):
        raise ConfigError(f"Missing required config key: {section}{key}")
    return d[key]


@dataclass(frozen=True)
class SinkConfig:
    target_dir: str
    filename: str = "journal.log"
    max_file_size_bytes: int = 10 * 1024 * 1024  # 10 MB
    rotation_interval_seconds: int = 86400
    max_file_count: int = 10
    max_age_days: int = 7
    compression_enabled: bool = True

    @classmethod
    def from_dict(cls, d: dict) -> "SinkConfig":
        return cls(
            target_dir=str(_require(d, "target_dir", "log_writer_config.")),
            filename=d.get("filename", cls.filename),
            max_file_size_bytes=int(d.get("max_file_size_bytes", cls.max_file_size_bytes)),
            rotation_interval_seconds=int(
                d.get("rotation_interval_seconds", cls.rotation_interval_seconds)
            ),
            max_file_count=int(d.get("max_file_count", cls.max_file_count)),
            max_age_days=int(d.get("max_age_days", cls.max_age_days)),
            compression_enabled=bool(d.get("compression_enabled", cls.compression_enabled)),
        )


@dataclass(frozen=True)
class Config:
    cursor_file: str
    log_writer_config: SinkConfig
    source: SourceOptions = field(default_factory=SourceOptions)
    read_timeout: float = 1.0
    cursor_save_interval: int = 1

    @classmethod
    def from_dict(cls, d: dict) -> "Config":
        if not isinstance(d, dict):
            raise ConfigError("Config document must be a mapping")
        sink_section = _require(d, "log_writer_config", "")
        if not isinstance(sink_section, dict):
            raise ConfigError("log_writer_config must be a mapping")
        source = SourceOptions.from_dict(d.get("source") or {})
        if source.files not in FILES_CHOICES:
            raise ConfigError(
                f"source.files must be one of {', '.join(FILES_CHOICES)}, got {source.files!r}"
            )
        read_timeout = float(d.get("read_timeout", 1.0))
        if read_timeout <= 0:
            raise ConfigError("read_timeout must be positive")
        save_interval = int(d.get("cursor_save_interval", 1))
        if save_interval < 1:
            raise ConfigError("cursor_save_interval must be at least 1")
        return cls(
            cursor_file=str(_require(d, "cursor_file", "")),
            log_writer_config=SinkConfig.from_dict(sink_section),
            source=source,
            read_timeout=read_timeout,
            cursor_save_interval=save_interval,
        )


def load_yaml(path: str) -> dict:
    """Read the YAML document at *path*."""
    try:
        with open(path, "r", encoding="utf-8") as f:
            return yaml.safe_load(f) or {}
    except OSError as e:
        raise ConfigError(f"Reading config file {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Parsing config file {path}: {e}") from e


def load_config(path: str) -> Config:
    """Build Config from the YAML file, then apply environment overrides.

    ``JOURNAL_WRITER_CURSOR_FILE`` and ``JOURNAL_WRITER_TARGET_DIR`` replace
    the corresponding document values.
    """
    logger.info("Reading config file %s", path)
    data = load_yaml(path)
    if not isinstance(data, dict):
        raise ConfigError("Config document must be a mapping")

    cursor_env = os.environ.get("JOURNAL_WRITER_CURSOR_FILE")
    if cursor_env:
        data["cursor_file"] = cursor_env
    target_env = os.environ.get("JOURNAL_WRITER_TARGET_DIR")
    if target_env:
        data.setdefault("log_writer_config", {})
        if isinstance(data["log_writer_config"], dict):
            data["log_writer_config"]["target_dir"] = target_env

    try:
        return Config.from_dict(data)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"Invalid config value: {e}") from e
