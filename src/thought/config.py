"""Configuration management for thought-cli."""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

logger = logging.getLogger(__name__)

THOUGHT_HOME = Path(os.environ.get("THOUGHT_HOME", Path.home() / "thought"))
CONFIG_FILE = THOUGHT_HOME / "config" / "thought.conf"

METADATA_FILENAME = "metadata.json"


@dataclass
class BackupConfig:
    """Backup naming and retention settings."""

    max_backups_per_section: int = 5
    retention_days: int = 30  # 0 disables age-based cleanup
    use_compression: bool = True
    backup_extension: str = ".bak"
    compressed_suffix: str = ".gz"
    full_backup_prefix: str = "full-backup-"


@dataclass
class Config:
    """thought-cli configuration."""

    base_dir: str = ""
    log_rotation_size: int = 5 * 1024 * 1024
    default_section: str = "base"
    default_section_description: str = "General thoughts"
    max_section_name_length: int = 30
    max_description_length: int = 100
    max_logs_to_display: int = 20
    auto_backup_minutes: int = 60
    backup: BackupConfig = field(default_factory=BackupConfig)

    @property
    def home(self) -> Path:
        if self.base_dir:
            return Path(self.base_dir).expanduser()
        return THOUGHT_HOME

    @property
    def sections_dir(self) -> Path:
        return self.home / "sections"

    @property
    def backup_dir(self) -> Path:
        return self.home / "backups"

    @property
    def metadata_file(self) -> Path:
        return self.sections_dir / METADATA_FILENAME


def _parse_int(key: str, value: str, default: int) -> int:
    try:
        return int(value)
    except ValueError:
        logger.warning(f"Invalid integer for {key.upper()}: {value!r}, using {default}")
        return default


def _parse_bool(key: str, value: str, default: bool) -> bool:
    lowered = value.lower()
    if lowered in ("1", "true", "yes", "on"):
        return True
    if lowered in ("0", "false", "no", "off"):
        return False
    logger.warning(f"Invalid boolean for {key.upper()}: {value!r}, using {default}")
    return default


def _unquote(value: str) -> str:
    # Handle quoted values with inline comments: "value" # comment
    if value.startswith('"') or value.startswith("'"):
        quote = value[0]
        end_quote = value.find(quote, 1)
        if end_quote != -1:
            return value[1:end_quote]
        return value[1:]
    # Unquoted: strip inline comments
    if "#" in value:
        value = value.split("#")[0].strip()
    return value


def load_config(config_file: Path | None = None) -> Config:
    """Load configuration from thought.conf file."""
    config = Config()
    config_file = config_file or CONFIG_FILE

    if not config_file.exists():
        return config

    try:
        text = config_file.read_text(encoding="utf-8")
    except OSError as e:
        logger.error(f"Failed to read {config_file}: {e}")
        return config

    for line in text.splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue

        if "=" not in line:
            continue

        key, _, value = line.partition("=")
        key = key.strip().lower()
        value = _unquote(value.strip())

        match key:
            case "base_dir":
                config.base_dir = value
            case "log_rotation_size":
                config.log_rotation_size = _parse_int(key, value, config.log_rotation_size)
            case "default_section":
                config.default_section = value
            case "default_section_description":
                config.default_section_description = value
            case "max_section_name_length":
                config.max_section_name_length = _parse_int(key, value, config.max_section_name_length)
            case "max_description_length":
                config.max_description_length = _parse_int(key, value, config.max_description_length)
            case "max_logs_to_display":
                config.max_logs_to_display = _parse_int(key, value, config.max_logs_to_display)
            case "auto_backup_minutes":
                config.auto_backup_minutes = _parse_int(key, value, config.auto_backup_minutes)
            case "max_backups_per_section":
                config.backup.max_backups_per_section = _parse_int(
                    key, value, config.backup.max_backups_per_section
                )
            case "retention_days":
                config.backup.retention_days = _parse_int(key, value, config.backup.retention_days)
            case "use_compression":
                config.backup.use_compression = _parse_bool(key, value, config.backup.use_compression)
            case _:
                logger.debug(f"Ignoring unknown config key: {key.upper()}")

    return config
