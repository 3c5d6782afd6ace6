"""Configuration management for isoval using Pydantic models."""

import json
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr

CONFIG_FILE_NAME = ".isoval.json"


class OutputFormat(str, Enum):
    """Output format types."""
    TEXT = "text"
    TABLE = "table"
    JSON = "json"


class LogLevel(str, Enum):
    """Logging levels."""
    ERROR = "error"
    WARN = "warn"
    INFO = "info"
    DEBUG = "debug"

    @property
    def logging_level(self) -> str:
        return "WARNING" if self is LogLevel.WARN else self.value.upper()


class RulesConfig(BaseModel):
    """Rule source configuration section."""
    dir: str = "rules"
    include_default: bool = Field(alias="includeDefault", default=False)

    model_config = ConfigDict(populate_by_name=True)


class OutputConfig(BaseModel):
    """Output configuration section."""
    format: OutputFormat = OutputFormat.TEXT


class LoggingConfig(BaseModel):
    """Logging configuration section."""
    level: LogLevel = LogLevel.WARN


class IsovalConfig(BaseModel):
    """Complete isoval configuration model."""
    rules: RulesConfig = Field(default_factory=RulesConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = ConfigDict(extra="forbid")

    # Directory relative paths in the file are resolved against
    _base_dir: Path | None = PrivateAttr(default=None)

    def rules_dir(self) -> Path:
        """Rules directory, resolved against the config file location."""
        rules_dir = Path(self.rules.dir)
        if rules_dir.is_absolute():
            return rules_dir
        return (self._base_dir or Path.cwd()) / rules_dir


def load_config(config_path: str | Path | None = None) -> IsovalConfig:
    """Load configuration from file with fallback to defaults.

    Args:
        config_path: Optional path to configuration file. If None, searches
                    current directory and parents for .isoval.json

    Returns:
        IsovalConfig: Loaded and validated configuration

    Raises:
        FileNotFoundError: If config file specified but not found
        ValueError: If configuration is invalid
    """
    if config_path is None:
        config_path = find_config_file()
        if config_path is None:
            return create_default_config()
    else:
        config_path = Path(config_path)
        if not config_path.exists():
            raise FileNotFoundError(f"Config file '{config_path}' not found")

    try:
        with open(config_path, encoding="utf-8") as f:
            config_data = json.load(f)
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in config file {config_path}: {e}")

    if not isinstance(config_data, dict):
        raise ValueError(f"Config file {config_path} must contain a JSON object")

    try:
        config = IsovalConfig(**config_data)
    except Exception as e:
        raise ValueError(f"Failed to load config from {config_path}: {e}")

    config._base_dir = config_path.resolve().parent
    return config


def find_config_file(start_dir: Path | None = None) -> Path | None:
    """Find .isoval.json configuration file by searching up directory tree.

    Args:
        start_dir: Directory to start search from (default: current directory)

    Returns:
        Path to config file if found, None otherwise
    """
    if start_dir is None:
        start_dir = Path.cwd()

    current = Path(start_dir).resolve()

    while True:
        config_file = current / CONFIG_FILE_NAME
        if config_file.exists():
            return config_file

        parent = current.parent
        if parent == current:  # Reached root directory
            break
        current = parent

    return None


def create_default_config() -> IsovalConfig:
    """Create default configuration."""
    return IsovalConfig()
