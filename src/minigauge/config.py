"""Configuration management for minigauge using Pydantic models."""

import json
import logging
from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = ".minigauge.json"

# Administrative columns that never carry interesting data in a diagram
HIDDEN_FIELDS = (
    "created_at",
    "created_on",
    "updated_at",
    "updated_on",
    "lock_version",
    "type",
    "id",
    "position",
    "parent_id",
    "lft",
    "rgt",
    "quote",
    "template",
    "salt",
    "persistence_token",
    "crypted_password",
    "current_login_at",
)


class LogLevel(str, Enum):
    """Accepted values of the ``logging.level`` setting; trace is DEBUG with another name."""
    ERROR = "error"
    WARN = "warn"
    INFO = "info"
    DEBUG = "debug"
    TRACE = "trace"


_LEVEL_MAP = {
    LogLevel.ERROR: logging.ERROR,
    LogLevel.WARN: logging.WARNING,
    LogLevel.INFO: logging.INFO,
    LogLevel.DEBUG: logging.DEBUG,
    LogLevel.TRACE: logging.DEBUG,
}


class LoggingConfig(BaseModel):
    """Logging configuration section."""
    level: LogLevel = LogLevel.INFO


class GaugeConfig(BaseModel):
    """Complete minigauge configuration model."""
    hidden_fields: list[str] = Field(alias="hiddenFields", default_factory=lambda: list(HIDDEN_FIELDS))
    extra_hidden_fields: list[str] = Field(alias="extraHiddenFields", default_factory=list)
    placeholder_color: str = Field(alias="placeholderColor", default="gray61")
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    def denied_fields(self, table_name: str | None = None) -> frozenset[str]:
        """Field names excluded from node attributes, optionally for one table."""
        denied = set(self.hidden_fields) | set(self.extra_hidden_fields)
        if table_name:
            denied.add(f"{table_name}_count")
        return frozenset(denied)


class DiagramOptions(BaseModel):
    """Options accepted by the ``to_dot_notation`` entry points."""
    include: Any = None
    graph_type: str = Field(alias="graphType", default="Model")
    show_label: bool = Field(alias="showLabel", default=True)
    title: str | None = None
    description: str = ""

    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    @model_validator(mode="after")
    def default_title(self):
        if self.title is None:
            self.title = f"{self.graph_type} diagram"
        return self

    @classmethod
    def coerce(cls, options: "DiagramOptions | dict | None") -> "DiagramOptions":
        """Accept options as a model, a plain mapping or nothing at all."""
        if options is None:
            return cls()
        if isinstance(options, cls):
            return options
        return cls.model_validate(options)


def load_config(config_path: str | Path | None = None) -> GaugeConfig:
    """Read the diagram settings that apply to the current project.

    A project keeps its settings in ``.minigauge.json``: extra field names to
    hide from nodes (``extraHiddenFields``), or a replacement denylist
    (``hiddenFields``), the colour of placeholder nodes and the log level.
    Without a file every diagram uses the built-in denylist.

    Args:
        config_path: Settings file to read. When omitted, the nearest
                    ``.minigauge.json`` above the working directory is used

    Raises:
        ValueError: If the file is not JSON or holds unknown or mistyped settings
    """
    path = find_config_file() if config_path is None else Path(config_path)
    if path is None or not path.exists():
        logger.debug("No minigauge settings file, using defaults")
        return GaugeConfig()

    try:
        settings = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in config file {path}: {e}") from e

    try:
        config = GaugeConfig.model_validate(settings)
    except ValidationError as e:
        raise ValueError(f"Invalid minigauge settings in {path}: {e}") from e
    logger.debug(f"Loaded minigauge settings from {path}")
    return config


def find_config_file(start_dir: Path | None = None) -> Path | None:
    """Closest ``.minigauge.json`` in ``start_dir`` or one of its ancestors."""
    start = Path(start_dir or Path.cwd()).resolve()
    for directory in (start, *start.parents):
        candidate = directory / CONFIG_FILE_NAME
        if candidate.exists():
            return candidate
    return None


def setup_logging(config: GaugeConfig) -> logging.Logger:
    """Apply the configured log level to the minigauge logger tree."""
    package_logger = logging.getLogger("minigauge")
    package_logger.setLevel(_LEVEL_MAP[config.logging.level])
    return package_logger
