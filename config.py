"""
Configuration management for the Azure Storage Manager.

This module resolves tool settings from environment variables, after loading
an optional .env file, and validates them before any command runs.
"""

import os
import logging
from pathlib import Path
from typing import Optional
from dataclasses import dataclass
from enum import Enum

from dotenv import load_dotenv

from errors import InvalidSettingError
from identity import DEFAULT_LOCATION

OUTPUT_FORMATS = ("table", "json", "tsv", "yaml")
DEFAULT_CONFIG_FILE = "azure_storage.config"
DEFAULT_LOG_FILE = "storage_operations.log"


class LogLevel(Enum):
    """Logging levels accepted for the Azure SDK loggers."""
    DEBUG = logging.DEBUG
    INFO = logging.INFO
    WARNING = logging.WARNING
    ERROR = logging.ERROR
    CRITICAL = logging.CRITICAL


@dataclass
class ToolSettings:
    """
    Settings for a single invocation of the tool.

    Attributes:
        config_file: Path of the persisted configuration record
        log_file: Path of the append-only operations log
        output_format: Output format used by the list command
        subscription_id: Azure subscription used for management calls
        location: Azure region for new deployments
        azure_log_level: Level applied to the Azure SDK loggers
    """
    config_file: Path
    log_file: Path
    output_format: str = "table"
    subscription_id: Optional[str] = None
    location: str = DEFAULT_LOCATION
    azure_log_level: LogLevel = LogLevel.WARNING

    def __post_init__(self):
        """Validate settings after initialization."""
        self.config_file = Path(self.config_file)
        self.log_file = Path(self.log_file)
        self.output_format = self.output_format.lower()
        if self.output_format not in OUTPUT_FORMATS:
            raise InvalidSettingError(
                f"Unsupported output format '{self.output_format}'. "
                f"Choose one of: {', '.join(OUTPUT_FORMATS)}"
            )
        if not self.location:
            raise InvalidSettingError("Location cannot be empty")


class ConfigurationManager:
    """Manages application settings and environment variables."""

    def __init__(self, load_env_file: bool = True):
        """Initialize configuration manager and load environment variables."""
        if load_env_file:
            self._load_environment()

    def _load_environment(self) -> None:
        """Load environment variables from .env file."""
        if load_dotenv():
            logging.getLogger(__name__).debug("Environment variables loaded from .env file")

    def get_settings(self) -> ToolSettings:
        """Create and validate tool settings from environment variables."""
        level_name = os.getenv("AZURE_LOG_LEVEL", "WARNING").upper()
        try:
            azure_log_level = LogLevel[level_name]
        except KeyError:
            raise InvalidSettingError(
                f"Unsupported AZURE_LOG_LEVEL '{level_name}'"
            ) from None

        return ToolSettings(
            config_file=Path(os.getenv("AZURE_STORAGE_CONFIG_FILE", DEFAULT_CONFIG_FILE)),
            log_file=Path(os.getenv("AZURE_STORAGE_LOG_FILE", DEFAULT_LOG_FILE)),
            output_format=os.getenv("AZURE_OUTPUT_FORMAT", "table"),
            subscription_id=os.getenv("AZURE_SUBSCRIPTION_ID") or None,
            location=os.getenv("AZURE_LOCATION", DEFAULT_LOCATION),
            azure_log_level=azure_log_level,
        )
