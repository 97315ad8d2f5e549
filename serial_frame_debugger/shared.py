"""
Shared utilities: configuration file and logging setup.
"""
import sys
import logging
from pathlib import Path
from configparser import ConfigParser, Error as ConfigParserError
from typing import Optional

LOGGER_NAME = "serial_frame_debugger"
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"


class ConfigError(Exception):
    """The configuration file is missing or malformed."""


class ConfigManager:
    """Manages optional defaults from an INI file."""

    def __init__(self, config_path: Optional[Path] = None):
        self.config_path = Path(config_path) if config_path else None
        self.config = ConfigParser(interpolation=None)

    def load(self) -> ConfigParser:
        """Read the config file, if one was given."""
        if self.config_path is None:
            return self.config
        if not self.config_path.is_file():
            raise ConfigError(f"Config file not found: {self.config_path}")
        try:
            self.config.read(self.config_path, encoding="utf-8")
        except ConfigParserError as e:
            raise ConfigError(f"Invalid config file {self.config_path}: {e}") from e
        return self.config

    def get(self, section: str, key: str, fallback: Optional[str] = None) -> Optional[str]:
        """Get config value with fallback."""
        value = self.config.get(section, key, fallback=None)
        if value is None or value.strip() == "":
            return fallback
        return value.strip()

    def getint(self, section: str, key: str, fallback: Optional[int] = None) -> Optional[int]:
        """Get integer config value; accepts 0x-prefixed hex."""
        value = self.get(section, key)
        if value is None:
            return fallback
        try:
            return int(value, 0)
        except ValueError as e:
            raise ConfigError(f"[{section}] {key}: expected an integer, got {value!r}") from e


class LogManager:
    """Manages logging for the package loggers."""

    def __init__(self, level: str = "WARNING", name: str = LOGGER_NAME):
        self.logger = logging.getLogger(name)
        self.logger.setLevel(getattr(logging, level.upper(), logging.WARNING))

        # Re-running setup replaces our handler instead of stacking another.
        for handler in list(self.logger.handlers):
            if getattr(handler, "_frame_debugger", False):
                self.logger.removeHandler(handler)

        ch = logging.StreamHandler(sys.stderr)
        ch._frame_debugger = True
        ch.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATEFMT))
        self.logger.addHandler(ch)

    def get_logger(self) -> logging.Logger:
        """Get configured logger."""
        return self.logger
