"""
Configuration management for the Fahrplan application.

This module handles loading, saving, and validating application configuration
using Pydantic models for type safety and validation.
"""

import json
import logging
import os
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, ValidationError

from version import __api_url__

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = __api_url__

# Diagnostic endpoint, relative to the base URL, used when about_url is unset
DEFAULT_ABOUT_PATH = "/location/stuttgart"

BASE_URL_ENV = "FAHRPLAN_BASE_URL"
API_KEY_ENV = "FAHRPLAN_API_KEY"


class APIConfig(BaseModel):
    """Configuration for Fahrplan API access."""

    base_url: str = DEFAULT_BASE_URL
    api_key: Optional[str] = Field(None, description="Optional API key sent as a bearer token")
    about_url: Optional[str] = Field(None, description="Diagnostic URL, defaults to a location lookup on base_url")
    timeout_seconds: float = Field(10, gt=0)
    close_timeout_seconds: float = Field(3.0, gt=0)

    def resolved_about_url(self) -> str:
        """Diagnostic URL, derived from base_url unless set explicitly."""
        if self.about_url:
            return self.about_url
        return self.base_url.rstrip("/") + DEFAULT_ABOUT_PATH


class WindowConfig(BaseModel):
    """Configuration for the main window."""

    title: str = "Fahrplan"
    width: int = Field(1000, gt=0)
    height: int = Field(600, gt=0)


class ConfigData(BaseModel):
    """Main configuration data model."""

    api: APIConfig = APIConfig()
    window: WindowConfig = WindowConfig()


class ConfigurationError(Exception):
    """Exception raised for configuration-related errors."""

    pass


class ConfigManager:
    """
    Manages application configuration with file persistence.

    Handles loading configuration from JSON files, creating default
    configurations, and saving changes back to disk. The base URL and
    API key can be overridden through the environment so the key does
    not have to be stored in the file.
    """

    def __init__(self, config_path: Optional[str] = None):
        """
        Initialize the configuration manager.

        Args:
            config_path: Path to the configuration file. If None, uses the
                per-user configuration directory
        """
        if config_path is None:
            self.config_path = self.get_default_config_path()
        else:
            self.config_path = Path(config_path)
        self.config: Optional[ConfigData] = None

        logger.debug(f"ConfigManager initialized with path: {self.config_path}")

    @staticmethod
    def get_default_config_path() -> Path:
        """
        Get the default configuration file path.

        On Windows, uses AppData/Roaming/Fahrplan/config.json
        On Linux, uses XDG_CONFIG_HOME/Fahrplan/config.json or ~/.config/Fahrplan/config.json

        Returns:
            Path: Default configuration file path
        """
        if os.name == "nt":  # Windows
            appdata = os.environ.get("APPDATA")
            if appdata:
                return Path(appdata) / "Fahrplan" / "config.json"
        else:
            xdg_config = os.environ.get("XDG_CONFIG_HOME")
            if xdg_config:
                config_dir = Path(xdg_config) / "Fahrplan"
            else:
                config_dir = Path.home() / ".config" / "Fahrplan"
            return config_dir / "config.json"

        # Fallback to current directory for development
        return Path("config.json")

    def load_config(self) -> ConfigData:
        """
        Load configuration from file.

        If the configuration file doesn't exist, creates a default one.
        Environment overrides are applied after the file is read.

        Returns:
            ConfigData: The loaded configuration

        Raises:
            ConfigurationError: If the configuration file is invalid
        """
        logger.debug(f"Loading config from: {self.config_path}")

        if not self.config_path.exists():
            logger.info(f"Config file doesn't exist, creating default at: {self.config_path}")
            self.create_default_config()

        try:
            with open(self.config_path, "r", encoding="utf-8") as f:
                data = json.load(f)
            config = ConfigData(**data)
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"Invalid JSON in config file: {e}")
        except ValidationError as e:
            raise ConfigurationError(f"Invalid configuration values: {e}")
        except (OSError, TypeError) as e:
            raise ConfigurationError(f"Failed to load config: {e}")

        self.config = self._apply_environment_overrides(config)
        logger.debug(f"Successfully loaded config from: {self.config_path}")
        return self.config

    def _apply_environment_overrides(self, config: ConfigData) -> ConfigData:
        """Apply FAHRPLAN_BASE_URL and FAHRPLAN_API_KEY if set."""
        overrides = {}

        base_url = os.environ.get(BASE_URL_ENV)
        if base_url:
            overrides["base_url"] = base_url
            logger.info(f"Using base URL from {BASE_URL_ENV}")

        api_key = os.environ.get(API_KEY_ENV)
        if api_key:
            overrides["api_key"] = api_key
            logger.info(f"Using API key from {API_KEY_ENV}")

        if not overrides:
            return config

        return config.model_copy(update={"api": config.api.model_copy(update=overrides)})

    def save_config(self, config: ConfigData) -> bool:
        """
        Save configuration to file.

        Args:
            config: Configuration data to save

        Returns:
            bool: True if saved successfully, False otherwise
        """
        logger.info(f"Saving config to: {self.config_path}")

        try:
            self.config_path.parent.mkdir(parents=True, exist_ok=True)

            with open(self.config_path, "w", encoding="utf-8") as f:
                json.dump(config.model_dump(), f, indent=2, ensure_ascii=False)

            self.config = config
            logger.info(f"Successfully saved config to: {self.config_path}")
            return True

        except OSError as e:
            logger.error(f"Failed to save config to {self.config_path}: {e}")
            return False

    def create_default_config(self) -> None:
        """Create a default configuration file."""
        self.save_config(ConfigData())

    def has_api_key(self) -> bool:
        """
        Check if an API key is configured.

        Returns:
            bool: True if a non-empty key is set, False otherwise
        """
        if self.config is None:
            self.load_config()

        return bool(self.config and self.config.api.api_key)
