"""
Configuration Management Module

This module defines the configuration schema for netbank-export using
Pydantic. It handles:
1.  Loading configuration from YAML files (e.g., `config.yaml`).
2.  Overriding settings via environment variables (prefixed with `NETBANK_`),
    which is how credentials are usually supplied (`NETBANK_USERNAME`,
    `NETBANK_PASSWORD`).
3.  Defining default values for all settings.
"""
import logging
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

from .formats import ExportFormat
from .templating import DEFAULT_TEMPLATE

logger = logging.getLogger(__name__)

DEFAULT_HISTORY_MONTHS = 3


class Config(BaseSettings):
    """
    Global configuration for netbank-export.

    Settings are resolved from (highest priority first):
    1.  Overrides passed to `load` (command-line flags)
    2.  Environment variables (prefixed with NETBANK_)
    3.  A YAML configuration file
    4.  Default values defined in this class
    """

    username: Optional[str] = Field(
        default=None,
        description="Netbank client number"
    )
    password: Optional[SecretStr] = Field(
        default=None,
        description="Netbank password"
    )
    session_class: Optional[str] = Field(
        default=None,
        description="Dotted path ('module:Class') of the NetbankSession implementation"
    )
    output_template: str = Field(
        default=DEFAULT_TEMPLATE,
        description="Output file name template"
    )
    default_format: ExportFormat = Field(
        default=ExportFormat.JSON,
        description="Output format used when --format is not given"
    )
    history_months: int = Field(
        default=DEFAULT_HISTORY_MONTHS,
        description="How many months of history to download when --from is not given"
    )
    debug: bool = Field(
        default=False,
        description="Enable verbose logging"
    )

    model_config = SettingsConfigDict(
        env_prefix='NETBANK_',
        extra='ignore'
    )

    @classmethod
    def settings_customise_sources(cls, settings_cls, init_settings, env_settings, dotenv_settings,
                                   file_secret_settings):
        # YAML values arrive as init kwargs; environment variables must still win over them.
        return env_settings, init_settings, dotenv_settings, file_secret_settings

    @classmethod
    def load(cls, config_path: Optional[Path] = None, **overrides: Any) -> "Config":
        """
        Load configuration, optionally from a YAML file.

        `overrides` (e.g. from command-line flags) take precedence over both
        the file and the environment. None values are ignored.
        """
        search_paths = [
            config_path,
            Path("config.yaml"),
            Path("config.yml"),
            Path.home() / ".netbank_export" / "config.yaml",
            Path.home() / ".netbank_export" / "config.yml",
        ]

        config_data: Dict[str, Any] = {}

        found_path = None
        for path in search_paths:
            if path and path.exists() and path.is_file():
                found_path = path.resolve()
                break

        if found_path:
            try:
                with open(found_path, 'r', encoding='utf-8') as f:
                    file_data = yaml.safe_load(f)
                if isinstance(file_data, dict):
                    config_data = file_data
                logger.info(f"Loaded configuration from: {found_path}")
            except (OSError, yaml.YAMLError) as e:
                logger.warning(f"Error loading config file {found_path}: {e}")
        else:
            logger.debug("No config file found. Using default configuration.")

        config = cls(**config_data)
        updates = {k: v for k, v in overrides.items() if v is not None}
        if updates:
            config = cls.model_validate({**config.model_dump(), **updates})
        return config

