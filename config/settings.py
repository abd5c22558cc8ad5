"""
Pydantic Settings for Endee Operations

This module provides strongly-typed configuration settings using Pydantic,
with support for environment variables and YAML configuration files.
"""

from typing import Optional, Union
from pathlib import Path
import logging
import os

import yaml
from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic_yaml import to_yaml_str

from endee_ops_exceptions import ConfigurationError


# Defaults the Endee server applies when a query omits the field
DEFAULT_EF = 128
DEFAULT_PREFILTER_CARDINALITY_THRESHOLD = 10_000
DEFAULT_FILTER_BOOST_PERCENTAGE = 0


class QuerySettings(BaseSettings):
    """
    Query settings for building and validating similarity-search requests.

    These settings control two things:
    - The defaults a QueryRequestBuilder applies when a setter is never called
    - The limits QueryValidator enforces before a request is submitted

    The defaults mirror the server-side defaults, so a request built without
    settings is equivalent to one built with a default QuerySettings.
    """
    default_ef: int = Field(DEFAULT_EF,
                            description="Search breadth used when a query does not set ef (higher = better recall but slower search)")
    default_prefilter_cardinality_threshold: int = Field(DEFAULT_PREFILTER_CARDINALITY_THRESHOLD,
                                                         description="Estimated match count above which the engine switches from prefiltering to postfiltering")
    default_filter_boost_percentage: int = Field(DEFAULT_FILTER_BOOST_PERCENTAGE,
                                                 description="Bias toward filter matches (0-100) used when a query does not set one")
    default_include_vectors: bool = Field(False,
                                          description="Whether raw vectors are returned alongside results by default")
    max_top_k: int = Field(512, gt=0,
                           description="Largest result count a query may request")
    max_ef: int = Field(1024, gt=0,
                        description="Largest search breadth a query may request")
    min_prefilter_cardinality_threshold: int = Field(1_000, gt=0,
                                                     description="Lower bound for the prefilter cardinality threshold")
    max_prefilter_cardinality_threshold: int = Field(1_000_000, gt=0,
                                                     description="Upper bound for the prefilter cardinality threshold")

    model_config = SettingsConfigDict(env_prefix="ENDEE_QUERY_", case_sensitive=False)


class LoggingSettings(BaseSettings):
    """
    Logging settings for the Endee_Ops package.

    The package never installs handlers on import; these values are only
    applied when configure_logging() is called.
    """
    log_level: str = Field("INFO",
                           description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)")
    log_format: str = Field("%(asctime)s - %(name)s - %(levelname)s - %(message)s",
                            description="Format string passed to logging.basicConfig")

    model_config = SettingsConfigDict(env_prefix="ENDEE_", case_sensitive=False)


class EndeeSettings(BaseSettings):
    """
    Main settings class for Endee operations that consolidates all configuration categories.

    Usage:
        # Load from environment variables and defaults
        settings = EndeeSettings()

        # Load from YAML file
        settings = EndeeSettings.from_yaml('config.yaml')

        # Access nested settings
        ef = settings.query.default_ef
        level = settings.logging.log_level
    """
    query: QuerySettings = Field(default_factory=QuerySettings,
                                 description="Query defaults and validation limits")
    logging: LoggingSettings = Field(default_factory=LoggingSettings,
                                     description="Logging configuration")

    model_config = SettingsConfigDict(env_prefix="ENDEE_", case_sensitive=False,
                                      env_nested_delimiter="__")

    @classmethod
    def from_yaml(cls, yaml_file: Union[str, Path]) -> "EndeeSettings":
        """Load settings from YAML file"""
        try:
            with open(yaml_file, 'r') as f:
                data = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            raise ConfigurationError(f"Failed to read settings from {yaml_file}: {e}") from e

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ConfigurationError(
                f"Settings file {yaml_file} must contain a mapping, got {type(data).__name__}"
            )

        try:
            return cls(**data)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid settings in {yaml_file}: {e}") from e

    def to_yaml(self) -> str:
        """Dump settings as a YAML document"""
        return to_yaml_str(self)


def load_settings(config_path: Optional[str] = None) -> EndeeSettings:
    """
    Load settings from file and/or environment variables.

    Args:
        config_path: Path to YAML configuration file. If None or file doesn't exist,
                    falls back to environment variables and default values.

    Returns:
        EndeeSettings object with loaded configuration

    Raises:
        ConfigurationError: If the file exists but cannot be parsed or validated
    """
    if config_path and os.path.exists(config_path):
        return EndeeSettings.from_yaml(config_path)
    return EndeeSettings()


def configure_logging(settings: Optional[EndeeSettings] = None) -> None:
    """Apply the configured log level and format to the root logger."""
    settings = settings or EndeeSettings()
    level = getattr(logging, settings.logging.log_level.upper(), None)
    if not isinstance(level, int):
        raise ConfigurationError(f"Unknown log level: {settings.logging.log_level}")
    logging.basicConfig(level=level, format=settings.logging.log_format)
