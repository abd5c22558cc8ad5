"""
Configuration Module

This module provides centralized configuration management for Endee operations:
- Query defaults (ef, prefilter threshold, filter boost)
- Query validation limits
- Logging configuration
- Configuration loading from YAML and environment variables
"""

from .settings import (
    EndeeSettings,
    QuerySettings,
    LoggingSettings,
    load_settings,
    configure_logging,
    DEFAULT_EF,
    DEFAULT_PREFILTER_CARDINALITY_THRESHOLD,
    DEFAULT_FILTER_BOOST_PERCENTAGE,
)

__all__ = [
    'EndeeSettings',
    'QuerySettings',
    'LoggingSettings',
    'load_settings',
    'configure_logging',
    'DEFAULT_EF',
    'DEFAULT_PREFILTER_CARDINALITY_THRESHOLD',
    'DEFAULT_FILTER_BOOST_PERCENTAGE',
]
