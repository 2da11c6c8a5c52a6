"""
Runtime Configuration Module

Provides configuration loading and management for hashtree.
"""

from .runtime import (
    RuntimeConfig,
    HashingConfig,
    LoggingConfig,
    get_default_config_template,
)

__all__ = [
    "RuntimeConfig",
    "HashingConfig",
    "LoggingConfig",
    "get_default_config_template",
]
