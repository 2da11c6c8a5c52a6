"""
CLI Configuration

Locates and loads the runtime configuration for the CLI.
Environment variables (HASHTREE_* prefix) override file settings.
"""

from __future__ import annotations

import logging
from pathlib import Path

from hashtree.config.runtime import RuntimeConfig


logger = logging.getLogger(__name__)


def default_config_paths() -> list[Path]:
    """Config locations searched when none is given, in order."""
    return [
        Path.cwd() / "hashtree.yaml",
        Path.cwd() / ".hashtree.yaml",
        Path.home() / ".config" / "hashtree" / "config.yaml",
    ]


def load_config(config_path: Path | None = None) -> RuntimeConfig:
    """
    Load configuration from file and/or environment.

    Args:
        config_path: Optional path to a YAML config file

    Returns:
        Merged configuration

    Raises:
        FileNotFoundError: If config_path is given but does not exist
    """
    if config_path is not None:
        return RuntimeConfig.from_yaml(config_path).with_env_overrides()

    for default_path in default_config_paths():
        if default_path.exists():
            logger.debug("Using config file %s", default_path)
            return RuntimeConfig.from_yaml(default_path).with_env_overrides()

    return RuntimeConfig.from_env()
