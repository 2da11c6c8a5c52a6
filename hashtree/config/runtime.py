"""
Runtime Configuration

Central configuration for block hashing and logging.
"""

from __future__ import annotations

import copy
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv

from hashtree.crypto.block_hashing import DEFAULT_BLOCK_SIZE
from hashtree.merkle.combiner import COMBINERS, Combiner, get_combiner
from hashtree.schemas.errors import ConfigException

load_dotenv()


ENV_PREFIX = "HASHTREE_"

# Smallest block a tree may be built over
MIN_BLOCK_SIZE = 16

SUPPORTED_ALGORITHMS = tuple(COMBINERS)


@dataclass
class HashingConfig:
    """Configuration for splitting content into leaves."""
    block_size: int = DEFAULT_BLOCK_SIZE
    algorithm: str = "sha256"

    def __post_init__(self):
        if (
            not isinstance(self.block_size, int)
            or self.block_size < MIN_BLOCK_SIZE
            or self.block_size & (self.block_size - 1)
        ):
            raise ConfigException(
                f"block_size must be a power of two >= {MIN_BLOCK_SIZE}, "
                f"got {self.block_size!r}",
                field_path="hashing.block_size",
            )
        if self.algorithm not in SUPPORTED_ALGORITHMS:
            raise ConfigException(
                f"Unsupported hash algorithm: {self.algorithm}",
                field_path="hashing.algorithm",
            )

    def combiner(self) -> Combiner:
        """Node combiner for the configured algorithm."""
        return get_combiner(self.algorithm)


@dataclass
class LoggingConfig:
    """Configuration for CLI logging."""
    level: str = "INFO"
    file: Optional[str] = None


@dataclass
class RuntimeConfig:
    """
    Complete runtime configuration.

    Can be loaded from:
    - Environment variables
    - YAML file
    - Programmatic construction
    """
    hashing: HashingConfig = field(default_factory=HashingConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @staticmethod
    def _get_env_overrides() -> dict[str, Any]:
        """
        Get configuration overrides from environment variables.

        Supported variables:
        - HASHTREE_BLOCK_SIZE: Block size in bytes
        - HASHTREE_ALGORITHM: Node hash algorithm name
        - HASHTREE_LOG_LEVEL: Log level name
        - HASHTREE_LOG_FILE: Optional log file path
        """
        overrides: dict[str, Any] = {}

        block_size = os.getenv(f"{ENV_PREFIX}BLOCK_SIZE")
        if block_size:
            try:
                overrides.setdefault("hashing", {})["block_size"] = int(block_size)
            except ValueError as e:
                raise ConfigException(
                    f"{ENV_PREFIX}BLOCK_SIZE must be an integer, got {block_size!r}",
                    field_path="hashing.block_size",
                ) from e

        if os.getenv(f"{ENV_PREFIX}ALGORITHM"):
            overrides.setdefault("hashing", {})["algorithm"] = os.getenv(f"{ENV_PREFIX}ALGORITHM")
        if os.getenv(f"{ENV_PREFIX}LOG_LEVEL"):
            overrides.setdefault("logging", {})["level"] = os.getenv(f"{ENV_PREFIX}LOG_LEVEL")
        if os.getenv(f"{ENV_PREFIX}LOG_FILE"):
            overrides.setdefault("logging", {})["file"] = os.getenv(f"{ENV_PREFIX}LOG_FILE")

        return overrides

    @classmethod
    def from_env(cls) -> "RuntimeConfig":
        """Load configuration purely from environment variables."""
        return cls.from_dict(cls._get_env_overrides())

    @classmethod
    def from_yaml(cls, path: str | Path) -> "RuntimeConfig":
        """Load configuration from a YAML file."""
        import yaml
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        with open(path) as f:
            data = yaml.safe_load(f) or {}

        if not isinstance(data, dict):
            raise ConfigException(f"Config file must hold a mapping: {path}")
        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RuntimeConfig":
        """Load configuration from a dictionary (supports partial data)."""
        hashing_data = data.get("hashing") or {}
        logging_data = data.get("logging") or {}

        try:
            hashing = HashingConfig(**hashing_data)
            logging_config = LoggingConfig(**logging_data)
        except TypeError as e:
            raise ConfigException(f"Unknown configuration key: {e}") from e

        return cls(
            hashing=hashing,
            logging=logging_config,
        )

    def with_env_overrides(self) -> "RuntimeConfig":
        """
        Return a new config with environment variable overrides applied.

        This allows loading from a config file first, then overlaying env vars.
        """
        overrides = self._get_env_overrides()
        if not overrides:
            return self

        new_config = copy.deepcopy(self)

        if "hashing" in overrides:
            new_config.hashing = HashingConfig(
                **{**self.hashing.__dict__, **overrides["hashing"]}
            )

        if "logging" in overrides:
            for key, value in overrides["logging"].items():
                setattr(new_config.logging, key, value)

        return new_config

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to a dictionary."""
        return {
            "hashing": {
                "block_size": self.hashing.block_size,
                "algorithm": self.hashing.algorithm,
            },
            "logging": {
                "level": self.logging.level,
                "file": self.logging.file,
            },
        }


def get_default_config_template() -> str:
    """Get a template YAML configuration file."""
    return f"""# hashtree configuration
hashing:
  block_size: {DEFAULT_BLOCK_SIZE}
  algorithm: sha256
logging:
  level: INFO
  file: null
"""
