"""
Runtime Configuration Unit Tests
Tests for hashtree/config/runtime.py and hashtree_cli/config.py
"""
import pytest
import yaml

from hashtree.config.runtime import (
    HashingConfig,
    RuntimeConfig,
    get_default_config_template,
)
from hashtree.crypto.block_hashing import DEFAULT_BLOCK_SIZE
from hashtree.merkle.combiner import Sha256Combiner, get_default_combiner
from hashtree.schemas.errors import ConfigException
from hashtree_cli.config import load_config


class TestHashingConfig:
    """Tests for block size and algorithm validation."""

    def test_defaults(self):
        config = HashingConfig()

        assert config.block_size == DEFAULT_BLOCK_SIZE
        assert config.algorithm == "sha256"

    @pytest.mark.parametrize("block_size", [0, 8, 1000, -16])
    def test_rejects_bad_block_size(self, block_size):
        with pytest.raises(ConfigException) as exc_info:
            HashingConfig(block_size=block_size)
        assert exc_info.value.details["field_path"] == "hashing.block_size"

    def test_rejects_unknown_algorithm(self):
        with pytest.raises(ConfigException, match="Unsupported"):
            HashingConfig(algorithm="md5")

    def test_combiner_follows_algorithm(self):
        combiner = HashingConfig(algorithm="sha256").combiner()

        assert isinstance(combiner, Sha256Combiner)
        assert combiner is get_default_combiner()


class TestRuntimeConfig:
    """Tests for loading RuntimeConfig from dicts, YAML and the environment."""

    def test_from_dict_partial(self):
        config = RuntimeConfig.from_dict({"hashing": {"block_size": 4096}})

        assert config.hashing.block_size == 4096
        assert config.logging.level == "INFO"
        assert config.logging.file is None

    def test_from_dict_unknown_key(self):
        with pytest.raises(ConfigException, match="Unknown configuration key"):
            RuntimeConfig.from_dict({"hashing": {"bogus": 1}})

    def test_to_dict_round_trip(self):
        config = RuntimeConfig.from_dict({
            "hashing": {"block_size": 1024},
            "logging": {"level": "DEBUG", "file": "tree.log"},
        })

        assert RuntimeConfig.from_dict(config.to_dict()) == config

    def test_from_yaml(self, tmp_path):
        path = tmp_path / "hashtree.yaml"
        path.write_text(yaml.safe_dump({"hashing": {"block_size": 2048}, "logging": {"level": "WARNING"}}))

        config = RuntimeConfig.from_yaml(path)

        assert config.hashing.block_size == 2048
        assert config.logging.level == "WARNING"

    def test_from_yaml_template_loads(self, tmp_path):
        path = tmp_path / "hashtree.yaml"
        path.write_text(get_default_config_template())

        assert RuntimeConfig.from_yaml(path) == RuntimeConfig()

    def test_from_yaml_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            RuntimeConfig.from_yaml(tmp_path / "missing.yaml")

    def test_from_yaml_requires_mapping(self, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("- 1\n- 2\n")

        with pytest.raises(ConfigException, match="mapping"):
            RuntimeConfig.from_yaml(path)

    def test_from_env(self, clean_env, monkeypatch):
        monkeypatch.setenv("HASHTREE_BLOCK_SIZE", "1024")
        monkeypatch.setenv("HASHTREE_LOG_LEVEL", "DEBUG")

        config = RuntimeConfig.from_env()

        assert config.hashing.block_size == 1024
        assert config.logging.level == "DEBUG"

    def test_from_env_non_integer_block_size(self, clean_env, monkeypatch):
        monkeypatch.setenv("HASHTREE_BLOCK_SIZE", "big")

        with pytest.raises(ConfigException, match="integer"):
            RuntimeConfig.from_env()

    def test_unsupported_algorithm_from_env(self, clean_env, monkeypatch):
        monkeypatch.setenv("HASHTREE_ALGORITHM", "md5")

        with pytest.raises(ConfigException) as exc_info:
            RuntimeConfig.from_env()
        assert exc_info.value.details["field_path"] == "hashing.algorithm"

    def test_env_overrides_file(self, clean_env, monkeypatch):
        base = RuntimeConfig.from_dict({
            "hashing": {"block_size": 4096},
            "logging": {"level": "WARNING"},
        })
        monkeypatch.setenv("HASHTREE_BLOCK_SIZE", "256")

        merged = base.with_env_overrides()

        assert merged.hashing.block_size == 256
        assert merged.logging.level == "WARNING"
        assert base.hashing.block_size == 4096

    def test_no_env_overrides_returns_same_config(self, clean_env):
        config = RuntimeConfig()

        assert config.with_env_overrides() is config


class TestLoadConfig:
    """Tests for CLI config file discovery."""

    def test_falls_back_to_env(self, clean_env):
        assert load_config() == RuntimeConfig()

    def test_finds_file_in_cwd(self, clean_env):
        (clean_env / "hashtree.yaml").write_text("hashing:\n  block_size: 512\n")

        assert load_config().hashing.block_size == 512

    def test_finds_file_in_home(self, clean_env):
        config_dir = clean_env / ".config" / "hashtree"
        config_dir.mkdir(parents=True)
        (config_dir / "config.yaml").write_text("logging:\n  level: ERROR\n")

        assert load_config().logging.level == "ERROR"

    def test_explicit_path_missing(self, clean_env):
        with pytest.raises(FileNotFoundError):
            load_config(clean_env / "nope.yaml")
