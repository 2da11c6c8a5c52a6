"""
Pytest configuration and shared fixtures for hashtree tests.

This conftest.py:
1. Adds project root to sys.path for imports
2. Provides commonly-used fixtures via pytest's autodiscovery
3. Configures pytest markers and settings
"""

import logging
import sys
from pathlib import Path

import pytest

# =============================================================================
# Path Setup - Must happen before any local imports
# =============================================================================

_PROJECT_ROOT = Path(__file__).resolve().parent.parent
_TESTS_ROOT = Path(__file__).resolve().parent

for _path in [str(_PROJECT_ROOT), str(_TESTS_ROOT)]:
    if _path not in sys.path:
        sys.path.insert(0, _path)

import importlib

_trees = importlib.import_module("fixtures.trees")

make_leaf_hashes = _trees.make_leaf_hashes
make_populated_tree = _trees.make_populated_tree
make_rooted_tree = _trees.make_rooted_tree


# =============================================================================
# Pytest Fixtures (autodiscovered by pytest)
# =============================================================================

@pytest.fixture
def leaf_hashes():
    """Four distinct leaf hashes."""
    return make_leaf_hashes(4)


@pytest.fixture
def populated_tree():
    """Fully populated 4-leaf tree."""
    return make_populated_tree(4)


@pytest.fixture
def rooted_tree():
    """8-leaf tree holding only its root, and the 8 leaves behind that root."""
    return make_rooted_tree(8)


_ENV_VARS = (
    "HASHTREE_BLOCK_SIZE",
    "HASHTREE_ALGORITHM",
    "HASHTREE_LOG_LEVEL",
    "HASHTREE_LOG_FILE",
)


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    """
    Isolate config lookup: no HASHTREE_* variables, cwd and HOME in tmp_path.
    """
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def restore_logging():
    """Drop root handlers installed by the CLI during a test."""
    root = logging.getLogger()
    before = list(root.handlers)
    level = root.level
    yield
    for handler in list(root.handlers):
        if handler not in before:
            root.removeHandler(handler)
            handler.close()
    root.setLevel(level)


# =============================================================================
# Pytest Configuration
# =============================================================================

def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests"
    )
