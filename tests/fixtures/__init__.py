"""
Test fixtures package for hashtree tests.

Usage:
    from fixtures import make_leaf_hashes, make_populated_tree

    def test_something():
        tree = make_populated_tree(8)
"""

from .trees import (
    make_leaf_hashes,
    expected_root,
    make_populated_tree,
    make_rooted_tree,
)

__all__ = [
    "make_leaf_hashes",
    "expected_root",
    "make_populated_tree",
    "make_rooted_tree",
]
