"""
Hash tree test fixtures.

Factory functions for leaf hashes, roots and populated trees.
"""

from hashtree.crypto.hashing import sha256
from hashtree.merkle.combiner import combine, padding_hash
from hashtree.merkle.hash_tree import HashTree, build_tree


def make_leaf_hashes(count: int, prefix: str = "block") -> list[bytes]:
    """Distinct, deterministic 32-byte leaf hashes."""
    return [sha256(f"{prefix}{i}".encode()) for i in range(count)]


def expected_root(leaves: list[bytes]) -> bytes:
    """
    Root computed by hand, level by level, independent of HashTree.

    Pads the leaf layer to a power of two with padding_hash(0) and each
    higher level with nothing (a full leaf layer keeps every level even).
    """
    width = 1
    while width < len(leaves):
        width *= 2
    level = list(leaves) + [padding_hash(0)] * (width - len(leaves))
    while len(level) > 1:
        level = [combine(level[i], level[i + 1]) for i in range(0, len(level), 2)]
    return level[0]


def make_populated_tree(num_blocks: int = 4) -> HashTree:
    """Fully populated tree over num_blocks distinct block hashes."""
    return build_tree(make_leaf_hashes(num_blocks))


def make_rooted_tree(num_blocks: int = 4) -> tuple[HashTree, list[bytes]]:
    """Tree holding only its trusted root, plus the leaves that hash to it."""
    leaves = make_leaf_hashes(num_blocks)
    return HashTree.from_root(num_blocks, expected_root(leaves)), leaves
