"""
Module 02 - Tree Math
Index and size arithmetic for complete binary trees stored breadth-first.

Layout:
- Nodes live in a flat list, root at index 0
- Children of node i are 2i+1 and 2i+2
- Leaf count is always a power of two, so the tree is complete
- Levels are counted leaf-first: level 0 is the leaf layer,
  level num_levels(leaf_count) holds only the root

Example for 4 leaves (7 nodes):

    level 2:            0
    level 1:      1           2
    level 0:   3     4     5     6
"""
from __future__ import annotations


def _is_power_of_two(n: int) -> bool:
    return n >= 1 and (n & (n - 1)) == 0


def _require_leaf_count(leaf_count: int) -> None:
    if not _is_power_of_two(leaf_count):
        raise ValueError(
            f"Leaf count must be a power of two >= 1, got {leaf_count}"
        )


def leaf_count_from_blocks(num_blocks: int) -> int:
    """
    Number of leaves needed to hold num_blocks blocks.

    Rounds up to the next power of two. Zero or one block still
    needs a single leaf.

    Args:
        num_blocks: Number of content blocks

    Returns:
        Leaf count (power of two, >= 1)

    Raises:
        ValueError: If num_blocks is negative
    """
    if num_blocks < 0:
        raise ValueError(f"Block count must be non-negative, got {num_blocks}")
    leaves = 1
    while leaves < num_blocks:
        leaves <<= 1
    return leaves


def tree_node_count(leaf_count: int) -> int:
    """Total number of nodes in a complete tree with leaf_count leaves."""
    _require_leaf_count(leaf_count)
    return 2 * leaf_count - 1


def leaf_count_from_node_count(node_count: int) -> int:
    """Size of the trailing leaf layer of a flat tree of node_count nodes."""
    if node_count < 0:
        raise ValueError(f"Node count must be non-negative, got {node_count}")
    return (node_count + 1) // 2


def num_levels(leaf_count: int) -> int:
    """
    Number of levels above the leaves.

    A single-leaf tree has 0 (the leaf is the root), 4 leaves have 2.
    """
    _require_leaf_count(leaf_count)
    return leaf_count.bit_length() - 1


def first_leaf(leaf_count: int) -> int:
    """Flat index of the leftmost leaf."""
    _require_leaf_count(leaf_count)
    return leaf_count - 1


def level_width(leaf_count: int, level: int) -> int:
    """Number of nodes at a leaf-first level."""
    _require_level(leaf_count, level)
    return leaf_count >> level


def level_start(leaf_count: int, level: int) -> int:
    """Flat index of the leftmost node at a leaf-first level."""
    return level_width(leaf_count, level) - 1


def level_of(leaf_count: int, index: int) -> int:
    """Leaf-first level of the node at flat index."""
    if index < 0 or index >= tree_node_count(leaf_count):
        raise ValueError(
            f"Index {index} is not a node of a {leaf_count}-leaf tree"
        )
    depth = (index + 1).bit_length() - 1
    return num_levels(leaf_count) - depth


def parent(index: int) -> int:
    """Flat index of the parent of a non-root node."""
    if index <= 0:
        raise ValueError(f"Node {index} has no parent")
    return (index - 1) // 2


def sibling(index: int) -> int:
    """Flat index of the other child under the same parent."""
    if index <= 0:
        raise ValueError(f"Node {index} has no sibling")
    # left children have odd indices
    return index + 1 if index % 2 == 1 else index - 1


def first_child(index: int) -> int:
    """Flat index of the left child."""
    if index < 0:
        raise ValueError(f"Invalid node index {index}")
    return 2 * index + 1


def _require_level(leaf_count: int, level: int) -> None:
    top = num_levels(leaf_count)
    if level < 0 or level > top:
        raise ValueError(
            f"Level {level} out of range [0, {top}] for {leaf_count} leaves"
        )


__all__ = [
    "leaf_count_from_blocks",
    "tree_node_count",
    "leaf_count_from_node_count",
    "num_levels",
    "first_leaf",
    "level_width",
    "level_start",
    "level_of",
    "parent",
    "sibling",
    "first_child",
]
