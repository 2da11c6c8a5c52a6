"""
Module 03 - Hash Tree Container
Flat, fixed-size storage for a complete binary Merkle tree anchored on a
trusted root hash.

Layout:
- Nodes are stored breadth-first in one list, root at index 0
- The trailing (size + 1) // 2 nodes are the leaves, in block order
- Leaves beyond the last content block hold the padding hash
- Nodes that are not known yet hold UNKNOWN_HASH (32 zero bytes)

Trust Rules (Hard Contracts):
1. The root is set at construction and only replaced by a load whose
   candidate carries the same root, or by an explicit fill/set
2. load() accepts a candidate only if it has the same root and the same
   size; otherwise the tree is left untouched and the reason is returned
3. fill() derives every ancestor of the filled level or span bottom-up;
   it does not compare the derived root with the trusted one (verify_fill()
   does)
4. clear() never resets the root

Mutation Rules:
- The tree has a single writer; no locking is done here
- Any mutation (load, fill, clear, set) invalidates views from leaves()
"""
from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Sequence
from typing import overload

from hashtree.crypto.hashing import HASH_SIZE, is_valid_hash, to_hex
from hashtree.merkle import tree_math
from hashtree.merkle.combiner import ZERO_HASH, Combiner, get_default_combiner
from hashtree.schemas.errors import (
    EmptyTreeException,
    InvalidHashException,
    OutOfRangeException,
    StaleViewException,
    TreeShapeException,
)
from hashtree.schemas.results import LoadOutcome, LoadResult


logger = logging.getLogger(__name__)


# Value of a node whose hash is not known yet
UNKNOWN_HASH: bytes = ZERO_HASH


class LeafView(Sequence[bytes]):
    """
    Borrowed read-only window over the leaf layer of a HashTree.

    The view reads through to the tree's storage. It stays valid only
    until the next mutation of the tree; after that every access raises
    StaleViewException. Take a snapshot() if the data must outlive
    mutations.
    """

    def __init__(self, tree: HashTree, start: int, length: int) -> None:
        self._tree = tree
        self._start = start
        self._length = length
        self._generation = tree._generation

    @property
    def is_valid(self) -> bool:
        """True while the tree has not been mutated since the view was taken."""
        return self._generation == self._tree._generation

    def _check(self) -> None:
        if not self.is_valid:
            raise StaleViewException(self._generation, self._tree._generation)

    def __len__(self) -> int:
        self._check()
        return self._length

    @overload
    def __getitem__(self, index: int) -> bytes: ...

    @overload
    def __getitem__(self, index: slice) -> list[bytes]: ...

    def __getitem__(self, index: int | slice) -> bytes | list[bytes]:
        self._check()
        if isinstance(index, slice):
            return [self[i] for i in range(*index.indices(self._length))]
        if index < 0:
            index += self._length
        if index < 0 or index >= self._length:
            raise IndexError(f"Leaf index out of range for {self._length} leaves")
        return self._tree._nodes[self._start + index]

    def __iter__(self) -> Iterator[bytes]:
        self._check()
        for i in range(self._length):
            yield self[i]

    def __repr__(self) -> str:
        state = "valid" if self.is_valid else "stale"
        return f"LeafView(start={self._start}, length={self._length}, {state})"


class HashTree:
    """
    Complete binary Merkle tree over fixed-size content blocks.

    Created empty, from a (leaf_count, root) pair, or from a full node
    list that was verified elsewhere.

    Example:
        >>> tree = HashTree.from_root(4, trusted_root)
        >>> tree.fill(block_hashes)
        >>> tree.root() == trusted_root
        True
    """

    def __init__(
        self,
        nodes: Iterable[bytes] | None = None,
        combiner: Combiner | None = None,
    ) -> None:
        self._combiner: Combiner = combiner or get_default_combiner()
        self._generation = 0
        self._nodes: list[bytes] = []
        if nodes is not None:
            self._nodes = self._validated(nodes)
            self._check_shape(len(self._nodes))

    # -------------------------------------------------------------------------
    # Construction
    # -------------------------------------------------------------------------

    @classmethod
    def empty(cls, combiner: Combiner | None = None) -> HashTree:
        """Zero-length tree."""
        return cls(combiner=combiner)

    @classmethod
    def from_root(
        cls,
        leaf_count: int,
        root: bytes,
        combiner: Combiner | None = None,
    ) -> HashTree:
        """
        Allocate a tree for leaf_count leaves knowing only its root.

        leaf_count is rounded up to a power of two, so a block count can be
        passed directly. The caller is responsible for the count matching
        the content; nothing here can check it.

        Args:
            leaf_count: Number of leaves (or content blocks), >= 1
            root: Trusted 32-byte root hash
            combiner: Hash combiner, defaults to SHA-256

        Returns:
            Tree with the root set and every other node unknown

        Raises:
            TreeShapeException: If leaf_count < 1
            InvalidHashException: If root is not a 32-byte digest
        """
        if leaf_count < 1:
            raise TreeShapeException(
                f"Leaf count must be >= 1, got {leaf_count}",
                details={"leaf_count": leaf_count},
            )
        if not is_valid_hash(root):
            raise InvalidHashException(
                f"Root must be a {HASH_SIZE}-byte digest", index=0
            )
        num_leaves = tree_math.leaf_count_from_blocks(leaf_count)
        tree = cls(combiner=combiner)
        tree._nodes = [UNKNOWN_HASH] * tree_math.tree_node_count(num_leaves)
        tree._nodes[0] = bytes(root)
        return tree

    @classmethod
    def from_nodes(
        cls,
        nodes: Iterable[bytes],
        combiner: Combiner | None = None,
    ) -> HashTree:
        """
        Build a tree from a full breadth-first node list.

        Raises:
            TreeShapeException: If the length is not 2n - 1 for a power of two n
            InvalidHashException: If any node is not a 32-byte digest
        """
        return cls(nodes, combiner=combiner)

    # -------------------------------------------------------------------------
    # Accessors
    # -------------------------------------------------------------------------

    def root(self) -> bytes:
        """The trusted root hash (node 0)."""
        if not self._nodes:
            raise EmptyTreeException("read the root")
        return self._nodes[0]

    def size(self) -> int:
        return len(self._nodes)

    def __len__(self) -> int:
        return len(self._nodes)

    def is_empty(self) -> bool:
        return not self._nodes

    def end_index(self) -> int:
        """Exclusive upper bound for node indices (equals size())."""
        return len(self._nodes)

    def num_leaves(self) -> int:
        return tree_math.leaf_count_from_node_count(len(self._nodes))

    def num_levels(self) -> int:
        """Number of levels above the leaves."""
        if not self._nodes:
            raise EmptyTreeException("count levels")
        return tree_math.num_levels(self.num_leaves())

    @property
    def combiner(self) -> Combiner:
        return self._combiner

    def leaves(self) -> LeafView:
        """Borrowed view of the leaf layer, invalidated by the next mutation."""
        num_leaves = self.num_leaves()
        return LeafView(self, len(self._nodes) - num_leaves, num_leaves)

    def get(self, index: int) -> bytes:
        """
        Node at a breadth-first index.

        Raises:
            OutOfRangeException: If index is outside [0, size)
        """
        self._check_index(index)
        return self._nodes[index]

    def set(self, index: int, value: bytes) -> None:
        """
        Overwrite the node at a breadth-first index.

        Raises:
            OutOfRangeException: If index is outside [0, size)
            InvalidHashException: If value is not a 32-byte digest
        """
        self._check_index(index)
        self._require_hash(value, index)
        if index == 0 and value != self._nodes[0]:
            logger.warning(
                "Root replaced by direct set: %s -> %s",
                to_hex(self._nodes[0]), to_hex(bytes(value)),
            )
        self._nodes[index] = bytes(value)
        self._bump()

    def snapshot(self) -> list[bytes]:
        """Owned copy of every node, breadth-first."""
        return list(self._nodes)

    def level(self, level: int) -> list[bytes]:
        """Owned copy of the nodes at a leaf-first level (0 = leaves)."""
        num_leaves, start, width = self._level_bounds(level)
        return self._nodes[start:start + width]

    def is_populated(self) -> bool:
        """
        True when no interior node holds the unknown sentinel.

        Leaves are not checked: an unknown leaf and a padding leaf are both
        zero bytes.
        """
        if not self._nodes:
            return False
        first = tree_math.first_leaf(self.num_leaves())
        return UNKNOWN_HASH not in self._nodes[:first]

    # -------------------------------------------------------------------------
    # Bulk load
    # -------------------------------------------------------------------------

    def load(self, candidate: Sequence[bytes]) -> LoadResult:
        """
        Replace the whole tree with candidate if it matches root and size.

        A rejected candidate leaves the tree untouched. Nothing is raised for
        a mismatch; callers that ignore the result get a silent no-op, and
        callers that care can inspect the outcome or call
        raise_for_outcome() on it.

        Args:
            candidate: Full breadth-first node list

        Returns:
            LoadResult describing whether the candidate was accepted

        Raises:
            InvalidHashException: If an accepted candidate holds a node that
                is not a 32-byte digest
        """
        if len(candidate) == 0:
            return self._reject(LoadOutcome.EMPTY_CANDIDATE, "Candidate tree is empty")
        if not self._nodes:
            return self._reject(LoadOutcome.EMPTY_TREE, "Cannot load into an empty tree")
        if candidate[0] != self._nodes[0]:
            return self._reject(
                LoadOutcome.ROOT_MISMATCH,
                "Candidate root does not match the trusted root",
                {"expected_root": to_hex(self._nodes[0]),
                 "actual_root": to_hex(bytes(candidate[0]))},
            )
        if len(candidate) != len(self._nodes):
            return self._reject(
                LoadOutcome.SIZE_MISMATCH,
                "Candidate size does not match the tree size",
                {"expected_size": len(self._nodes), "actual_size": len(candidate)},
            )

        self._nodes = self._validated(candidate)
        self._bump()
        return LoadResult.accepted()

    # -------------------------------------------------------------------------
    # Fill / clear
    # -------------------------------------------------------------------------

    def fill(
        self,
        piece_layer: Sequence[bytes],
        level_start: int = 0,
        first: int | None = None,
    ) -> bytes:
        """
        Write a layer of hashes and derive every node above it.

        The layer goes into leaf-first level level_start (0 = leaves). By
        default it is the whole level: it is written from the left edge and
        a layer shorter than the level is completed with the padding hash
        for that level. When first is given the layer is a span of that
        level starting at offset first; only the span is written, nothing
        is padded, and only the ancestors of the span are recomputed, so
        neighbouring subtrees keep their hashes. Nodes below level_start are
        not touched. The derived root is written to node 0 without comparing
        it to the previous root.

        Args:
            piece_layer: Hashes for the level (or span), left to right
            level_start: Leaf-first level the layer belongs to
            first: Offset of the span within the level, None for the whole level

        Returns:
            The derived root

        Raises:
            EmptyTreeException: If the tree is empty
            TreeShapeException: If the level, offset or layer length does not fit
            InvalidHashException: If a layer entry is not a 32-byte digest
        """
        nodes = self._derived(piece_layer, level_start, first, "fill")
        if nodes[0] != self._nodes[0]:
            logger.debug(
                "Fill changed root %s -> %s",
                to_hex(self._nodes[0]), to_hex(nodes[0]),
            )
        self._nodes = nodes
        self._bump()
        return nodes[0]

    def verify_fill(
        self,
        piece_layer: Sequence[bytes],
        level_start: int = 0,
        first: int | None = None,
    ) -> bool:
        """
        Fill only if the derived root equals the trusted root.

        Takes the same arguments as fill(). On mismatch the tree is left
        untouched and False is returned.
        """
        nodes = self._derived(piece_layer, level_start, first, "verify fill")
        if nodes[0] != self._nodes[0]:
            logger.warning(
                "Layer at level %d does not hash to the trusted root %s (got %s)",
                level_start, to_hex(self._nodes[0]), to_hex(nodes[0]),
            )
            return False
        self._nodes = nodes
        self._bump()
        return True

    def clear(self, leaf_count: int, level_start: int, first_leaf: int = 0) -> None:
        """
        Reset a region of the tree to the unknown sentinel.

        The region is leaf_count leaves starting at first_leaf. At every
        leaf-first level >= level_start, each node covering any leaf of the
        region is reset. The root is kept.

        Raises:
            EmptyTreeException: If the tree is empty
            TreeShapeException: If the region or level does not fit
        """
        if not self._nodes:
            raise EmptyTreeException("clear")
        num_leaves = self.num_leaves()
        top = tree_math.num_levels(num_leaves)
        if leaf_count < 1 or first_leaf < 0 or first_leaf + leaf_count > num_leaves:
            raise TreeShapeException(
                f"Leaf region [{first_leaf}, {first_leaf + leaf_count}) "
                f"does not fit {num_leaves} leaves",
                details={"first_leaf": first_leaf, "leaf_count": leaf_count},
            )
        if level_start < 0 or level_start > top:
            raise TreeShapeException(
                f"Level {level_start} out of range [0, {top}]",
                details={"level": level_start},
            )

        last_leaf = first_leaf + leaf_count - 1
        cleared = 0
        for level in range(level_start, top + 1):
            start = tree_math.level_start(num_leaves, level)
            for offset in range(first_leaf >> level, (last_leaf >> level) + 1):
                index = start + offset
                if index == 0:
                    continue
                self._nodes[index] = UNKNOWN_HASH
                cleared += 1

        logger.debug(
            "Cleared %d nodes for leaves [%d, %d] from level %d",
            cleared, first_leaf, last_leaf, level_start,
        )
        self._bump()

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _derived(
        self,
        piece_layer: Sequence[bytes],
        level: int,
        first: int | None,
        operation: str,
    ) -> list[bytes]:
        if not self._nodes:
            raise EmptyTreeException(operation)
        num_leaves, start, width = self._level_bounds(level)
        offset = 0 if first is None else first
        if offset < 0 or offset + len(piece_layer) > width:
            raise TreeShapeException(
                f"Layer of {len(piece_layer)} hashes at offset {offset} does not fit "
                f"level {level} of width {width}",
                details={"level": level, "width": width, "first": offset,
                         "layer_size": len(piece_layer)},
            )
        if first is not None and not piece_layer:
            raise TreeShapeException(
                "A span fill needs at least one hash",
                details={"level": level, "first": first},
            )
        for i, value in enumerate(piece_layer):
            self._require_hash(value, start + offset + i)

        nodes = list(self._nodes)
        if first is None:
            pad = self._combiner.padding_hash(level)
            nodes[start:start + width] = (
                [bytes(h) for h in piece_layer] + [pad] * (width - len(piece_layer))
            )
            lo, hi = 0, width - 1
        else:
            nodes[start + first:start + first + len(piece_layer)] = [
                bytes(h) for h in piece_layer
            ]
            lo, hi = first, first + len(piece_layer) - 1

        # lo..hi: offsets within the current level whose parents need rehashing
        combine = self._combiner.combine
        while width > 1:
            parent_start = tree_math.parent(start)
            for i in range(lo // 2, hi // 2 + 1):
                left = start + 2 * i
                nodes[parent_start + i] = combine(nodes[left], nodes[left + 1])
            start = parent_start
            width //= 2
            lo //= 2
            hi //= 2
        return nodes

    def _level_bounds(self, level: int) -> tuple[int, int, int]:
        if not self._nodes:
            raise EmptyTreeException("read a level")
        num_leaves = self.num_leaves()
        try:
            width = tree_math.level_width(num_leaves, level)
        except ValueError as e:
            raise TreeShapeException(str(e), details={"level": level}) from e
        return num_leaves, width - 1, width

    @staticmethod
    def _check_shape(size: int) -> None:
        if not size:
            return
        leaves = tree_math.leaf_count_from_node_count(size)
        if leaves & (leaves - 1) or tree_math.tree_node_count(leaves) != size:
            raise TreeShapeException(
                f"{size} nodes do not form a complete binary tree",
                details={"size": size},
            )

    def _check_index(self, index: int) -> None:
        if index < 0 or index >= len(self._nodes):
            raise OutOfRangeException(index, len(self._nodes))

    @staticmethod
    def _require_hash(value: object, index: int) -> None:
        if not is_valid_hash(value):
            raise InvalidHashException(
                f"Node {index} must be a {HASH_SIZE}-byte digest", index=index
            )

    def _validated(self, nodes: Iterable[bytes]) -> list[bytes]:
        result = []
        for i, value in enumerate(nodes):
            self._require_hash(value, i)
            result.append(bytes(value))
        return result

    def _reject(
        self,
        outcome: LoadOutcome,
        message: str,
        details: dict | None = None,
    ) -> LoadResult:
        logger.warning("Tree load rejected (%s): %s", outcome.value, message)
        return LoadResult.rejected(outcome, message, details)

    def _bump(self) -> None:
        self._generation += 1

    def __eq__(self, other: object) -> bool:
        """Same nodes hashed with the same kind of combiner."""
        if not isinstance(other, HashTree):
            return NotImplemented
        return (
            type(self._combiner) is type(other._combiner)
            and self._nodes == other._nodes
        )

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        if not self._nodes:
            return "HashTree(empty)"
        return f"HashTree(size={len(self._nodes)}, root={to_hex(self._nodes[0])})"


def build_tree(leaf_hashes: Sequence[bytes], combiner: Combiner | None = None) -> HashTree:
    """
    Build a fully populated tree from block hashes.

    Used where the content itself is at hand and the root is the output
    rather than the trust anchor.

    Args:
        leaf_hashes: One hash per content block, in block order
        combiner: Hash combiner, defaults to SHA-256

    Returns:
        Populated tree; empty input gives a single padding leaf
    """
    tree = HashTree.from_root(max(len(leaf_hashes), 1), UNKNOWN_HASH, combiner)
    tree.fill(leaf_hashes)
    return tree


__all__ = [
    "UNKNOWN_HASH",
    "LeafView",
    "HashTree",
    "build_tree",
]
