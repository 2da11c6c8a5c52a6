"""
Module 04 - Merkle Proofs
Inclusion proofs read out of a (partially) populated HashTree.

This module provides:
- MerkleProof: Dataclass representing a Merkle inclusion proof
- build_tree_proof: Collect the uncle hashes for one leaf
- verify_merkle_proof: Recompute the root from a proof
- MerkleProver / MerkleVerifier: class-based convenience wrappers

A proof only needs the leaf and the siblings along its path, so it can be
built as soon as that path is known, before the whole tree is populated.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Sequence

from hashtree.crypto.hashing import to_hex
from hashtree.merkle import tree_math
from hashtree.merkle.combiner import Combiner, get_default_combiner
from hashtree.merkle.hash_tree import UNKNOWN_HASH, HashTree
from hashtree.schemas.errors import (
    MerkleVerificationException,
    OutOfRangeException,
    TreeShapeException,
)


@dataclass(frozen=True)
class MerkleProof:
    """
    A Merkle proof for a single leaf in a hash tree.

    Attributes:
        leaf: The leaf hash being proven (32 bytes)
        index: The 0-based index of the leaf in the leaf layer
        siblings: Sibling hashes from bottom to top of tree
        root: The Merkle root this proof is against
    """
    leaf: bytes
    index: int
    siblings: list[bytes]
    root: bytes

    def __post_init__(self) -> None:
        """Validate proof structure."""
        if self.index < 0:
            raise ValueError(f"Leaf index must be non-negative, got {self.index}")

    def to_dict(self) -> dict[str, Any]:
        return {
            "leaf": to_hex(self.leaf),
            "index": self.index,
            "siblings": [to_hex(s) for s in self.siblings],
            "root": to_hex(self.root),
        }


def build_tree_proof(tree: HashTree, leaf_index: int) -> MerkleProof:
    """
    Generate a Merkle proof for the leaf at the given index.

    Walks from the leaf to the root, recording the sibling at each level.

    Args:
        tree: Tree holding the leaf and its path
        leaf_index: 0-based index into the leaf layer

    Returns:
        MerkleProof against tree.root()

    Raises:
        OutOfRangeException: If leaf_index is outside the leaf layer
        TreeShapeException: If an interior sibling on the path is unknown
    """
    num_leaves = tree.num_leaves()
    if leaf_index < 0 or leaf_index >= num_leaves:
        raise OutOfRangeException(leaf_index, num_leaves, details={"layer": "leaves"})

    node = tree_math.first_leaf(num_leaves) + leaf_index
    leaf = tree.get(node)

    siblings: list[bytes] = []
    level = 0
    while node > 0:
        sibling = tree.get(tree_math.sibling(node))
        # zero leaves are padding, unknown only shows above the leaf layer
        if level > 0 and sibling == UNKNOWN_HASH:
            raise TreeShapeException(
                f"Sibling of node {node} is not known",
                details={"leaf_index": leaf_index, "node": node},
            )
        siblings.append(sibling)
        node = tree_math.parent(node)
        level += 1

    return MerkleProof(
        leaf=leaf,
        index=leaf_index,
        siblings=siblings,
        root=tree.root(),
    )


def verify_merkle_proof(proof: MerkleProof, combiner: Combiner | None = None) -> bool:
    """
    Verify a Merkle proof.

    Recomputes the root from the leaf and siblings, checking
    against the claimed root in the proof.

    Args:
        proof: MerkleProof to verify
        combiner: Combiner the tree was built with, defaults to SHA-256

    Returns:
        True if proof is valid, False otherwise
    """
    combiner = combiner or get_default_combiner()
    current_hash = proof.leaf
    current_index = proof.index

    for sibling in proof.siblings:
        if current_index % 2 == 0:
            current_hash = combiner.combine(current_hash, sibling)
        else:
            current_hash = combiner.combine(sibling, current_hash)
        current_index = current_index // 2

    # a leftover index means the proof is shorter than the leaf position needs
    return current_index == 0 and current_hash == proof.root


class MerkleProver:
    """
    Convenience class for generating Merkle proofs from a tree.

    Example:
        >>> proof = MerkleProver.prove(tree, 1)
        >>> proof.leaf == tree.leaves()[1]
        True
    """

    @staticmethod
    def prove(tree: HashTree, leaf_index: int) -> MerkleProof:
        return build_tree_proof(tree, leaf_index)

    @staticmethod
    def prove_all(tree: HashTree, indices: Sequence[int]) -> list[MerkleProof]:
        """Proofs for several leaves of the same tree."""
        return [build_tree_proof(tree, i) for i in indices]


class MerkleVerifier:
    """
    Convenience class for verifying Merkle proofs.

    Example:
        >>> MerkleVerifier.verify(proof)
        True
    """

    @staticmethod
    def verify(proof: MerkleProof, combiner: Combiner | None = None) -> bool:
        return verify_merkle_proof(proof, combiner)

    @staticmethod
    def verify_against_root(
        proof: MerkleProof,
        trusted_root: bytes,
        combiner: Combiner | None = None,
    ) -> bool:
        """Verify a proof and also check that it targets the trusted root."""
        return proof.root == trusted_root and verify_merkle_proof(proof, combiner)

    @staticmethod
    def verify_or_raise(proof: MerkleProof, combiner: Combiner | None = None) -> None:
        """
        Verify a proof, raising if it is invalid.

        Raises:
            MerkleVerificationException: If the proof does not verify
        """
        if not verify_merkle_proof(proof, combiner):
            raise MerkleVerificationException(
                "Merkle proof does not hash to its root",
                leaf_index=proof.index,
                details={"root": to_hex(proof.root)},
            )


__all__ = [
    "MerkleProof",
    "build_tree_proof",
    "verify_merkle_proof",
    "MerkleProver",
    "MerkleVerifier",
]
