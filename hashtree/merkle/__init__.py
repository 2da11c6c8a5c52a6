"""
Merkle hash tree storage and verification.

This package provides:
- tree_math: index/size arithmetic for flat breadth-first trees
- Combiner / Sha256Combiner: pairwise hashing and the padding-hash table
- HashTree: fixed-size tree anchored on a trusted root
- MerkleProof and friends: inclusion proofs read from a HashTree

Canonical Commitment Rules:
1. Parent hashing: sha256(left + right)
2. Padding leaf: 32 zero bytes; padding above it is combine(pad, pad)
3. Leaf count is rounded up to a power of two

Usage:
    from hashtree.merkle import HashTree
    from hashtree.crypto import hash_file

    leaves = hash_file("movie.mkv")
    tree = HashTree.from_root(len(leaves), trusted_root)
    if not tree.verify_fill(leaves):
        tree.clear(len(leaves), 0)
"""
from . import tree_math
from .tree_math import (
    leaf_count_from_blocks,
    tree_node_count,
)
from .combiner import (
    ZERO_HASH,
    Combiner,
    Sha256Combiner,
    COMBINERS,
    get_default_combiner,
    get_combiner,
    combine,
    padding_hash,
)
from .hash_tree import (
    UNKNOWN_HASH,
    LeafView,
    HashTree,
    build_tree,
)
from .merkle_proofs import (
    MerkleProof,
    build_tree_proof,
    verify_merkle_proof,
    MerkleProver,
    MerkleVerifier,
)


__all__ = [
    # Arithmetic
    "tree_math",
    "leaf_count_from_blocks",
    "tree_node_count",
    # Hashing
    "ZERO_HASH",
    "Combiner",
    "Sha256Combiner",
    "COMBINERS",
    "get_default_combiner",
    "get_combiner",
    "combine",
    "padding_hash",
    # Tree
    "UNKNOWN_HASH",
    "LeafView",
    "HashTree",
    "build_tree",
    # Proofs
    "MerkleProof",
    "build_tree_proof",
    "verify_merkle_proof",
    "MerkleProver",
    "MerkleVerifier",
]
