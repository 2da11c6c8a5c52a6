"""
Module 02 - Combiner
Pairwise node hashing and the canonical padding-hash table.

Canonical Commitment Rules:
1. Parent hashing: parent = sha256(left + right), order-sensitive
2. Padding leaf: 32 zero bytes (the hash used for an empty block)
3. Padding at level k: combine(pad(k-1), pad(k-1))

The padding table is computed lazily and cached per combiner instance,
so every tree built with the same combiner shares it.
"""
from __future__ import annotations

from typing import Protocol, runtime_checkable

from hashtree.crypto.hashing import HASH_SIZE, hash_concat


# Hash of an empty block, also the leaf-level padding value
ZERO_HASH: bytes = bytes(HASH_SIZE)


@runtime_checkable
class Combiner(Protocol):
    """Interface the hash tree needs for deriving interior nodes."""

    def combine(self, left: bytes, right: bytes) -> bytes:
        ...

    def padding_hash(self, level: int) -> bytes:
        ...


class Sha256Combiner:
    """
    Default combiner: SHA-256 over the concatenated children.

    Example:
        >>> c = Sha256Combiner()
        >>> c.padding_hash(1) == c.combine(ZERO_HASH, ZERO_HASH)
        True
    """

    def __init__(self) -> None:
        self._padding: list[bytes] = [ZERO_HASH]

    def combine(self, left: bytes, right: bytes) -> bytes:
        return hash_concat(left, right)

    def padding_hash(self, level: int) -> bytes:
        """
        Hash of a subtree of empty blocks whose top sits at a leaf-first level.

        Args:
            level: 0 for a single padding leaf, k for 2**k padding leaves

        Returns:
            32-byte padding hash

        Raises:
            ValueError: If level is negative
        """
        if level < 0:
            raise ValueError(f"Padding level must be non-negative, got {level}")
        while len(self._padding) <= level:
            prev = self._padding[-1]
            self._padding.append(self.combine(prev, prev))
        return self._padding[level]


_default_combiner = Sha256Combiner()


def get_default_combiner() -> Sha256Combiner:
    """Shared combiner used when a tree is built without one."""
    return _default_combiner


# Combiners selectable by name from configuration
COMBINERS: dict[str, type[Sha256Combiner]] = {
    "sha256": Sha256Combiner,
}


def get_combiner(algorithm: str = "sha256") -> Combiner:
    """
    Combiner for a configured algorithm name.

    The default algorithm returns the shared default instance, so its
    padding table is computed once per process.

    Raises:
        ValueError: If the algorithm is not registered
    """
    if algorithm == "sha256":
        return _default_combiner
    try:
        return COMBINERS[algorithm]()
    except KeyError:
        raise ValueError(f"Unsupported hash algorithm: {algorithm}") from None


def combine(left: bytes, right: bytes) -> bytes:
    """Combine two child hashes with the default combiner."""
    return _default_combiner.combine(left, right)


def padding_hash(level: int) -> bytes:
    """Padding hash at a leaf-first level from the default combiner."""
    return _default_combiner.padding_hash(level)


__all__ = [
    "ZERO_HASH",
    "Combiner",
    "Sha256Combiner",
    "COMBINERS",
    "get_default_combiner",
    "get_combiner",
    "combine",
    "padding_hash",
]
