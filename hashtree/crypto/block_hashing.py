"""
Module 01 - Block Hashing
Split content into fixed-size blocks and hash each one into a leaf.

Rules:
1. Blocks are block_size bytes, the last one may be shorter
2. Each leaf is sha256(block) over exactly the block's bytes
3. Empty content has no blocks (and no leaf hashes)
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import BinaryIO, Iterator

from hashtree.crypto.hashing import sha256


logger = logging.getLogger(__name__)

# 16 KiB, the block size BitTorrent v2 hash trees are built over
DEFAULT_BLOCK_SIZE: int = 16 * 1024


def _check_block_size(block_size: int) -> None:
    if block_size <= 0:
        raise ValueError(f"Block size must be positive, got {block_size}")


def hash_blocks(stream: BinaryIO, block_size: int = DEFAULT_BLOCK_SIZE) -> Iterator[bytes]:
    """
    Yield the SHA-256 of each block read from a binary stream.

    Args:
        stream: Readable binary file object
        block_size: Size of each block in bytes

    Yields:
        32-byte leaf hash per block, in order
    """
    _check_block_size(block_size)
    while True:
        block = stream.read(block_size)
        if not block:
            return
        yield sha256(block)


def hash_bytes_blocks(data: bytes, block_size: int = DEFAULT_BLOCK_SIZE) -> list[bytes]:
    """Leaf hashes for an in-memory buffer."""
    _check_block_size(block_size)
    return [
        sha256(data[offset:offset + block_size])
        for offset in range(0, len(data), block_size)
    ]


def hash_file(path: str | Path, block_size: int = DEFAULT_BLOCK_SIZE) -> list[bytes]:
    """
    Leaf hashes for every block of a file.

    Raises:
        FileNotFoundError: If the file does not exist
    """
    path = Path(path)
    if not path.is_file():
        raise FileNotFoundError(f"File not found: {path}")

    with open(path, "rb") as f:
        leaves = list(hash_blocks(f, block_size))

    logger.debug("Hashed %s into %d blocks of %d bytes", path, len(leaves), block_size)
    return leaves


__all__ = [
    "DEFAULT_BLOCK_SIZE",
    "hash_blocks",
    "hash_bytes_blocks",
    "hash_file",
]
