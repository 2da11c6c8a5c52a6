"""
Hashing utilities: SHA-256 helpers and per-block leaf hashing.
"""
from .hashing import (
    HASH_SIZE,
    sha256,
    hash_concat,
    is_valid_hash,
    to_hex,
    from_hex,
)
from .block_hashing import (
    DEFAULT_BLOCK_SIZE,
    hash_blocks,
    hash_bytes_blocks,
    hash_file,
)

__all__ = [
    "HASH_SIZE",
    "sha256",
    "hash_concat",
    "is_valid_hash",
    "to_hex",
    "from_hex",
    "DEFAULT_BLOCK_SIZE",
    "hash_blocks",
    "hash_bytes_blocks",
    "hash_file",
]
