"""
Error taxonomy and result schemas for the hashtree package.
"""

from .errors import (
    ErrorCodes,
    HashTreeError,
    HashTreeException,
    OutOfRangeException,
    EmptyTreeException,
    InvalidHashException,
    TreeShapeException,
    TreeLoadException,
    StaleViewException,
    MerkleVerificationException,
    ConfigException,
)
from .results import LoadOutcome, LoadResult

__all__ = [
    "ErrorCodes",
    "HashTreeError",
    "HashTreeException",
    "OutOfRangeException",
    "EmptyTreeException",
    "InvalidHashException",
    "TreeShapeException",
    "TreeLoadException",
    "StaleViewException",
    "MerkleVerificationException",
    "ConfigException",
    "LoadOutcome",
    "LoadResult",
]
