"""
Module 00 - Schemas
File: errors.py

Purpose: Standard error taxonomy for hash tree operations.
Defines both Pydantic models for structured error communication
and Python exceptions for control flow.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# Error Codes (Machine-Readable Constants)
# =============================================================================

class ErrorCodes:
    """Stable machine-readable error codes used across the package."""

    # Node access
    OUT_OF_RANGE = "OUT_OF_RANGE"
    EMPTY_TREE = "EMPTY_TREE"
    INVALID_HASH = "INVALID_HASH"
    STALE_VIEW = "STALE_VIEW"

    # Tree shape & loading
    TREE_SHAPE_MISMATCH = "TREE_SHAPE_MISMATCH"
    ROOT_MISMATCH = "ROOT_MISMATCH"
    SIZE_MISMATCH = "SIZE_MISMATCH"
    EMPTY_CANDIDATE = "EMPTY_CANDIDATE"

    # Verification
    MERKLE_PROOF_INVALID = "MERKLE_PROOF_INVALID"
    VERIFICATION_FAILED = "VERIFICATION_FAILED"

    # Configuration
    CONFIG_ERROR = "CONFIG_ERROR"


# =============================================================================
# Pydantic Error Models (Structured Communication)
# =============================================================================

class HashTreeError(BaseModel):
    """
    Base error model for structured error communication.

    Used when a failure has to be reported as data (a rejected load)
    rather than raised.
    """

    model_config = ConfigDict(
        extra="forbid",
        frozen=False,
        validate_assignment=True,
    )

    code: str = Field(
        ...,
        description="Stable machine-readable error code",
        examples=[ErrorCodes.OUT_OF_RANGE],
    )
    message: str = Field(
        ...,
        description="Human-readable error message",
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional structured details about the error",
    )
    retryable: bool = Field(
        default=False,
        description="Whether retrying with freshly fetched data can succeed",
    )


# =============================================================================
# Python Exceptions (Control Flow)
# =============================================================================

class HashTreeException(Exception):
    """
    Base exception for all hash tree errors.

    This exception carries structured error information and can be
    converted to/from HashTreeError models.
    """

    def __init__(
        self,
        message: str,
        code: str = "HASHTREE_ERROR",
        details: dict[str, Any] | None = None,
        retryable: bool = False,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details or {}
        self.retryable = retryable

    def to_error_model(self) -> HashTreeError:
        """Convert this exception to a HashTreeError model."""
        return HashTreeError(
            code=self.code,
            message=self.message,
            details=self.details,
            retryable=self.retryable,
        )

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code!r}, message={self.message!r})"


class OutOfRangeException(HashTreeException, IndexError):
    """Raised when a node index falls outside [0, size)."""

    def __init__(
        self,
        index: int,
        size: int,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        full_details.update({"index": index, "size": size})
        super().__init__(
            message=f"Node index {index} out of range for tree of size {size}",
            code=ErrorCodes.OUT_OF_RANGE,
            details=full_details,
        )


class EmptyTreeException(HashTreeException):
    """Raised when an operation requires a non-empty tree."""

    def __init__(self, operation: str) -> None:
        super().__init__(
            message=f"Cannot {operation} on an empty tree",
            code=ErrorCodes.EMPTY_TREE,
            details={"operation": operation},
        )


class InvalidHashException(HashTreeException, ValueError):
    """Raised when a value is not a 32-byte digest."""

    def __init__(
        self,
        message: str,
        index: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if index is not None:
            full_details["index"] = index
        super().__init__(
            message=message,
            code=ErrorCodes.INVALID_HASH,
            details=full_details,
        )


class TreeShapeException(HashTreeException, ValueError):
    """Raised when a level, region or layer does not fit the tree shape."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.TREE_SHAPE_MISMATCH,
            details=details,
        )


class TreeLoadException(HashTreeException):
    """Raised on request when a bulk load was rejected."""

    def __init__(
        self,
        message: str,
        code: str,
        details: dict[str, Any] | None = None,
        retryable: bool = False,
    ) -> None:
        super().__init__(
            message=message,
            code=code,
            details=details,
            retryable=retryable,
        )


class StaleViewException(HashTreeException):
    """Raised when a leaf view is used after its tree was mutated."""

    def __init__(self, taken_at: int, current: int) -> None:
        super().__init__(
            message="Leaf view was invalidated by a later tree mutation",
            code=ErrorCodes.STALE_VIEW,
            details={"taken_at_generation": taken_at, "current_generation": current},
        )


class MerkleVerificationException(HashTreeException):
    """Raised when Merkle proof verification fails."""

    def __init__(
        self,
        message: str,
        leaf_index: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if leaf_index is not None:
            full_details["leaf_index"] = leaf_index
        super().__init__(
            message=message,
            code=ErrorCodes.MERKLE_PROOF_INVALID,
            details=full_details,
        )


class ConfigException(HashTreeException, ValueError):
    """Raised when runtime configuration is invalid."""

    def __init__(
        self,
        message: str,
        field_path: str | None = None,
    ) -> None:
        details: dict[str, Any] = {}
        if field_path:
            details["field_path"] = field_path
        super().__init__(
            message=message,
            code=ErrorCodes.CONFIG_ERROR,
            details=details,
        )
