"""
Module 00 - Schemas
File: results.py

Purpose: Tagged outcome of a bulk tree load.

A load either replaces the whole tree or leaves it untouched. The outcome
tells the caller which of the two happened and why.
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from .errors import ErrorCodes, HashTreeError, TreeLoadException


class LoadOutcome(str, Enum):
    """Possible outcomes of HashTree.load()."""

    OK = "ok"
    EMPTY_CANDIDATE = "empty_candidate"
    EMPTY_TREE = "empty_tree"
    ROOT_MISMATCH = "root_mismatch"
    SIZE_MISMATCH = "size_mismatch"


_OUTCOME_CODES: dict[LoadOutcome, str] = {
    LoadOutcome.EMPTY_CANDIDATE: ErrorCodes.EMPTY_CANDIDATE,
    LoadOutcome.EMPTY_TREE: ErrorCodes.EMPTY_TREE,
    LoadOutcome.ROOT_MISMATCH: ErrorCodes.ROOT_MISMATCH,
    LoadOutcome.SIZE_MISMATCH: ErrorCodes.SIZE_MISMATCH,
}

# Rejections caused by the candidate rather than by the tree
_RETRYABLE_OUTCOMES = frozenset({
    LoadOutcome.EMPTY_CANDIDATE,
    LoadOutcome.ROOT_MISMATCH,
    LoadOutcome.SIZE_MISMATCH,
})


class LoadResult(BaseModel):
    """
    Result of a bulk load.

    Only an OK outcome means the tree was replaced. Every other outcome
    means the tree is byte-for-byte what it was before the call.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    outcome: LoadOutcome = Field(
        ...,
        description="What the load did",
    )
    message: str = Field(
        default="",
        description="Human-readable explanation",
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Sizes or roots involved in a rejection",
    )

    @property
    def ok(self) -> bool:
        """True if the candidate replaced the tree contents."""
        return self.outcome == LoadOutcome.OK

    @property
    def retryable(self) -> bool:
        """True if loading a re-fetched candidate may succeed."""
        return self.outcome in _RETRYABLE_OUTCOMES

    def __bool__(self) -> bool:
        return self.ok

    @classmethod
    def accepted(cls) -> "LoadResult":
        return cls(outcome=LoadOutcome.OK, message="Tree loaded")

    @classmethod
    def rejected(
        cls,
        outcome: LoadOutcome,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> "LoadResult":
        return cls(outcome=outcome, message=message, details=details or {})

    def to_error(self) -> HashTreeError | None:
        """Structured error for a rejected load, None when accepted."""
        if self.ok:
            return None
        return HashTreeError(
            code=_OUTCOME_CODES[self.outcome],
            message=self.message,
            details=self.details,
            retryable=self.retryable,
        )

    def raise_for_outcome(self) -> None:
        """Raise TreeLoadException unless the load was accepted."""
        if self.ok:
            return
        raise TreeLoadException(
            message=self.message,
            code=_OUTCOME_CODES[self.outcome],
            details=self.details,
            retryable=self.retryable,
        )
