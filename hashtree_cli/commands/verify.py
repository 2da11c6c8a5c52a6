"""
CLI Verify Command

Verify a file against a trusted root hash:
- Hash the file into blocks
- Allocate a tree anchored on the trusted root
- Fill it from the block hashes and compare the derived root

Usage:
    hashtree verify movie.mkv --root 0x... [--block-size N] [--json]
"""

from __future__ import annotations

import json
import logging
import sys
from argparse import Namespace
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any

from hashtree.crypto.block_hashing import hash_file
from hashtree.crypto.hashing import from_hex, is_valid_hash, to_hex
from hashtree.merkle.combiner import Combiner
from hashtree.merkle.hash_tree import HashTree, build_tree
from hashtree_cli.commands.tree import (
    EXIT_RUNTIME_ERROR,
    EXIT_SUCCESS,
    EXIT_VERIFICATION_FAILED,
    resolve_block_size,
    resolve_combiner,
)


logger = logging.getLogger(__name__)


@dataclass
class VerifySummary:
    """Summary of file verification for CLI output."""
    path: str = ""
    expected_root: str = ""
    actual_root: str = ""
    num_blocks: int = 0
    ok: bool = False
    errors: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        d = asdict(self)
        if not d["errors"]:
            del d["errors"]
        return d


def verify_file(
    path: Path,
    trusted_root: bytes,
    block_size: int,
    combiner: Combiner | None = None,
) -> VerifySummary:
    """Check that the blocks of a file hash up to trusted_root."""
    leaves = hash_file(path, block_size)
    tree = HashTree.from_root(max(len(leaves), 1), trusted_root, combiner)
    summary = VerifySummary(
        path=str(path),
        expected_root=to_hex(trusted_root),
        num_blocks=len(leaves),
    )

    logger.info(f"Verifying {len(leaves)} blocks against {summary.expected_root}")
    summary.ok = tree.verify_fill(leaves)
    if summary.ok:
        summary.actual_root = summary.expected_root
    else:
        # tree is untouched on mismatch, rebuild to report what the file hashes to
        summary.actual_root = to_hex(build_tree(leaves, combiner).root())
        summary.errors.append("File does not hash to the trusted root")
    return summary


def print_summary_human(summary: VerifySummary) -> None:
    """Print summary in human-readable format."""
    print(f"file: {summary.path}")
    print(f"blocks: {summary.num_blocks}")
    print(f"expected_root: {summary.expected_root}")
    print(f"actual_root: {summary.actual_root}")
    print(f"ok: {str(summary.ok).lower()}")
    for err in summary.errors:
        print(f"  ✗ {err}")


def verify_cmd(args: Namespace) -> int:
    """
    Execute the verify command.

    Returns:
        Exit code (0 match, 1 error, 2 mismatch)
    """
    path = Path(args.file)
    if not path.is_file():
        print(f"Error: File not found: {path}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    try:
        trusted_root = from_hex(args.root)
    except ValueError as e:
        print(f"Error: Invalid root: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR
    if not is_valid_hash(trusted_root):
        print(f"Error: Root must be 32 bytes, got {len(trusted_root)}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    summary = verify_file(
        path, trusted_root, resolve_block_size(args), resolve_combiner(args)
    )

    if args.json:
        print(json.dumps(summary.to_dict(), indent=2))
    else:
        print_summary_human(summary)

    return EXIT_SUCCESS if summary.ok else EXIT_VERIFICATION_FAILED
