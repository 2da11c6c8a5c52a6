"""
CLI Tree Commands

Build a hash tree over a file and print its root or one of its levels.

Usage:
    hashtree root movie.mkv [--block-size N] [--json]
    hashtree layer movie.mkv --level 4 [--json]
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
from hashtree.crypto.hashing import to_hex
from hashtree.merkle.combiner import Combiner
from hashtree.merkle.hash_tree import HashTree, build_tree
from hashtree.schemas.errors import TreeShapeException


logger = logging.getLogger(__name__)


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1
EXIT_VERIFICATION_FAILED = 2


@dataclass
class TreeSummary:
    """Summary of a tree built over a file, for CLI output."""
    path: str = ""
    root: str = ""
    block_size: int = 0
    num_blocks: int = 0
    num_leaves: int = 0
    num_levels: int = 0
    level: int | None = None
    hashes: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        d = asdict(self)
        if self.level is None:
            del d["level"]
            del d["hashes"]
        return d


def resolve_block_size(args: Namespace) -> int:
    """Block size from the command line, falling back to the config."""
    block_size = getattr(args, "block_size", None)
    if block_size:
        return block_size
    return args.runtime_config.hashing.block_size


def resolve_combiner(args: Namespace) -> Combiner:
    """Node combiner for the configured hash algorithm."""
    return args.runtime_config.hashing.combiner()


def tree_for_file(
    path: Path,
    block_size: int,
    combiner: Combiner | None = None,
) -> tuple[list[bytes], HashTree]:
    """Hash a file into leaves and build the populated tree over them."""
    logger.info(f"Hashing {path} in blocks of {block_size} bytes")
    leaves = hash_file(path, block_size)
    return leaves, build_tree(leaves, combiner)


def summarize(path: Path, block_size: int, leaves: list[bytes], tree: HashTree) -> TreeSummary:
    return TreeSummary(
        path=str(path),
        root=to_hex(tree.root()),
        block_size=block_size,
        num_blocks=len(leaves),
        num_leaves=tree.num_leaves(),
        num_levels=tree.num_levels(),
    )


def print_summary_human(summary: TreeSummary) -> None:
    """Print summary in human-readable format."""
    print(f"file: {summary.path}")
    print(f"root: {summary.root}")
    print(f"block_size: {summary.block_size}")
    print(f"blocks: {summary.num_blocks}")
    print(f"leaves: {summary.num_leaves}")
    print(f"levels: {summary.num_levels}")
    if summary.level is not None:
        print(f"\nlevel {summary.level} ({len(summary.hashes)} hashes):")
        for i, h in enumerate(summary.hashes):
            print(f"  {i:>6} {h}")


def print_summary_json(summary: TreeSummary) -> None:
    """Print summary as JSON."""
    print(json.dumps(summary.to_dict(), indent=2))


def root_cmd(args: Namespace) -> int:
    """Execute the root command."""
    path = Path(args.file)
    if not path.is_file():
        print(f"Error: File not found: {path}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    block_size = resolve_block_size(args)
    leaves, tree = tree_for_file(path, block_size, resolve_combiner(args))
    summary = summarize(path, block_size, leaves, tree)

    if args.json:
        print_summary_json(summary)
    else:
        print_summary_human(summary)
    return EXIT_SUCCESS


def layer_cmd(args: Namespace) -> int:
    """Execute the layer command."""
    path = Path(args.file)
    if not path.is_file():
        print(f"Error: File not found: {path}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    block_size = resolve_block_size(args)
    leaves, tree = tree_for_file(path, block_size, resolve_combiner(args))
    summary = summarize(path, block_size, leaves, tree)

    try:
        hashes = tree.level(args.level)
    except TreeShapeException as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    summary.level = args.level
    summary.hashes = [to_hex(h) for h in hashes]

    if args.json:
        print_summary_json(summary)
    else:
        print_summary_human(summary)
    return EXIT_SUCCESS
