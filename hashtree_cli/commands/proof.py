"""
CLI Proof Command

Print the inclusion proof for one block of a file.

Usage:
    hashtree proof movie.mkv --leaf 3 [--block-size N] [--json]
"""

from __future__ import annotations

import json
import sys
from argparse import Namespace
from pathlib import Path

from hashtree.crypto.hashing import to_hex
from hashtree.merkle.merkle_proofs import MerkleVerifier, build_tree_proof
from hashtree.schemas.errors import MerkleVerificationException, OutOfRangeException
from hashtree_cli.commands.tree import (
    EXIT_RUNTIME_ERROR,
    EXIT_SUCCESS,
    EXIT_VERIFICATION_FAILED,
    resolve_block_size,
    resolve_combiner,
    tree_for_file,
)


def proof_cmd(args: Namespace) -> int:
    """Execute the proof command."""
    path = Path(args.file)
    if not path.is_file():
        print(f"Error: File not found: {path}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    _, tree = tree_for_file(path, resolve_block_size(args), resolve_combiner(args))

    try:
        proof = build_tree_proof(tree, args.leaf)
    except OutOfRangeException as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    try:
        MerkleVerifier.verify_or_raise(proof, tree.combiner)
    except MerkleVerificationException as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return EXIT_VERIFICATION_FAILED

    if args.json:
        print(json.dumps(proof.to_dict(), indent=2))
    else:
        print(f"leaf {proof.index}: {to_hex(proof.leaf)}")
        for level, sibling in enumerate(proof.siblings):
            print(f"  level {level}: {to_hex(sibling)}")
        print(f"root: {to_hex(proof.root)}")
    return EXIT_SUCCESS
