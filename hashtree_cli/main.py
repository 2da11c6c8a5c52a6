"""
CLI Main Entry Point

Parses command-line arguments and dispatches to subcommands.

Usage:
    python -m hashtree_cli root <file> [--block-size N] [--json]
    python -m hashtree_cli layer <file> --level L [--block-size N] [--json]
    python -m hashtree_cli verify <file> --root 0x... [--block-size N] [--json]
    python -m hashtree_cli proof <file> --leaf I [--block-size N] [--json]
    python -m hashtree_cli config --init|--show [--path PATH]

Environment Variables:
    HASHTREE_BLOCK_SIZE     Block size in bytes (default: 16384)
    HASHTREE_LOG_LEVEL      Log level (default: INFO)
    HASHTREE_LOG_FILE       Optional log file
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
import traceback
from pathlib import Path
from typing import Sequence

from hashtree.config.runtime import get_default_config_template
from hashtree.schemas.errors import HashTreeException
from hashtree_cli.commands import proof, tree, verify
from hashtree_cli.config import load_config


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1
EXIT_VERIFICATION_FAILED = 2


def setup_logging(level: str = "INFO", log_file: str | None = None) -> None:
    """Configure logging for the CLI."""
    log_level = getattr(logging, level.upper(), logging.INFO)

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]

    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=handlers,
    )


def _positive_int(value: str) -> int:
    number = int(value)
    if number <= 0:
        raise argparse.ArgumentTypeError(f"must be positive, got {value}")
    return number


def _add_file_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "file",
        type=str,
        help="Path to the content file",
    )
    parser.add_argument(
        "--block-size", "-b",
        type=_positive_int,
        default=None,
        help="Block size in bytes (default: from config, 16384)",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        default=False,
        help="Output machine-readable JSON",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        default=False,
        help="Print tracebacks on errors",
    )


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="hashtree",
        description="Build and verify Merkle hash trees over file blocks.",
    )
    parser.add_argument(
        "--version", action="version", version="%(prog)s 0.1.0"
    )
    parser.add_argument(
        "--config", "-c",
        type=Path,
        default=None,
        help="Path to YAML configuration file (default: ./hashtree.yaml or ~/.config/hashtree/config.yaml)",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level (overrides config)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # --- root command ---
    root_parser = subparsers.add_parser(
        "root",
        help="Print the root hash of a file",
        description="Hash a file into blocks and print the Merkle root.",
    )
    _add_file_args(root_parser)
    root_parser.set_defaults(func=tree.root_cmd)

    # --- layer command ---
    layer_parser = subparsers.add_parser(
        "layer",
        help="Print one level of a file's tree",
        description="Print the hashes at a level of the tree (0 = block hashes).",
    )
    _add_file_args(layer_parser)
    layer_parser.add_argument(
        "--level", "-l",
        type=int,
        required=True,
        help="Level counted from the leaves (0 = leaves)",
    )
    layer_parser.set_defaults(func=tree.layer_cmd)

    # --- verify command ---
    verify_parser = subparsers.add_parser(
        "verify",
        help="Verify a file against a trusted root",
        description="Exit 0 if the file hashes to the root, 2 if it does not.",
    )
    _add_file_args(verify_parser)
    verify_parser.add_argument(
        "--root", "-r",
        type=str,
        required=True,
        help="Trusted root hash (0x-prefixed hex)",
    )
    verify_parser.set_defaults(func=verify.verify_cmd)

    # --- proof command ---
    proof_parser = subparsers.add_parser(
        "proof",
        help="Print an inclusion proof for one block",
        description="Print the sibling hashes linking a block to the root.",
    )
    _add_file_args(proof_parser)
    proof_parser.add_argument(
        "--leaf",
        type=int,
        required=True,
        help="0-based block index",
    )
    proof_parser.set_defaults(func=proof.proof_cmd)

    # --- config command ---
    config_parser = subparsers.add_parser(
        "config",
        help="Manage configuration",
        description="Initialize or display configuration.",
    )
    config_parser.add_argument(
        "--init",
        action="store_true",
        default=False,
        help="Create a template configuration file",
    )
    config_parser.add_argument(
        "--show",
        action="store_true",
        default=False,
        help="Show current configuration",
    )
    config_parser.add_argument(
        "--path",
        type=str,
        default="hashtree.yaml",
        help="Path for config file (default: hashtree.yaml)",
    )
    config_parser.set_defaults(func=config_cmd)

    return parser


def config_cmd(args: argparse.Namespace) -> int:
    """Handle config command."""
    if args.init:
        config_path = Path(args.path)
        if config_path.exists():
            print(f"Error: Config file already exists: {config_path}", file=sys.stderr)
            return EXIT_RUNTIME_ERROR

        config_path.write_text(get_default_config_template())
        print(f"Created configuration file: {config_path}")
        print("You can also use environment variables (HASHTREE_* prefix).")
        return EXIT_SUCCESS

    if args.show:
        print(json.dumps(args.runtime_config.to_dict(), indent=2))
        return EXIT_SUCCESS

    print("Usage: hashtree config [--init|--show]")
    print("  --init  Create a template configuration file")
    print("  --show  Show current configuration")
    return EXIT_SUCCESS


def main(argv: Sequence[str] | None = None) -> int:
    """
    Main entry point for the CLI.

    Args:
        argv: Command-line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code (0=success, 1=error, 2=verification failed)
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return EXIT_RUNTIME_ERROR

    try:
        config = load_config(args.config)
    except (OSError, ValueError) as e:
        print(f"Error loading configuration: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    log_level = args.log_level or config.logging.level
    setup_logging(level=log_level, log_file=config.logging.file)

    # Attach config to args for commands to use
    args.runtime_config = config

    try:
        return args.func(args)
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        return EXIT_RUNTIME_ERROR
    except (HashTreeException, OSError, ValueError) as e:
        if getattr(args, "debug", False):
            traceback.print_exc()
        else:
            print(f"Error: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR


if __name__ == "__main__":
    sys.exit(main())
