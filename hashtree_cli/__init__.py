"""
hashtree CLI

Command-line interface for building and verifying hash trees.

Usage:
    python -m hashtree_cli root movie.mkv
    python -m hashtree_cli verify movie.mkv --root 0x...
    python -m hashtree_cli layer movie.mkv --level 4
    python -m hashtree_cli proof movie.mkv --leaf 3
    python -m hashtree_cli config --show
"""

__version__ = "0.1.0"
