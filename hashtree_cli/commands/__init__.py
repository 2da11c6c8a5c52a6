"""
CLI command modules.
"""

from hashtree_cli.commands import tree, verify, proof

__all__ = ["tree", "verify", "proof"]
