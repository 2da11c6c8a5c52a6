"""
hashtree - verified Merkle hash-tree storage.

A flat, fixed-size container for a complete binary Merkle tree over
fixed-size content blocks, used to verify downloaded data against a single
trusted root hash.
"""

__version__ = "0.1.0"
