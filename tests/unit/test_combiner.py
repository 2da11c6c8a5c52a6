"""
Combiner Unit Tests
Tests for hashtree/merkle/combiner.py
"""
import hashlib

import pytest

from hashtree.merkle.combiner import (
    ZERO_HASH,
    Combiner,
    Sha256Combiner,
    combine,
    COMBINERS,
    get_combiner,
    get_default_combiner,
    padding_hash,
)


class TestCombine:
    """Tests for pairwise combination."""

    def test_combine_is_sha256_of_concatenation(self):
        left = hashlib.sha256(b"left").digest()
        right = hashlib.sha256(b"right").digest()

        assert combine(left, right) == hashlib.sha256(left + right).digest()

    def test_combine_is_order_sensitive(self):
        a = hashlib.sha256(b"a").digest()
        b = hashlib.sha256(b"b").digest()

        assert combine(a, b) != combine(b, a)

    def test_module_functions_use_default_combiner(self):
        a = hashlib.sha256(b"a").digest()
        assert combine(a, a) == get_default_combiner().combine(a, a)
        assert padding_hash(3) == get_default_combiner().padding_hash(3)


class TestPaddingHash:
    """Tests for the padding-hash table."""

    def test_leaf_padding_is_zero_hash(self):
        assert padding_hash(0) == ZERO_HASH == bytes(32)

    def test_padding_levels_chain(self):
        """Each level is the combination of two copies of the level below."""
        for level in range(1, 6):
            below = padding_hash(level - 1)
            assert padding_hash(level) == combine(below, below)

    def test_padding_level_one_known_value(self):
        assert padding_hash(1) == hashlib.sha256(bytes(64)).digest()

    def test_table_is_reused(self):
        combiner = Sha256Combiner()
        first = combiner.padding_hash(10)

        assert combiner.padding_hash(10) is first

    def test_negative_level_raises(self):
        with pytest.raises(ValueError, match="non-negative"):
            padding_hash(-1)

    def test_out_of_order_lookups_agree(self):
        """Asking for a high level first fills the table consistently."""
        high_first = Sha256Combiner()
        low_first = Sha256Combiner()
        high = high_first.padding_hash(8)
        for level in range(9):
            low_first.padding_hash(level)

        assert high == low_first.padding_hash(8)


class TestCombinerProtocol:
    """Tests for the Combiner interface."""

    def test_sha256_combiner_satisfies_protocol(self):
        assert isinstance(Sha256Combiner(), Combiner)

    def test_custom_class_satisfies_protocol(self):
        class Prefixed:
            def combine(self, left, right):
                return hashlib.sha256(b"\x01" + left + right).digest()

            def padding_hash(self, level):
                return ZERO_HASH

        assert isinstance(Prefixed(), Combiner)


class TestCombinerSelection:
    """Tests for choosing a combiner by algorithm name."""

    def test_sha256_is_registered(self):
        assert COMBINERS["sha256"] is Sha256Combiner

    def test_default_algorithm_shares_default_combiner(self):
        assert get_combiner() is get_default_combiner()
        assert get_combiner("sha256") is get_default_combiner()

    def test_unknown_algorithm_raises(self):
        with pytest.raises(ValueError, match="Unsupported"):
            get_combiner("md5")
