"""Tests for stock join functions."""

from __future__ import annotations

import pytest

from openctx.joins import (
    join_max_int,
    join_min_int,
    join_union,
    keep_first,
    keep_last,
    split_set,
)


class TestJoinMinInt:
    """Tests for join_min_int()."""

    @pytest.mark.parametrize(
        "existing,incoming,expected",
        [("1000", "100", "100"), ("100", "1000", "100"), ("-5", "3", "-5"), ("7", "7", "7")],
    )
    def test_smaller_wins(self, existing, incoming, expected):
        assert join_min_int(existing, incoming) == expected

    def test_malformed_existing_takes_incoming(self):
        assert join_min_int("soon", "100") == "100"

    def test_malformed_incoming_keeps_existing(self):
        assert join_min_int("100", "") == "100"


class TestJoinMaxInt:
    """Tests for join_max_int()."""

    def test_larger_wins(self):
        assert join_max_int("3", "12") == "12"
        assert join_max_int("12", "3") == "12"

    def test_malformed_falls_back(self):
        assert join_max_int("x", "4") == "4"
        assert join_max_int("4", "x") == "4"


class TestJoinUnion:
    """Tests for join_union()."""

    def test_two_singletons(self):
        assert join_union("a", "b") == "a, b"

    def test_interleaved_sets(self):
        assert join_union("a, c", "b, d") == "a, b, c, d"

    def test_deduplicates(self):
        assert join_union("a, b", "b, c") == "a, b, c"

    def test_commutative(self):
        assert join_union("x, a", "m") == join_union("m", "x, a")

    def test_empty_operand(self):
        assert join_union("", "b") == "b"

    def test_split_set_drops_empty(self):
        assert split_set("") == []
        assert split_set("a, b") == ["a", "b"]


class TestKeepPolicies:
    def test_keep_first(self):
        assert keep_first("a", "b") == "a"

    def test_keep_last(self):
        assert keep_last("a", "b") == "b"
