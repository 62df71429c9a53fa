"""Tests for rich baggage rendering."""

from __future__ import annotations

import io

import pytest

pytest.importorskip("rich")

from rich.console import Console  # noqa: E402

from openctx.context import background, with_baggage, with_join  # noqa: E402
from openctx.display import baggage_table, print_baggage  # noqa: E402
from openctx.joins import join_union  # noqa: E402


def _render(ctx) -> str:
    buffer = io.StringIO()
    console = Console(file=buffer, width=100, color_system=None)
    print_baggage(ctx, console=console)
    return buffer.getvalue()


class TestBaggageTable:
    def test_one_row_per_property(self):
        ctx = with_baggage(background(), "b", "2")
        ctx = with_baggage(ctx, "a", "1")
        table = baggage_table(ctx)
        assert table.row_count == 2
        assert [c.header for c in table.columns] == ["Name", "Value", "Join"]

    def test_empty_context(self):
        assert baggage_table(background()).row_count == 0

    def test_rendered_output(self):
        ctx = with_join(background(), "receipts", join_union)
        ctx = with_baggage(ctx, "Receipts", "alice")
        ctx = with_baggage(ctx, "trace", "abc")
        output = _render(ctx)
        assert "receipts" in output
        assert "join_union" in output
        assert "abc" in output
        assert "Baggage" in output
