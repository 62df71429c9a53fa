"""
Rich rendering of the baggage carried by a context.

Requires the 'rich' package: pip install openctx[rich]
"""

from __future__ import annotations

from rich.console import Console
from rich.table import Table

from openctx.context import Context, items, lookup_join


def _join_label(ctx: Context, name: str) -> str:
    join_fn, found = lookup_join(ctx, name)
    if not found:
        return "-"
    return getattr(join_fn, "__name__", repr(join_fn))


def baggage_table(ctx: Context, title: str = "Baggage") -> Table:
    """
    Build a table of a context's baggage.

    One row per carried property, in name order, showing the value and the
    join function currently registered for it ("-" when values overwrite).

    Example:
        from rich.console import Console
        Console().print(baggage_table(ctx))
    """
    table = Table(title=title, show_header=True, header_style="bold")
    table.add_column("Name", style="cyan", no_wrap=True)
    table.add_column("Value")
    table.add_column("Join", style="dim")

    for name, value in items(ctx).items():
        table.add_row(name, value, _join_label(ctx, name))

    return table


def print_baggage(ctx: Context, console: Console | None = None, title: str = "Baggage") -> None:
    """Print baggage_table(ctx) to ``console`` (a new stdout Console by default)."""
    console = console or Console()
    console.print(baggage_table(ctx, title=title))
