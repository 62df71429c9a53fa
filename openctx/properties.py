"""
Typed helpers for well-known baggage properties.

These are ordinary client code built on the primitive operations; any library
can define its own helpers for its own properties in the same way.

TTL:
    Remaining time budget in whole milliseconds. Joins by minimum, so the
    tightest deadline seen anywhere in the call graph wins.

Receipts:
    Sorted set of the services that took part in handling a request. Joins by
    sorted union.
"""

from __future__ import annotations

from datetime import timedelta

from openctx.context import Context, baggage, with_baggage_join, with_join
from openctx.joins import join_union, split_set

TTL_KEY = "ttl"
RECEIPTS_KEY = "receipts"

_MILLISECOND = timedelta(milliseconds=1)


def join_ttl(existing: str, incoming: str) -> str:
    """
    Keep the smaller TTL.

    A malformed existing TTL yields the incoming one; a malformed incoming TTL
    yields "0", expiring the request rather than extending it.
    """
    try:
        a = int(existing)
    except ValueError:
        return incoming
    try:
        b = int(incoming)
    except ValueError:
        return "0"
    return existing if a < b else incoming


def with_ttl(ctx: Context, ttl: timedelta) -> Context:
    """Bind a TTL, keeping the smaller of it and any TTL already carried."""
    return with_baggage_join(ctx, TTL_KEY, str(ttl // _MILLISECOND), join_ttl)


def ttl(ctx: Context) -> timedelta | None:
    """Return the TTL carried by ``ctx``, or None if absent or malformed."""
    value, found = baggage(ctx, TTL_KEY)
    if not found:
        return None
    try:
        return int(value) * _MILLISECOND
    except ValueError:
        return None


def with_receipt(ctx: Context, receipt: str) -> Context:
    """Add a service name to the receipts carried by ``ctx``."""
    return with_baggage_join(ctx, RECEIPTS_KEY, receipt, join_union)


def receipts(ctx: Context) -> list[str]:
    """Return the sorted receipts carried by ``ctx`` (empty if none)."""
    value, found = baggage(ctx, RECEIPTS_KEY)
    if not found:
        return []
    return split_set(value)


def with_standard_joins(ctx: Context) -> Context:
    """
    Register the TTL and receipts join functions on ``ctx``.

    Register these before fanning out parallel requests so that response
    contexts recombined with join() merge TTLs and receipts instead of
    overwriting them.
    """
    ctx = with_join(ctx, TTL_KEY, join_ttl)
    return with_join(ctx, RECEIPTS_KEY, join_union)
