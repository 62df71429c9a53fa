"""
Stock join functions.

Each function has the JoinFn signature ``(existing, incoming) -> merged`` and is
total over strings: malformed operands fall back to the other operand rather
than raising.

- join_min_int: smaller integer wins (deadlines, TTLs)
- join_max_int: larger integer wins (logical clocks)
- join_union: sorted, de-duplicated ", "-separated set (receipts)
- keep_first / keep_last: explicit first-writer / last-writer policies
"""

from __future__ import annotations

SET_SEPARATOR = ", "


def _parse_int(value: str) -> int | None:
    try:
        return int(value)
    except ValueError:
        return None


def join_min_int(existing: str, incoming: str) -> str:
    """
    Keep the smaller of two decimal integers.

    Example:
        >>> join_min_int("1000", "100")
        '100'
        >>> join_min_int("oops", "100")
        '100'
    """
    a = _parse_int(existing)
    b = _parse_int(incoming)
    if a is None:
        return incoming
    if b is None:
        return existing
    return existing if a < b else incoming


def join_max_int(existing: str, incoming: str) -> str:
    """Keep the larger of two decimal integers."""
    a = _parse_int(existing)
    b = _parse_int(incoming)
    if a is None:
        return incoming
    if b is None:
        return existing
    return existing if a > b else incoming


def split_set(value: str) -> list[str]:
    """Split a ", "-separated set value, dropping empty members."""
    return [member for member in value.split(SET_SEPARATOR) if member]


def join_union(existing: str, incoming: str) -> str:
    """
    Merge two ", "-separated sets into one sorted, de-duplicated set.

    Commutative and associative, so branches recombined in any order agree.

    Example:
        >>> join_union("a, c", "b, d")
        'a, b, c, d'
    """
    members = set(split_set(existing)) | set(split_set(incoming))
    return SET_SEPARATOR.join(sorted(members))


def keep_first(existing: str, incoming: str) -> str:
    """Ignore the incoming value once a property is bound."""
    return existing


def keep_last(existing: str, incoming: str) -> str:
    """Take the incoming value (same as having no join function)."""
    return incoming
