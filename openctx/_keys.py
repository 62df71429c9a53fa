"""
Property name canonicalization (internal).

Every baggage and join binding is stored under the canonical form of its
property name, so names that differ only in letter case denote the same
property.
"""

from __future__ import annotations


def canonical_name(name: str) -> str:
    """
    Return the canonical form of a property name.

    Args:
        name: A property name in any letter case.

    Returns:
        The lower-cased name.

    Example:
        >>> canonical_name("TTL")
        'ttl'
        >>> canonical_name("X-Request-Id")
        'x-request-id'
    """
    return name.lower()
