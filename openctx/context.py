"""
Context: immutable, parent-linked carrier of baggage and join functions.

Each Context node extends its parent with at most one baggage binding
(name -> value) and at most one join binding (name -> join function). The two
bindings live in separate slots and are looked up along separate chains:
lookups walk from a node toward the root and stop at the nearest binding for
the requested name.

Invariants:

1. A Context is never mutated after construction; every operation returns a
   new child, so concurrent derivations from one parent are independent
2. All names are canonicalized before storage and lookup
3. Every baggage bind records its name in the tree's KeyCatalog
4. A value is merged only when a join function applies AND a prior value
   exists; otherwise the incoming value replaces any prior one

Recombination (join) folds one context's cataloged values into another using
the destination's join functions only. join(a, b) is therefore not guaranteed
to equal join(b, a): callers that need order independence must register the
same commutative join functions on both sides before the branches diverge.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Mapping

from openctx._keys import canonical_name
from openctx.catalog import KeyCatalog, get_default_catalog

logger = logging.getLogger(__name__)

JoinFn = Callable[[str, str], str]
"""Join function signature: ``join(existing, incoming) -> merged``."""


@dataclass(frozen=True, eq=False)
class Context:
    """
    One node of a baggage context tree.

    Attributes:
        parent: The context this one extends (None for a root).
        catalog: KeyCatalog shared by the whole tree.
        key: Canonical name of this node's baggage binding, if any.
        value: Value of this node's baggage binding.
        join_key: Canonical name of this node's join binding, if any.
        join_fn: Join function of this node's join binding.

    Contexts compare by identity. Use the module functions (with_baggage,
    baggage, keys, ...) rather than building nodes directly.
    """

    parent: Context | None = field(default=None, repr=False)
    catalog: KeyCatalog = field(default_factory=get_default_catalog, repr=False)
    key: str | None = None
    value: str = ""
    join_key: str | None = None
    join_fn: JoinFn | None = field(default=None, repr=False)

    def _with_value(self, key: str, value: str) -> Context:
        return Context(parent=self, catalog=self.catalog, key=key, value=value)

    def _with_join(self, key: str, join_fn: JoinFn) -> Context:
        return Context(parent=self, catalog=self.catalog, join_key=key, join_fn=join_fn)

    def _find_value(self, key: str) -> tuple[str, bool]:
        node: Context | None = self
        while node is not None:
            if node.key == key:
                return node.value, True
            node = node.parent
        return "", False

    def _find_join(self, key: str) -> tuple[JoinFn | None, bool]:
        node: Context | None = self
        while node is not None:
            if node.join_key == key:
                return node.join_fn, True
            node = node.parent
        return None, False


def background(catalog: KeyCatalog | None = None) -> Context:
    """
    Return a new empty root context.

    Args:
        catalog: Catalog the new tree reports names into. Defaults to the
            process-wide default catalog.
    """
    if catalog is None:
        catalog = get_default_catalog()
    return Context(catalog=catalog)


# ---------------------------------------------------------------------------
# Baggage chain
# ---------------------------------------------------------------------------


def with_baggage(ctx: Context, name: str, value: str) -> Context:
    """
    Bind a baggage value, joining it with any prior value.

    If a join function is registered for ``name`` on ``ctx`` (see with_join)
    and ``ctx`` already carries a value, the stored value is
    ``join_fn(prior, value)``. Otherwise ``value`` is stored as-is, replacing
    any prior value.

    Args:
        ctx: The context to extend.
        name: Property name (any letter case).
        value: Property value.

    Returns:
        A new context carrying the binding.
    """
    return _bind(ctx, canonical_name(name), value)


def with_baggage_join(ctx: Context, name: str, value: str, join_fn: JoinFn) -> Context:
    """
    Bind a baggage value, joining it with any prior value using ``join_fn``.

    ``join_fn`` applies to this call only. It is not registered on the
    returned context; use with_join for that.

    Example:
        ctx = with_baggage_join(ctx, "ttl", "100", join_min_int)

    Args:
        ctx: The context to extend.
        name: Property name (any letter case).
        value: Property value.
        join_fn: Called as ``join_fn(prior, value)`` when a prior value exists.

    Returns:
        A new context carrying the binding.
    """
    return _bind_join(ctx, canonical_name(name), value, join_fn)


def _bind(ctx: Context, key: str, value: str) -> Context:
    join_fn, found = ctx._find_join(key)
    if found:
        return _bind_join(ctx, key, value, join_fn)
    ctx.catalog.learn(key)
    return ctx._with_value(key, value)


def _bind_join(ctx: Context, key: str, value: str, join_fn: JoinFn) -> Context:
    prior, found = ctx._find_value(key)
    if found:
        value = join_fn(prior, value)
    ctx.catalog.learn(key)
    return ctx._with_value(key, value)


def baggage(ctx: Context, name: str) -> tuple[str, bool]:
    """
    Look up a baggage value.

    Returns:
        ``(value, True)`` for the nearest binding, or ``("", False)``.
    """
    return ctx._find_value(canonical_name(name))


def keys(ctx: Context) -> list[str]:
    """
    Return the sorted canonical names of the baggage carried by ``ctx``.

    Cost is proportional to the size of the catalog, not the depth of the
    context. Intended for baggage serializers.
    """
    return [key for key in sorted(ctx.catalog.snapshot()) if ctx._find_value(key)[1]]


def items(ctx: Context) -> dict[str, str]:
    """Return all baggage carried by ``ctx`` as a dict ordered by name."""
    result: dict[str, str] = {}
    for key in keys(ctx):
        result[key] = ctx._find_value(key)[0]
    return result


def with_items(ctx: Context, values: Mapping[str, str]) -> Context:
    """
    Bind every pair of ``values`` with with_baggage, in sorted name order.

    This is how a receiving transport rebuilds baggage decoded off the wire:
    registered join functions on ``ctx`` apply to each value.
    """
    for name in sorted(values):
        ctx = with_baggage(ctx, name, values[name])
    return ctx


# ---------------------------------------------------------------------------
# Join chain
# ---------------------------------------------------------------------------


def with_join(ctx: Context, name: str, join_fn: JoinFn) -> Context:
    """
    Register a join function for a baggage property.

    Every context derived from the result, including branches later
    recombined with join(), merges ``name`` with ``join_fn``. Typically called
    by an RPC library before issuing requests, so that properties with known
    semantics merge properly when response contexts come back.

    Args:
        ctx: The context to extend.
        name: Property name (any letter case).
        join_fn: Called as ``join_fn(existing, incoming)``.

    Returns:
        A new context carrying the registration.
    """
    return ctx._with_join(canonical_name(name), join_fn)


def lookup_join(ctx: Context, name: str) -> tuple[JoinFn | None, bool]:
    """Return ``(join_fn, True)`` for the nearest registration, or ``(None, False)``."""
    return ctx._find_join(canonical_name(name))


# ---------------------------------------------------------------------------
# Recombination
# ---------------------------------------------------------------------------


def join(dest: Context, src: Context) -> Context:
    """
    Fold the baggage of ``src`` into ``dest``.

    Every cataloged name that ``src`` binds is rebound on ``dest`` with
    with_baggage, so ``dest``'s join functions decide conflicts and ``src``
    wins where none is registered. Names only ``dest`` carries are kept.

    Args:
        dest: The context to fold into. Its join registrations are used.
        src: The context whose values are folded in.

    Returns:
        The folded context (``dest`` itself if ``src`` carries nothing).
    """
    names = dest.catalog.snapshot()
    if src.catalog is not dest.catalog:
        names = names | src.catalog.snapshot()

    folded = 0
    for key in sorted(names):
        value, found = src._find_value(key)
        if found:
            dest = _bind(dest, key, value)
            folded += 1

    logger.debug("Joined %d baggage values from %d known names", folded, len(names))
    return dest
