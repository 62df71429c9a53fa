"""
openctx: distributed context baggage with per-property join functions.

A Context carries small named string values ("baggage") through a call graph.
Contexts are immutable: binding a value derives a child. When parallel
branches of a call graph come back together, join() recombines them, merging
each property with the join function registered for it (for example, taking
the minimum of two TTLs or the union of two receipt sets) and letting the
incoming value win where none is registered.

Example:
    import openctx
    from openctx.joins import join_union

    ctx = openctx.background()
    ctx = openctx.with_join(ctx, "receipts", join_union)
    ctx = openctx.with_baggage(ctx, "Receipts", "charlie")

    left = openctx.with_baggage(ctx, "receipts", "danny")
    right = openctx.with_baggage(ctx, "receipts", "elizabeth")

    ctx = openctx.join(openctx.join(ctx, left), right)
    openctx.baggage(ctx, "receipts")  # ("charlie, danny, elizabeth", True)
    openctx.keys(ctx)                 # ["receipts"]
"""

__version__ = "0.1.0"

from openctx._keys import canonical_name
from openctx.catalog import (
    KeyCatalog,
    get_default_catalog,
    set_default_catalog,
    use_catalog,
)
from openctx.config import CatalogSettings, OpenctxConfig, load_config
from openctx.context import (
    Context,
    JoinFn,
    background,
    baggage,
    items,
    join,
    keys,
    lookup_join,
    with_baggage,
    with_baggage_join,
    with_items,
    with_join,
)
from openctx.scope import activate, current, update

__all__ = [
    "__version__",
    # Context
    "Context",
    "JoinFn",
    "background",
    # Baggage
    "with_baggage",
    "with_baggage_join",
    "baggage",
    "keys",
    "items",
    "with_items",
    # Joins
    "with_join",
    "lookup_join",
    "join",
    # Keys / catalog
    "canonical_name",
    "KeyCatalog",
    "get_default_catalog",
    "set_default_catalog",
    "use_catalog",
    # Scope
    "current",
    "activate",
    "update",
    # Config
    "OpenctxConfig",
    "CatalogSettings",
    "load_config",
]
