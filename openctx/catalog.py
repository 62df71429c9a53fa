"""
KeyCatalog: append-only set of every baggage name bound in a call graph.

A context node can answer "what is bound for this name?" but has no way to
enumerate what it carries. The catalog closes that gap: every bind records its
canonical name here, and enumeration tests each cataloged name against the
context.

Semantics:
- Inserts are idempotent and thread-safe
- Nothing is ever removed, except by an explicit reset()
- Readers iterate an immutable snapshot, never the live set
- Contexts sharing a catalog see each other's names (not each other's values)

One default catalog serves the whole process. Tests and isolated call graphs
can inject their own via background(catalog=...) or use_catalog().
"""

from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from typing import TYPE_CHECKING, Iterator

if TYPE_CHECKING:
    from openctx.config import CatalogSettings

logger = logging.getLogger(__name__)

DEFAULT_WARN_SIZE = 64


class KeyCatalog:
    """
    Thread-safe, append-only set of canonical property names.

    Baggage names are expected to converge on a small set across a process,
    so the catalog logs a warning once if it grows past ``warn_size``.
    """

    def __init__(self, warn_size: int = DEFAULT_WARN_SIZE) -> None:
        """
        Initialize an empty catalog.

        Args:
            warn_size: Size above which a one-time warning is logged.
                Use 0 to disable the warning.
        """
        self._names: frozenset[str] = frozenset()
        self._lock = threading.Lock()
        self._warn_size = warn_size
        self._warned = False

    @classmethod
    def from_settings(cls, settings: CatalogSettings) -> KeyCatalog:
        """Create a catalog from the ``[catalog]`` config section."""
        return cls(warn_size=settings.warn_size)

    def learn(self, name: str) -> bool:
        """
        Record a canonical name.

        Args:
            name: An already-canonical property name.

        Returns:
            True if the name was new to this catalog.
        """
        if name in self._names:
            return False

        with self._lock:
            if name in self._names:
                return False
            self._names = self._names | {name}
            size = len(self._names)
            warn = bool(self._warn_size) and size > self._warn_size and not self._warned
            if warn:
                self._warned = True

        logger.debug("Learned baggage key %r (catalog size %d)", name, size)
        if warn:
            logger.warning(
                "Baggage key catalog has grown to %d names (warn_size=%d); "
                "names are never forgotten, so enumeration cost grows with it",
                size,
                self._warn_size,
            )
        return True

    def snapshot(self) -> frozenset[str]:
        """Return an immutable view of the names known right now."""
        return self._names

    def reset(self) -> None:
        """
        Forget every name.

        Intended for tests and for long-lived processes that rebuild their
        call graphs from scratch. Contexts created before the reset keep their
        values but no longer enumerate them until the names are bound again.
        """
        with self._lock:
            count = len(self._names)
            self._names = frozenset()
            self._warned = False
        logger.debug("Reset baggage key catalog (%d names dropped)", count)

    @property
    def warn_size(self) -> int:
        """Size above which the growth warning fires (0 = never)."""
        return self._warn_size

    def __contains__(self, name: object) -> bool:
        return name in self._names

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self._names))

    def __len__(self) -> int:
        return len(self._names)

    def __repr__(self) -> str:
        return f"KeyCatalog(size={len(self._names)}, warn_size={self._warn_size})"


# ---------------------------------------------------------------------------
# Process-wide default
# ---------------------------------------------------------------------------

_default_lock = threading.Lock()
_default_catalog = KeyCatalog()


def get_default_catalog() -> KeyCatalog:
    """Return the catalog used by background() when none is given."""
    return _default_catalog


def set_default_catalog(catalog: KeyCatalog) -> KeyCatalog:
    """
    Replace the process-wide default catalog.

    Only contexts rooted after the call are affected; existing trees keep the
    catalog they were created with.

    Args:
        catalog: The new default catalog.

    Returns:
        The previous default catalog.
    """
    global _default_catalog
    with _default_lock:
        previous = _default_catalog
        _default_catalog = catalog
    return previous


@contextmanager
def use_catalog(catalog: KeyCatalog | None = None) -> Iterator[KeyCatalog]:
    """
    Temporarily install a default catalog.

    Example:
        with use_catalog() as catalog:
            ctx = with_baggage(background(), "ttl", "100")
            assert "ttl" in catalog

    Args:
        catalog: Catalog to install. A fresh one is created if omitted.

    Yields:
        The installed catalog.
    """
    installed = catalog if catalog is not None else KeyCatalog()
    previous = set_default_catalog(installed)
    try:
        yield installed
    finally:
        set_default_catalog(previous)
