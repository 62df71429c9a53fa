"""
Ambient current context.

Passing a Context explicitly through every call is always supported. For code
that cannot thread an extra argument through, the active context is also kept
in a ``contextvars.ContextVar``, so it follows asyncio tasks and threads
started with ``contextvars.copy_context().run``.

Example:
    with activate(with_receipt(background(), "frontend")):
        update(with_baggage, "trace-id", "abc123")
        handle_request()  # sees both values through current()
"""

from __future__ import annotations

import contextvars
from contextlib import contextmanager
from typing import Any, Callable, Iterator

from openctx.context import Context, background

_current_context: contextvars.ContextVar[Context | None] = contextvars.ContextVar(
    "openctx_current", default=None
)


def current() -> Context:
    """Return the active context, or a fresh root if none is active."""
    ctx = _current_context.get()
    if ctx is None:
        return background()
    return ctx


@contextmanager
def activate(ctx: Context) -> Iterator[Context]:
    """
    Make ``ctx`` the current context for the duration of the block.

    The previously active context is restored on exit, including when the
    block raises. Calls to update() inside the block are undone as well.
    """
    token = _current_context.set(ctx)
    try:
        yield ctx
    finally:
        _current_context.reset(token)


def update(derive: Callable[..., Context], *args: Any) -> Context:
    """
    Derive a new context from current() and make it current.

    Args:
        derive: Any operation taking a context first, e.g. with_baggage.
        *args: Remaining arguments for ``derive``.

    Returns:
        The new current context.
    """
    ctx = derive(current(), *args)
    _current_context.set(ctx)
    return ctx
