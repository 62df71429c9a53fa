"""Shared fixtures for openctx tests."""

from __future__ import annotations

import pytest

from openctx.catalog import KeyCatalog, use_catalog


@pytest.fixture(autouse=True)
def catalog():
    """Give every test its own default catalog so names never leak between tests."""
    with use_catalog(KeyCatalog()) as fresh:
        yield fresh
