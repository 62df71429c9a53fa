"""Integration tests: services fanning out and recombining response contexts.

Emulates RPC between services "alice", "bob", "charlie", "danny" and
"elizabeth". Each service stamps its name into the receipts baggage. Charlie
calls alice, danny and elizabeth in parallel and joins the response contexts
in whatever order they arrive.
"""

from __future__ import annotations

import itertools
from concurrent.futures import ThreadPoolExecutor
from datetime import timedelta

import pytest

from openctx.context import Context, background, join, keys
from openctx.properties import receipts, ttl, with_receipt, with_standard_joins, with_ttl


def alice(ctx: Context) -> Context:
    """Alice stamps her receipt and calls bob twice serially."""
    ctx = with_receipt(ctx, "alice")
    ctx = bob(ctx)
    ctx = bob(ctx)
    return ctx


def bob(ctx: Context) -> Context:
    return with_receipt(ctx, "bob")


def danny(ctx: Context) -> Context:
    return with_receipt(ctx, "danny")


def elizabeth(ctx: Context) -> Context:
    ctx = with_ttl(ctx, timedelta(milliseconds=250))
    return with_receipt(ctx, "elizabeth")


EVERYONE = ["alice", "bob", "charlie", "danny", "elizabeth"]


class TestSerialCalls:
    def test_alice_calls_bob(self):
        ctx = with_ttl(background(), timedelta(seconds=1))
        ctx = alice(ctx)
        assert receipts(ctx) == ["alice", "bob"]
        assert keys(ctx) == ["receipts", "ttl"]


class TestCharlieCallsEveryone:
    """Charlie fans out to alice, danny and elizabeth."""

    @pytest.fixture
    def inbound(self):
        ctx = with_standard_joins(background())
        ctx = with_ttl(ctx, timedelta(seconds=1))
        ctx = with_receipt(ctx, "charlie")
        assert receipts(ctx) == ["charlie"]
        return ctx

    def test_joins_in_arrival_order(self, inbound):
        ctx_b = alice(inbound)
        assert receipts(ctx_b) == ["alice", "bob", "charlie"]
        ctx_d = danny(inbound)
        assert receipts(ctx_d) == ["charlie", "danny"]
        ctx_e = elizabeth(inbound)
        assert receipts(ctx_e) == ["charlie", "elizabeth"]

        ctx = join(inbound, ctx_d)
        assert receipts(ctx) == ["charlie", "danny"]
        ctx = join(ctx, ctx_e)
        assert receipts(ctx) == ["charlie", "danny", "elizabeth"]
        ctx = join(ctx, ctx_b)
        assert receipts(ctx) == EVERYONE

    @pytest.mark.parametrize("order", list(itertools.permutations(range(3))))
    def test_any_join_order(self, inbound, order):
        responses = [alice(inbound), danny(inbound), elizabeth(inbound)]
        ctx = inbound
        for index in order:
            ctx = join(ctx, responses[index])
        assert receipts(ctx) == EVERYONE
        assert ttl(ctx) == timedelta(milliseconds=250)
        assert keys(ctx) == ["receipts", "ttl"]

    def test_parallel_threads(self, inbound):
        """Responses derived concurrently on worker threads recombine fully."""
        with ThreadPoolExecutor(max_workers=3) as pool:
            futures = [pool.submit(service, inbound) for service in (alice, danny, elizabeth)]
            responses = [future.result() for future in futures]

        ctx = inbound
        for response in reversed(responses):
            ctx = join(ctx, response)
        assert receipts(ctx) == EVERYONE
        assert receipts(inbound) == ["charlie"]
