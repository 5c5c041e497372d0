"""Unit tests for ServiceContext wiring and shutdown."""

from __future__ import annotations

import asyncio

import pytest

from cottontrace.context import ServiceContext
from cottontrace.stores import LoadStatus


class TestServiceContext:
    def test_stores_start_empty(self, context):
        for store in (
            context.batches,
            context.compliance,
            context.isotopes,
            context.verification_queue,
            context.reports,
        ):
            assert store.state.status is LoadStatus.EMPTY

    def test_compliance_reads_batch_store(self, context):
        assert context.compliance.batches is context.batches

    def test_sync_uses_context_client(self, context):
        assert context.sync.client is context.fibretrace
        assert context.fibretrace.mock_mode is True

    @pytest.mark.asyncio
    async def test_seeded_isotopes_reproducible(self, test_config, now):
        first = ServiceContext.from_config(test_config, now=now)
        second = ServiceContext.from_config(test_config, now=now)
        assert await first.isotopes.ensure_loaded() == await second.isotopes.ensure_loaded()

    @pytest.mark.asyncio
    async def test_aclose_cancels_pending_loads(self, test_config, now):
        test_config.mock_data.latency_ms = 5000
        context = ServiceContext.from_config(test_config, now=now)
        load = asyncio.create_task(context.batches.load())
        await asyncio.sleep(0)
        assert context.batches.state.is_loading

        await context.aclose()

        assert (await load).status is LoadStatus.EMPTY
        assert context.fibretrace.client.is_closed
