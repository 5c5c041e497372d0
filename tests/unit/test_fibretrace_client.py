"""Unit tests for the FibreTrace API client in mock and live modes."""

from __future__ import annotations

import httpx
import pytest

from cottontrace.config import FibreTraceConfig
from cottontrace.integration.fibretrace_client import (
    DEFAULT_ERROR_MESSAGE,
    NO_RESPONSE_MESSAGE,
    FibreTraceClient,
)


def live_client(handler) -> FibreTraceClient:
    config = FibreTraceConfig(
        base_url="https://fibretrace.test/v1",
        api_key="secret-key",
        mock_mode=False,
    )
    return FibreTraceClient(config, transport=httpx.MockTransport(handler))


class TestMockMode:
    @pytest.fixture
    def client(self):
        return FibreTraceClient(FibreTraceConfig(mock_latency_ms=0))

    @pytest.mark.asyncio
    async def test_get_batch_data(self, client):
        response = await client.get_batch_data("MODULE-ABC")

        assert response.success is True
        assert response.data["batchId"] == "MODULE-ABC"
        assert response.data["quality"]["grade"] == "A"

    @pytest.mark.asyncio
    async def test_get_isotope_data(self, client):
        response = await client.get_isotope_data("MODULE-ABC")

        assert response.data["id"] == "ISO-MODULE-ABC"
        assert response.data["verificationStatus"] == "verified"

    @pytest.mark.asyncio
    async def test_push_echoes_batch_id(self, client):
        response = await client.push_batch_data({"batchId": "MODULE-XYZ"})

        assert response.success is True
        assert response.data["batchId"] == "MODULE-XYZ"
        assert "successfully pushed" in response.data["message"]

    @pytest.mark.asyncio
    async def test_verify(self, client):
        response = await client.verify_batch("MODULE-1")
        assert response.data["verified"] is True
        assert response.data["confidence"] == 95

    @pytest.mark.asyncio
    async def test_get_all_batches(self, client):
        response = await client.get_all_batches(page=2, limit=5)

        assert [b["batchId"] for b in response.data["batches"]] == [
            "BATCH-001",
            "BATCH-002",
            "BATCH-003",
        ]
        assert response.data["pagination"] == {"total": 3, "page": 2, "limit": 5}

    @pytest.mark.asyncio
    async def test_no_network_in_mock_mode(self):
        def handler(request):
            raise AssertionError(f"unexpected request {request.url}")

        client = FibreTraceClient(
            FibreTraceConfig(mock_latency_ms=0), transport=httpx.MockTransport(handler)
        )
        assert (await client.get_batch_data("MODULE-1")).success is True
        await client.close()


class TestLiveMode:
    @pytest.mark.asyncio
    async def test_success_sends_bearer_token(self):
        seen = {}

        def handler(request):
            seen["auth"] = request.headers["Authorization"]
            seen["path"] = request.url.path
            return httpx.Response(200, json={"batchId": "MODULE-1"})

        async with live_client(handler) as client:
            response = await client.get_batch_data("MODULE-1")

        assert response.success is True
        assert response.status == 200
        assert response.data == {"batchId": "MODULE-1"}
        assert seen == {"auth": "Bearer secret-key", "path": "/v1/batches/MODULE-1"}

    @pytest.mark.asyncio
    async def test_server_error_carries_status_and_message(self):
        def handler(request):
            return httpx.Response(500, json={"message": "Upstream unavailable"})

        async with live_client(handler) as client:
            response = await client.push_batch_data({"batchId": "MODULE-1"})

        assert response.success is False
        assert response.status == 500
        assert response.message == "Upstream unavailable"

    @pytest.mark.asyncio
    async def test_error_without_message_uses_default(self):
        def handler(request):
            return httpx.Response(404, text="not found")

        async with live_client(handler) as client:
            response = await client.verify_batch("MODULE-1")

        assert response.success is False
        assert response.status == 404
        assert response.message == DEFAULT_ERROR_MESSAGE

    @pytest.mark.asyncio
    async def test_no_response(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        async with live_client(handler) as client:
            response = await client.get_isotope_data("MODULE-1")

        assert response.success is False
        assert response.status is None
        assert response.message == NO_RESPONSE_MESSAGE

    @pytest.mark.asyncio
    async def test_list_drops_unset_params(self):
        seen = {}

        def handler(request):
            seen["params"] = dict(request.url.params)
            return httpx.Response(200, json={"batches": []})

        async with live_client(handler) as client:
            await client.get_all_batches(page=1, region="Texas")

        assert seen["params"] == {"page": "1", "region": "Texas"}
