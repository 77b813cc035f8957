"""Tests for chronos_auth.auth.automatic."""

from __future__ import annotations

from typing import Mapping

import httpx
import pytest

from chronos_auth.auth import AutomaticCredentialFetcher, static_headers
from chronos_auth.broker import BrokerClient
from chronos_auth.exceptions import AutomaticLoginFailedError, TransportError

API_URL = "https://chronos.example.com"


class TestFetchStoredCredentials:
    @pytest.mark.asyncio
    async def test_sends_provider_headers(self, make_transport) -> None:
        calls: list[int] = []

        async def provider() -> Mapping[str, str]:
            calls.append(1)
            return {"x-device-id": "laptop-7", "x-user-token": "abc"}

        transport = make_transport(lambda request: httpx.Response(200, json={"id": 3}))
        async with BrokerClient(API_URL, transport=transport) as broker:
            record = await AutomaticCredentialFetcher(broker, provider).fetch_stored_credentials()

        assert record == {"id": 3}
        assert calls == [1]
        request = transport.last
        assert request.method == "GET"
        assert request.url.path == "/desktop-tracker/authenticate"
        assert request.headers["x-device-id"] == "laptop-7"
        assert request.headers["x-user-token"] == "abc"
        assert request.content == b""

    @pytest.mark.asyncio
    async def test_default_provider(self, make_transport) -> None:
        transport = make_transport(lambda request: httpx.Response(200, json=[]))
        async with BrokerClient(API_URL, transport=transport) as broker:
            assert await AutomaticCredentialFetcher(broker).fetch_stored_credentials() == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status", [401, 404, 500])
    async def test_failing_status(self, make_transport, status: int) -> None:
        transport = make_transport(lambda request: httpx.Response(status, json={}))
        async with BrokerClient(API_URL, transport=transport) as broker:
            with pytest.raises(AutomaticLoginFailedError) as exc_info:
                await AutomaticCredentialFetcher(broker).fetch_stored_credentials()
        assert str(exc_info.value) == (
            "Automatic login failed, please enter your credentials again"
        )

    @pytest.mark.asyncio
    async def test_transport_failure(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ProxyError("proxy refused", request=request)

        async with BrokerClient(API_URL, transport=httpx.MockTransport(handler)) as broker:
            with pytest.raises(TransportError) as exc_info:
                await AutomaticCredentialFetcher(broker).fetch_stored_credentials()
        assert exc_info.value.message == "Proxy connection failed"


class TestStaticHeaders:
    @pytest.mark.asyncio
    async def test_returns_copy(self) -> None:
        source = {"x-device-id": "a"}
        provider = static_headers(source)
        source["x-device-id"] = "b"
        headers = await provider()
        assert headers == {"x-device-id": "a"}
