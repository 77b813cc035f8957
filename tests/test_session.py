"""Tests for chronos_auth.session."""

from __future__ import annotations

import pytest

from chronos_auth.exceptions import InvalidUsageError
from chronos_auth.models import SessionContext, SessionCookie
from chronos_auth.session import build_session_context, hand_off

_COOKIES = [
    SessionCookie(name="JSESSIONID", value="abc123", path="/", http_only=False),
    SessionCookie(name="atlassian.xsrf.token", value="XYZ", path="/", http_only=False),
]


class _SyncConfigurator:
    def __init__(self) -> None:
        self.contexts: list[SessionContext] = []

    def configure(self, context: SessionContext) -> None:
        self.contexts.append(context)


class _AsyncConfigurator:
    def __init__(self) -> None:
        self.contexts: list[SessionContext] = []

    async def configure(self, context: SessionContext) -> str:
        self.contexts.append(context)
        return "configured"


class TestBuildSessionContext:
    def test_splits_url(self) -> None:
        context = build_session_context("https://team.example.com:8443/jira", _COOKIES)
        assert context.protocol == "https"
        assert context.hostname == "team.example.com"
        assert context.port == "8443"
        assert context.pathname == "/jira"
        assert list(context.cookies) == _COOKIES

    def test_default_port_and_path(self) -> None:
        context = build_session_context("http://jira.local", _COOKIES)
        assert context.protocol == "http"
        assert context.port == ""
        assert context.pathname == "/"

    def test_explicit_pathname_wins(self) -> None:
        context = build_session_context("https://team.example.com/jira", _COOKIES, "/")
        assert context.pathname == "/"

    @pytest.mark.parametrize("url", ["team.example.com", "", "https://"])
    def test_invalid_url(self, url: str) -> None:
        with pytest.raises(InvalidUsageError):
            build_session_context(url, _COOKIES)


class TestHandOff:
    @pytest.mark.asyncio
    async def test_sync_configurator(self) -> None:
        configurator = _SyncConfigurator()
        context = build_session_context("https://team.example.com", _COOKIES)
        await hand_off(configurator, context)
        assert configurator.contexts == [context]

    @pytest.mark.asyncio
    async def test_async_configurator(self) -> None:
        configurator = _AsyncConfigurator()
        context = build_session_context("https://team.example.com", _COOKIES)
        assert await hand_off(configurator, context) == "configured"
        assert configurator.contexts == [context]
