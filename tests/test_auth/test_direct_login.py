"""Tests for chronos_auth.auth.direct -- form login against Jira."""

from __future__ import annotations

import asyncio
import socket
import time
from urllib.parse import parse_qs

import httpx
import pytest

from chronos_auth.auth import DirectSessionLoginClient, parse_set_cookie
from chronos_auth.auth.direct import build_login_form, login_succeeded
from chronos_auth.exceptions import InvalidCredentialsError, TransportError
from chronos_auth.models import COOKIE_EXPIRES, DirectLoginRequest, SessionCookie

JIRA_URL = "https://team.example.com"


def _login_response(
    reason: str | None = "OK",
    cookies: tuple[str, ...] = ("JSESSIONID=abc123; Path=/; HttpOnly",),
    status: int = 200,
) -> httpx.Response:
    headers: list[tuple[str, str]] = []
    if reason is not None:
        headers.append(("X-Seraph-LoginReason", reason))
    headers.extend(("Set-Cookie", cookie) for cookie in cookies)
    return httpx.Response(status, headers=headers)


def _request(**overrides: str) -> DirectLoginRequest:
    fields = {
        "base_url": JIRA_URL,
        "username": "alice",
        "password": "s3cret",
        "pathname": "/",
        "protocol": "https",
    }
    fields.update(overrides)
    return DirectLoginRequest(**fields)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


class TestParseSetCookie:
    def test_name_and_value(self) -> None:
        cookie = parse_set_cookie("JSESSIONID=abc123; Path=/; HttpOnly", "/", "https")
        assert cookie == SessionCookie(
            name="JSESSIONID",
            value="abc123",
            path="/",
            http_only=False,
            expires=COOKIE_EXPIRES,
        )

    def test_attributes_ignored(self) -> None:
        cookie = parse_set_cookie(
            "seraph.rememberme.cookie=99%3Aabc; Path=/jira; Expires=Thu, 01 Jan 2026 00:00:00 GMT",
            "/custom",
            "https",
        )
        assert cookie.value == "99%3Aabc"
        assert cookie.path == "/custom"
        assert cookie.expires == "Fri, 31 Dec 9999 23:59:59 GMT"

    def test_value_may_contain_equals(self) -> None:
        cookie = parse_set_cookie("token=a=b=c; Path=/", "/", "https")
        assert cookie.name == "token"
        assert cookie.value == "a=b=c"

    def test_http_only_follows_protocol(self) -> None:
        assert parse_set_cookie("a=1", "/", "http").http_only is True
        assert parse_set_cookie("a=1; HttpOnly", "/", "https").http_only is False

    def test_entry_without_equals(self) -> None:
        cookie = parse_set_cookie("flag", "/", "https")
        assert cookie.name == "flag"
        assert cookie.value == ""

    def test_value_without_attributes(self) -> None:
        assert parse_set_cookie("a=1", "/", "https").value == "1"


class TestLoginForm:
    def test_fields(self) -> None:
        body = build_login_form("alice@example.com", "p&ss=word")
        assert parse_qs(body.decode("ascii")) == {
            "os_username": ["alice@example.com"],
            "os_password": ["p&ss=word"],
            "os_cookie": ["true"],
        }


class TestLoginSucceeded:
    def test_marker_and_cookie(self) -> None:
        assert login_succeeded(_login_response("OK"))

    def test_marker_is_substring_match(self) -> None:
        assert login_succeeded(_login_response("Login OK"))

    def test_denied(self) -> None:
        assert not login_succeeded(_login_response("AUTHENTICATED_FAILED"))

    def test_marker_missing(self) -> None:
        assert not login_succeeded(_login_response(None))

    def test_no_cookies(self) -> None:
        assert not login_succeeded(_login_response("OK", cookies=()))


# ---------------------------------------------------------------------------
# Client
# ---------------------------------------------------------------------------


class TestLoginDirect:
    @pytest.mark.asyncio
    async def test_returns_cookies_in_order(self, make_transport) -> None:
        transport = make_transport(
            lambda request: _login_response(
                "Login OK",
                cookies=(
                    "JSESSIONID=abc123; Path=/; HttpOnly",
                    "atlassian.xsrf.token=XYZ|lin; Path=/",
                ),
            )
        )
        client = DirectSessionLoginClient(transport=transport)
        cookies = await client.login_direct(_request())

        assert [(c.name, c.value) for c in cookies] == [
            ("JSESSIONID", "abc123"),
            ("atlassian.xsrf.token", "XYZ|lin"),
        ]
        assert all(c.path == "/" and c.http_only is False for c in cookies)
        assert all(c.expires == COOKIE_EXPIRES for c in cookies)

    @pytest.mark.asyncio
    async def test_request_shape(self, make_transport) -> None:
        transport = make_transport(lambda request: _login_response())
        await DirectSessionLoginClient(transport=transport).login_direct(_request())

        request = transport.last
        assert request.method == "POST"
        assert str(request.url) == "https://team.example.com/jira/rest/gadget/1.0/login"
        assert request.headers["Content-Type"] == "application/x-www-form-urlencoded"
        assert request.headers["Content-Length"] == str(len(request.content))
        assert parse_qs(request.content.decode("ascii")) == {
            "os_username": ["alice"],
            "os_password": ["s3cret"],
            "os_cookie": ["true"],
        }

    @pytest.mark.asyncio
    async def test_trailing_slash_in_base_url(self, make_transport) -> None:
        transport = make_transport(lambda request: _login_response())
        await DirectSessionLoginClient(transport=transport).login_direct(
            _request(base_url=JIRA_URL + "/")
        )
        assert transport.last.url.path == "/jira/rest/gadget/1.0/login"

    @pytest.mark.asyncio
    async def test_http_protocol_and_pathname(self, make_transport) -> None:
        transport = make_transport(lambda request: _login_response())
        cookies = await DirectSessionLoginClient(transport=transport).login_direct(
            _request(base_url="http://jira.local:8080", protocol="http", pathname="/jira")
        )
        assert cookies[0].http_only is True
        assert cookies[0].path == "/jira"

    @pytest.mark.asyncio
    async def test_denied_with_status_200(self, make_transport) -> None:
        transport = make_transport(lambda request: _login_response("AUTHENTICATION_DENIED"))
        with pytest.raises(InvalidCredentialsError) as exc_info:
            await DirectSessionLoginClient(transport=transport).login_direct(_request())
        assert str(exc_info.value) == "Incorrect email address and / or password."

    @pytest.mark.asyncio
    async def test_marker_without_cookies(self, make_transport) -> None:
        transport = make_transport(lambda request: _login_response("OK", cookies=()))
        with pytest.raises(InvalidCredentialsError):
            await DirectSessionLoginClient(transport=transport).login_direct(_request())

    @pytest.mark.asyncio
    async def test_cookies_without_marker(self, make_transport) -> None:
        transport = make_transport(lambda request: _login_response(None))
        with pytest.raises(InvalidCredentialsError):
            await DirectSessionLoginClient(transport=transport).login_direct(_request())

    @pytest.mark.asyncio
    async def test_status_does_not_decide(self, make_transport) -> None:
        transport = make_transport(lambda request: _login_response("OK", status=401))
        cookies = await DirectSessionLoginClient(transport=transport).login_direct(_request())
        assert cookies[0].name == "JSESSIONID"

    @pytest.mark.asyncio
    async def test_single_request_no_redirect(self, make_transport) -> None:
        transport = make_transport(
            lambda request: httpx.Response(302, headers={"Location": "https://sso.example.com/"})
        )
        with pytest.raises(InvalidCredentialsError):
            await DirectSessionLoginClient(transport=transport).login_direct(_request())
        assert len(transport.requests) == 1

    @pytest.mark.asyncio
    async def test_dns_failure_is_classified(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            try:
                raise socket.gaierror(-2, "Name or service not known")
            except socket.gaierror as exc:
                raise httpx.ConnectError("dns", request=request) from exc

        client = DirectSessionLoginClient(transport=httpx.MockTransport(handler))
        with pytest.raises(TransportError) as exc_info:
            await client.login_direct(_request())
        assert exc_info.value.code == "net::ERR_NAME_NOT_RESOLVED"
        assert exc_info.value.message == "Page unavailable"

    @pytest.mark.asyncio
    async def test_timeout_is_classified(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timed out", request=request)

        client = DirectSessionLoginClient(timeout=0.5, transport=httpx.MockTransport(handler))
        with pytest.raises(TransportError) as exc_info:
            await client.login_direct(_request())
        assert exc_info.value.message == "Connection timed out"

    @pytest.mark.asyncio
    async def test_timeout_bounds_slow_response(self) -> None:
        async def handler(request: httpx.Request) -> httpx.Response:
            await asyncio.sleep(5)
            return _login_response()

        client = DirectSessionLoginClient(timeout=0.2, transport=httpx.MockTransport(handler))
        started = time.monotonic()
        with pytest.raises(TransportError) as exc_info:
            await client.login_direct(_request())
        assert time.monotonic() - started < 2.0
        assert exc_info.value.code == "net::ERR_CONNECTION_TIMED_OUT"


# ---------------------------------------------------------------------------
# Injected client
# ---------------------------------------------------------------------------


class TestInjectedClient:
    @pytest.mark.asyncio
    async def test_client_is_reused(self, make_transport) -> None:
        transport = make_transport(lambda request: _login_response())
        async with httpx.AsyncClient(transport=transport) as http_client:
            client = DirectSessionLoginClient(http_client=http_client)
            await client.login_direct(_request())
            await client.login_direct(_request())
            assert not http_client.is_closed
        assert len(transport.requests) == 2

    @pytest.mark.asyncio
    async def test_redirects_not_followed(self, make_transport) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.host == "sso.example.com":
                return _login_response("OK", cookies=("SSO=stolen; Path=/",))
            return httpx.Response(302, headers={"Location": "https://sso.example.com/"})

        transport = make_transport(handler)
        async with httpx.AsyncClient(transport=transport, follow_redirects=True) as http_client:
            client = DirectSessionLoginClient(http_client=http_client)
            with pytest.raises(InvalidCredentialsError):
                await client.login_direct(_request())
        assert [str(r.url) for r in transport.requests] == [
            "https://team.example.com/jira/rest/gadget/1.0/login"
        ]


# ---------------------------------------------------------------------------
# Slow server
# ---------------------------------------------------------------------------


class TestSlowServer:
    @pytest.fixture(autouse=True)
    def _no_proxy(self, monkeypatch: pytest.MonkeyPatch) -> None:
        for var in ("HTTP_PROXY", "http_proxy", "ALL_PROXY", "all_proxy"):
            monkeypatch.delenv(var, raising=False)

    @pytest.mark.asyncio
    async def test_trickled_headers_hit_total_timeout(self) -> None:
        handlers: list[asyncio.Task] = []

        async def trickle(reader: asyncio.StreamReader, writer: asyncio.StreamWriter) -> None:
            handlers.append(asyncio.current_task())
            await reader.readuntil(b"\r\n\r\n")
            try:
                writer.write(b"HTTP/1.1 200 OK\r\n")
                for i in range(100):
                    await writer.drain()
                    await asyncio.sleep(0.1)
                    writer.write(f"X-Filler-{i}: x\r\n".encode())
            except ConnectionError:
                pass
            finally:
                writer.close()

        server = await asyncio.start_server(trickle, "127.0.0.1", 0)
        port = server.sockets[0].getsockname()[1]
        client = DirectSessionLoginClient(timeout=0.5)
        started = time.monotonic()
        try:
            with pytest.raises(TransportError) as exc_info:
                await client.login_direct(
                    _request(base_url=f"http://127.0.0.1:{port}", protocol="http")
                )
            elapsed = time.monotonic() - started
        finally:
            for task in handlers:
                task.cancel()
            server.close()
            await server.wait_closed()

        assert elapsed < 2.0
        assert exc_info.value.code == "net::ERR_CONNECTION_TIMED_OUT"
        assert exc_info.value.message == "Connection timed out"
