"""Direct login against a Jira server, bypassing the Chronos backend.

:class:`DirectSessionLoginClient` posts a form login to Jira's gadget login
endpoint (``/jira/rest/gadget/1.0/login``) and harvests the session cookies
from the raw ``Set-Cookie`` headers of the response.

Jira reports the login result in the ``X-Seraph-LoginReason`` header rather
than in the status code.  A login succeeds only when that header contains
``OK`` *and* at least one ``Set-Cookie`` header is present; anything else is
:class:`~chronos_auth.exceptions.InvalidCredentialsError`, whatever the HTTP
status.

Cookies are reduced to name and value.  Their own attributes (``Path``,
``HttpOnly``, ``Expires``) are discarded: the path is the caller's pathname,
``httpOnly`` follows the target protocol, and the expiry is the fixed
:data:`~chronos_auth.models.COOKIE_EXPIRES` sentinel.

Each call performs exactly one request with a bounded timeout and no retry.
Connection failures are classified by :mod:`chronos_auth.network` and raised
as :class:`~chronos_auth.exceptions.TransportError`.
"""

from __future__ import annotations

import asyncio
from typing import Optional
from urllib.parse import urlencode

import httpx

from chronos_auth.exceptions import InvalidCredentialsError, TransportError
from chronos_auth.models import DirectLoginRequest, SessionCookie
from chronos_auth.network import NetworkErrorCode, code_for_exception
from chronos_auth.output import debug

LOGIN_PATH = "/jira/rest/gadget/1.0/login"
LOGIN_REASON_HEADER = "X-Seraph-LoginReason"
LOGIN_OK_MARKER = "OK"
DEFAULT_TIMEOUT = 30.0


def build_login_form(username: str, password: str) -> bytes:
    """Return the form-encoded login body."""
    form = {
        "os_username": username,
        "os_password": password,
        "os_cookie": "true",
    }
    return urlencode(form).encode("utf-8")


def parse_set_cookie(entry: str, pathname: str, protocol: str) -> SessionCookie:
    """Turn one ``Set-Cookie`` header value into a :class:`SessionCookie`.

    The name is everything before the first ``=``; the value runs from there
    to the first ``;``.

    Example::

        >>> parse_set_cookie("JSESSIONID=abc123; Path=/", "/", "https").value
        'abc123'
    """
    name, _, rest = entry.partition("=")
    value = rest.split(";", 1)[0]
    return SessionCookie(
        name=name.strip(),
        value=value,
        path=pathname,
        http_only=(protocol == "http"),
    )


def login_succeeded(response: httpx.Response) -> bool:
    """Return True when *response* confirms the login."""
    marker = response.headers.get(LOGIN_REASON_HEADER)
    if marker is None or LOGIN_OK_MARKER not in marker:
        return False
    return bool(response.headers.get_list("set-cookie"))


class DirectSessionLoginClient:
    """Log in to Jira directly and return its session cookies.

    Args:
        timeout: Upper bound in seconds for the whole exchange.
        verify_ssl: Verify TLS certificates of the Jira server.
        http_client: Optional client to reuse instead of opening one per
            call.  It is not closed by this class.
        transport: Optional httpx transport for the per-call client, mainly
            for tests.
    """

    def __init__(
        self,
        timeout: float = DEFAULT_TIMEOUT,
        verify_ssl: bool = True,
        http_client: Optional[httpx.AsyncClient] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._timeout = timeout
        self._verify_ssl = verify_ssl
        self._http_client = http_client
        self._transport = transport

    async def login_direct(self, request: DirectLoginRequest) -> list[SessionCookie]:
        """Authenticate against ``{base_url}/jira/rest/gadget/1.0/login``.

        Args:
            request: Jira base URL, credentials, and the pathname and
                protocol used to shape the returned cookies.

        Returns:
            The session cookies, in the order Jira sent them.

        Raises:
            InvalidCredentialsError: If Jira did not confirm the login.
            TransportError: On connection failures or timeout.
        """
        url = f"{request.base_url.rstrip('/')}{LOGIN_PATH}"
        body = build_login_form(request.username, request.password)
        headers = {
            "Content-Type": "application/x-www-form-urlencoded",
            "Content-Length": str(len(body)),
        }

        debug(f"POST {url}")
        response = await self._send(url, body, headers)
        debug(
            f"HTTP {response.status_code} from {LOGIN_PATH}, "
            f"{LOGIN_REASON_HEADER}: {response.headers.get(LOGIN_REASON_HEADER)}"
        )

        if not login_succeeded(response):
            raise InvalidCredentialsError()

        return [
            parse_set_cookie(entry, request.pathname, request.protocol)
            for entry in response.headers.get_list("set-cookie")
        ]

    async def _send(
        self,
        url: str,
        body: bytes,
        headers: dict[str, str],
    ) -> httpx.Response:
        # httpx timeouts apply per connect/read/write; wait_for bounds the total.
        try:
            return await asyncio.wait_for(
                self._post(url, body, headers), timeout=self._timeout
            )
        except asyncio.TimeoutError as exc:
            debug(f"POST {url} exceeded {self._timeout}s")
            raise TransportError(NetworkErrorCode.CONNECTION_TIMED_OUT) from exc
        except httpx.TransportError as exc:
            code = code_for_exception(exc)
            debug(f"POST {url} failed: {type(exc).__name__} -> {code.value}")
            raise TransportError(code) from exc

    async def _post(
        self,
        url: str,
        body: bytes,
        headers: dict[str, str],
    ) -> httpx.Response:
        if self._http_client is not None:
            return await self._http_client.post(
                url,
                content=body,
                headers=headers,
                timeout=self._timeout,
                follow_redirects=False,
            )
        async with httpx.AsyncClient(
            timeout=self._timeout,
            verify=self._verify_ssl,
            transport=self._transport,
            follow_redirects=False,
        ) as client:
            return await client.post(url, content=body, headers=headers)
