"""Async HTTP client for the Chronos backend.

This module provides :class:`BrokerClient`, which wraps
:class:`httpx.AsyncClient` and layers on:

- **Base URL and request defaults** taken from
  :class:`~chronos_auth.models.GlobalConfig`.
- **Transport error classification** -- connection-level failures are
  mapped through :func:`~chronos_auth.network.code_for_exception` and
  re-raised as :class:`~chronos_auth.exceptions.TransportError`.
- **Debug tracing** of every request and response status via
  :func:`chronos_auth.output.debug`.

Status handling is deliberately not done here.  Each operation decides
which domain error a failing status means and passes it to
:func:`expect_json`, so every backend call follows the same rule: a status
above :data:`FAILURE_STATUS_THRESHOLD` raises, anything else is decoded as
JSON and returned as-is.

There is no retry; callers own retry policy.
"""

from __future__ import annotations

from typing import Any, Mapping, Optional

import httpx

from chronos_auth.exceptions import ChronosAuthError, ConfigError, TransportError, UnknownError
from chronos_auth.models import GlobalConfig
from chronos_auth.network import code_for_exception
from chronos_auth.output import debug

FAILURE_STATUS_THRESHOLD = 400
"""Statuses strictly above this value are failures; 400 itself is not."""


class BrokerClient:
    """Async HTTP client for Chronos backend calls.

    Must be used as an async context manager so that the underlying
    connection pool is opened and closed.

    Args:
        api_url: Base URL of the Chronos backend.
        timeout: Request timeout in seconds.
        verify_ssl: Verify TLS certificates.
        transport: Optional httpx transport, mainly for tests
            (:class:`httpx.MockTransport`).

    Example::

        async with BrokerClient("https://chronos.example.com") as broker:
            response = await broker.post("/desktop-tracker/authenticate", json_body=payload)
    """

    def __init__(
        self,
        api_url: str,
        timeout: float = 30.0,
        verify_ssl: bool = True,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._api_url = api_url.rstrip("/")
        self._timeout = timeout
        self._verify_ssl = verify_ssl
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    @classmethod
    def from_config(
        cls,
        config: GlobalConfig,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> BrokerClient:
        """Build a client from the resolved configuration."""
        return cls(
            config.api_url,
            timeout=config.request.timeout,
            verify_ssl=config.request.verify_ssl,
            transport=transport,
        )

    @property
    def api_url(self) -> str:
        return self._api_url

    # ------------------------------------------------------------------ #
    # Async context manager
    # ------------------------------------------------------------------ #

    async def __aenter__(self) -> BrokerClient:
        if not self._api_url:
            raise ConfigError(
                "No Chronos backend URL configured. Set CHRONOS_API_URL or "
                "run 'chronos-auth config set api_url <url>'."
            )
        self._client = httpx.AsyncClient(
            base_url=self._api_url,
            timeout=self._timeout,
            verify=self._verify_ssl,
            transport=self._transport,
            follow_redirects=True,
        )
        return self

    async def __aexit__(self, *args: object) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None

    # ------------------------------------------------------------------ #
    # Requests
    # ------------------------------------------------------------------ #

    async def request(
        self,
        method: str,
        path: str,
        params: Optional[Mapping[str, str]] = None,
        headers: Optional[Mapping[str, str]] = None,
        json_body: Optional[Any] = None,
    ) -> httpx.Response:
        """Send one request to the backend.

        Args:
            method: HTTP method.
            path: Path appended to the backend base URL.
            params: Query parameters, percent-encoded by httpx.
            headers: Extra request headers.
            json_body: JSON-serialisable body (sets Content-Type automatically).

        Returns:
            The :class:`httpx.Response`, whatever its status.

        Raises:
            TransportError: On connection-level failures and timeouts.
        """
        assert self._client is not None, "Client not initialised -- use as async context manager"

        kwargs: dict[str, Any] = {
            "method": method,
            "url": path,
            "headers": dict(headers or {}),
        }
        if params is not None:
            kwargs["params"] = dict(params)
        if json_body is not None:
            kwargs["json"] = json_body

        debug(f"{method} {self._api_url}{path}")
        try:
            response = await self._client.request(**kwargs)
        except httpx.TransportError as exc:
            code = code_for_exception(exc)
            debug(f"{method} {path} failed: {type(exc).__name__} -> {code.value}")
            raise TransportError(code) from exc

        debug(f"HTTP {response.status_code} from {path}")
        return response

    async def get(self, path: str, **kwargs: Any) -> httpx.Response:
        return await self.request("GET", path, **kwargs)

    async def post(self, path: str, **kwargs: Any) -> httpx.Response:
        return await self.request("POST", path, **kwargs)


def is_failure(response: httpx.Response) -> bool:
    """Return True when *response* carries a failing status."""
    return response.status_code > FAILURE_STATUS_THRESHOLD


def decode_json(response: httpx.Response) -> Any:
    """Decode the response body as JSON.

    Raises:
        UnknownError: If the body is not valid JSON.  The body itself is not
            included in the message.
    """
    try:
        return response.json()
    except ValueError as exc:
        raise UnknownError(
            f"Unexpected response from the Chronos backend (HTTP {response.status_code})",
            status_code=response.status_code,
        ) from exc


def expect_json(response: httpx.Response, failure: ChronosAuthError) -> Any:
    """Apply the backend status policy and return the decoded body.

    Args:
        response: The backend response.
        failure: The domain error to raise when the status is a failure.

    Returns:
        The JSON body, uninterpreted.

    Raises:
        ChronosAuthError: *failure*, when the status exceeds
            :data:`FAILURE_STATUS_THRESHOLD`.
        UnknownError: If a non-failing response is not valid JSON.
    """
    if is_failure(response):
        raise failure
    return decode_json(response)
