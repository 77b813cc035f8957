"""Automatic login with credentials the Chronos backend already holds.

:class:`AutomaticCredentialFetcher` asks ``GET /desktop-tracker/authenticate``
whether credentials were stored during an earlier login.  The request
headers come from a :data:`HeaderProvider`, an async callable supplied by
the caller that identifies the device or user to the backend; their
content is opaque here.

A failing status raises
:class:`~chronos_auth.exceptions.AutomaticLoginFailedError`, whose wording
tells the user to enter credentials again rather than to retry.
"""

from __future__ import annotations

from typing import Any, Awaitable, Callable, Mapping

from chronos_auth.auth.base import AUTHENTICATE_PATH, BrokerStrategy
from chronos_auth.broker import BrokerClient, expect_json
from chronos_auth.exceptions import AutomaticLoginFailedError

HeaderProvider = Callable[[], Awaitable[Mapping[str, str]]]
"""Async callable returning the headers for the automatic-login request."""


def static_headers(headers: Mapping[str, str]) -> HeaderProvider:
    """Wrap a fixed header mapping as a :data:`HeaderProvider`."""
    frozen = dict(headers)

    async def provider() -> Mapping[str, str]:
        return dict(frozen)

    return provider


class AutomaticCredentialFetcher(BrokerStrategy):
    """Fetch previously stored credentials without user input.

    Args:
        broker: An opened broker client.
        header_provider: Supplies the identifying headers; awaited once per
            fetch.  Defaults to no extra headers.
    """

    def __init__(
        self,
        broker: BrokerClient,
        header_provider: HeaderProvider | None = None,
    ) -> None:
        super().__init__(broker)
        self._header_provider = header_provider or static_headers({})

    async def fetch_stored_credentials(self) -> Any:
        """Return the backend's stored authentication record.

        Raises:
            AutomaticLoginFailedError: If the backend answers with a status
                above 400.
            TransportError: If the backend cannot be reached.
        """
        headers = await self._header_provider()
        response = await self._broker.get(AUTHENTICATE_PATH, headers=headers)
        return expect_json(response, AutomaticLoginFailedError())
