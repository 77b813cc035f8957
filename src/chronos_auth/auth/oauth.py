"""First leg of the Jira OAuth handshake.

:class:`OAuthHandshakeInitiator` asks the Chronos backend for the request
token and authorization URL of a Jira server.  The caller sends the user to
that URL, and once consent is given submits the resulting token pair with
:meth:`~chronos_auth.auth.submitter.CredentialSubmitter.submit_delegated_auth`.

The Jira base URL travels as the ``baseUrl`` query parameter and is
percent-encoded, so URLs containing ``&``, ``#`` or ``?`` arrive intact.
"""

from __future__ import annotations

from typing import Any

from chronos_auth.auth.base import OAUTH_DATA_PATH, BrokerStrategy
from chronos_auth.broker import decode_json, is_failure
from chronos_auth.exceptions import UnknownError


class OAuthHandshakeInitiator(BrokerStrategy):
    """Request OAuth handshake parameters for a Jira server."""

    async def initiate_oauth(self, base_url: str) -> Any:
        """Return the backend's handshake parameters for *base_url*.

        Args:
            base_url: Base URL of the Jira server the user wants to connect.

        Returns:
            The decoded JSON body (request token, authorization URL).

        Raises:
            UnknownError: If the backend answers with a status above 400.
                The status is kept on ``status_code``.
            TransportError: If the backend cannot be reached.
        """
        response = await self._broker.get(
            OAUTH_DATA_PATH,
            params={"baseUrl": base_url},
            headers={
                "Accept": "application/json",
                "Content-Type": "application/json",
            },
        )
        if is_failure(response):
            raise UnknownError(
                f"Unknown error (/getDataForOAuth returned {response.status_code})",
                status_code=response.status_code,
            )
        return decode_json(response)
