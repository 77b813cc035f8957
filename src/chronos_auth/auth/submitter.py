"""Submission of Jira credentials to the Chronos backend.

This module provides :class:`CredentialSubmitter`, which posts either basic
credentials or an OAuth token pair to ``/desktop-tracker/authenticate``.
The backend validates them against Jira, stores them, and answers with a
JSON record that this layer returns without interpreting it.

For basic auth the backend receives ``basicToken``, the base64 encoding of
``username:password``.  That token is meant for the backend only; it is not
sent to the Jira server by this package.

Any status above 400 is reported as
:class:`~chronos_auth.exceptions.AuthenticationFailedError` with a fixed
message; the backend's error body is discarded.
"""

from __future__ import annotations

from typing import Any

from chronos_auth.auth.base import AUTHENTICATE_PATH, BrokerStrategy
from chronos_auth.broker import expect_json
from chronos_auth.exceptions import AuthenticationFailedError
from chronos_auth.models import (
    BasicAuthPayload,
    BasicCredentials,
    DelegatedTokenCredentials,
    OAuthPayload,
)
from chronos_auth.output import debug

_JSON_HEADERS = {"Content-Type": "application/json"}


class CredentialSubmitter(BrokerStrategy):
    """Send basic or delegated-token credentials to the backend for validation."""

    async def submit_basic_auth(self, credentials: BasicCredentials) -> Any:
        """Submit a username and password for *credentials.host*.

        Args:
            credentials: Jira host, username, password and connection details.

        Returns:
            The backend's JSON record.

        Raises:
            AuthenticationFailedError: If the backend answers with a status
                above 400.
            TransportError: If the backend cannot be reached.
        """
        payload = BasicAuthPayload.from_credentials(credentials)
        debug(f"Submitting basic_auth credentials for {credentials.host}")
        return await self._submit(payload.model_dump(by_alias=True))

    async def submit_delegated_auth(self, credentials: DelegatedTokenCredentials) -> Any:
        """Submit an OAuth token pair obtained from the browser consent step.

        Follows the same status policy as :meth:`submit_basic_auth`.

        Raises:
            AuthenticationFailedError: If the backend answers with a status
                above 400.
            TransportError: If the backend cannot be reached.
        """
        payload = OAuthPayload.from_credentials(credentials)
        debug(f"Submitting OAuth credentials for {credentials.base_url}")
        return await self._submit(payload.model_dump(by_alias=True))

    async def _submit(self, body: dict[str, Any]) -> Any:
        response = await self._broker.post(
            AUTHENTICATE_PATH,
            headers=_JSON_HEADERS,
            json_body=body,
        )
        return expect_json(response, AuthenticationFailedError())
