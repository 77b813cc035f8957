"""Auth manager -- one entry point per login strategy, one result type for all.

The strategy classes raise typed exceptions from
:mod:`chronos_auth.exceptions`.  :class:`AuthManager` owns the connection
lifetime for each attempt (it opens and closes the broker client or the
direct-login client) and converts whatever happened into an
:class:`~chronos_auth.models.AuthOutcome`, so callers such as the CLI or a
desktop UI handle success and failure the same way for every strategy.

A caller picks exactly one strategy per login attempt.  Attempts share no
state; several may run concurrently on the same manager.

For most use cases, call :func:`create_default_manager` to get a manager
built from the resolved configuration.

See Also:
    :mod:`chronos_auth.session` -- hand-off of direct-login cookies to the
    Jira API client.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Awaitable, Callable, Optional

import httpx

from chronos_auth.auth.automatic import AutomaticCredentialFetcher, HeaderProvider
from chronos_auth.auth.direct import DirectSessionLoginClient
from chronos_auth.auth.oauth import OAuthHandshakeInitiator
from chronos_auth.auth.plan import PlanChecker
from chronos_auth.auth.submitter import CredentialSubmitter
from chronos_auth.broker import BrokerClient
from chronos_auth.exceptions import ChronosAuthError
from chronos_auth.models import (
    AuthOutcome,
    BasicCredentials,
    DelegatedTokenCredentials,
    DirectLoginRequest,
    GlobalConfig,
)
from chronos_auth.output import debug
from chronos_auth.session import SessionConfigurator, build_session_context, hand_off


class LoginMethod(str, Enum):
    """Identifiers of the login strategies, as recorded on an outcome."""

    BASIC = "basic_auth"
    OAUTH = "OAuth"
    OAUTH_INIT = "oauth_init"
    AUTOMATIC = "automatic"
    DIRECT = "direct"


class AuthManager:
    """Run login attempts and report them as :class:`AuthOutcome` values.

    Args:
        config: Resolved configuration (backend URL, timeout, TLS).
        header_provider: Headers for the automatic login request.
        broker_transport: Optional httpx transport for backend calls.
        direct_transport: Optional httpx transport for direct Jira logins.

    Example::

        manager = create_default_manager()
        outcome = await manager.login_basic(credentials)
        if not outcome.ok:
            print(outcome.error.message)
    """

    def __init__(
        self,
        config: GlobalConfig,
        header_provider: Optional[HeaderProvider] = None,
        broker_transport: Optional[httpx.AsyncBaseTransport] = None,
        direct_transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._config = config
        self._header_provider = header_provider
        self._broker_transport = broker_transport
        self._direct_transport = direct_transport

    @property
    def config(self) -> GlobalConfig:
        return self._config

    # ------------------------------------------------------------------ #
    # Backend strategies
    # ------------------------------------------------------------------ #

    async def login_basic(self, credentials: BasicCredentials) -> AuthOutcome:
        """Submit basic credentials through the backend."""

        async def run() -> Any:
            async with self._broker() as broker:
                return await CredentialSubmitter(broker).submit_basic_auth(credentials)

        return await self._attempt(LoginMethod.BASIC, run)

    async def login_oauth(self, credentials: DelegatedTokenCredentials) -> AuthOutcome:
        """Submit an OAuth token pair through the backend."""

        async def run() -> Any:
            async with self._broker() as broker:
                return await CredentialSubmitter(broker).submit_delegated_auth(credentials)

        return await self._attempt(LoginMethod.OAUTH, run)

    async def login_automatic(self) -> AuthOutcome:
        """Reuse credentials the backend already stores for this client."""

        async def run() -> Any:
            async with self._broker() as broker:
                fetcher = AutomaticCredentialFetcher(broker, self._header_provider)
                return await fetcher.fetch_stored_credentials()

        return await self._attempt(LoginMethod.AUTOMATIC, run)

    async def initiate_oauth(self, base_url: str) -> AuthOutcome:
        """Fetch OAuth handshake parameters; they are returned in ``record``."""

        async def run() -> Any:
            async with self._broker() as broker:
                return await OAuthHandshakeInitiator(broker).initiate_oauth(base_url)

        return await self._attempt(LoginMethod.OAUTH_INIT, run)

    async def check_user_plan(self, host: str) -> bool:
        """Return whether *host* has an active plan.

        Raises:
            TransportError: If the backend cannot be reached.
            ConfigError: If no backend URL is configured.
        """
        async with self._broker() as broker:
            return await PlanChecker(broker).check_user_plan(host)

    # ------------------------------------------------------------------ #
    # Direct strategy
    # ------------------------------------------------------------------ #

    async def login_direct(self, request: DirectLoginRequest) -> AuthOutcome:
        """Log in to Jira directly; the cookies are returned in ``cookies``."""
        client = DirectSessionLoginClient(
            timeout=self._config.request.timeout,
            verify_ssl=self._config.request.verify_ssl,
            transport=self._direct_transport,
        )
        return await self._attempt(
            LoginMethod.DIRECT, lambda: client.login_direct(request)
        )

    async def establish_session(
        self,
        request: DirectLoginRequest,
        configurator: SessionConfigurator,
    ) -> AuthOutcome:
        """Log in directly and, on success, hand the session to *configurator*.

        The configurator is not called when the login fails.
        """
        outcome = await self.login_direct(request)
        if outcome.ok:
            context = build_session_context(
                request.base_url, outcome.cookies, request.pathname
            )
            await hand_off(configurator, context)
        return outcome

    # ------------------------------------------------------------------ #
    # Helpers
    # ------------------------------------------------------------------ #

    def _broker(self) -> BrokerClient:
        return BrokerClient.from_config(self._config, transport=self._broker_transport)

    async def _attempt(
        self,
        method: LoginMethod,
        operation: Callable[[], Awaitable[Any]],
    ) -> AuthOutcome:
        try:
            result = await operation()
        except ChronosAuthError as exc:
            debug(f"{method.value} attempt failed: {exc.code}")
            return AuthOutcome(
                method=method.value,
                error=exc.classified(),
                exit_code=exc.exit_code,
            )

        if method is LoginMethod.DIRECT:
            return AuthOutcome(method=method.value, cookies=result)
        return AuthOutcome(method=method.value, record=result)


def create_default_manager(
    config: Optional[GlobalConfig] = None,
    header_provider: Optional[HeaderProvider] = None,
) -> AuthManager:
    """Create an :class:`AuthManager` from *config* or the resolved configuration."""
    if config is None:
        from chronos_auth.config import resolve_config

        config = resolve_config()
    return AuthManager(config, header_provider=header_provider)
