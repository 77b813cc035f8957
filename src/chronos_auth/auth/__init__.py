"""Login strategies for establishing a Jira session.

Backend-mediated strategies (sharing :class:`BrokerStrategy`):

- :class:`CredentialSubmitter` -- basic credentials or an OAuth token pair.
- :class:`AutomaticCredentialFetcher` -- credentials the backend already holds.
- :class:`OAuthHandshakeInitiator` -- request token and authorization URL.

Direct strategy:

- :class:`DirectSessionLoginClient` -- form login against Jira, returning
  session cookies.

:class:`AuthManager` runs any of them and reports an
:class:`~chronos_auth.models.AuthOutcome`.

Typical usage::

    from chronos_auth.auth import create_default_manager

    manager = create_default_manager()
    outcome = await manager.login_direct(request)
"""

from chronos_auth.auth.automatic import (
    AutomaticCredentialFetcher,
    HeaderProvider,
    static_headers,
)
from chronos_auth.auth.base import BrokerStrategy
from chronos_auth.auth.direct import DirectSessionLoginClient, parse_set_cookie
from chronos_auth.auth.manager import AuthManager, LoginMethod, create_default_manager
from chronos_auth.auth.oauth import OAuthHandshakeInitiator
from chronos_auth.auth.plan import PlanChecker
from chronos_auth.auth.submitter import CredentialSubmitter

__all__ = [
    "AuthManager",
    "AutomaticCredentialFetcher",
    "BrokerStrategy",
    "CredentialSubmitter",
    "DirectSessionLoginClient",
    "HeaderProvider",
    "LoginMethod",
    "OAuthHandshakeInitiator",
    "PlanChecker",
    "create_default_manager",
    "parse_set_cookie",
    "static_headers",
]
