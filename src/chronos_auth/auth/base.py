"""Shared base for the strategies that authenticate through the Chronos backend.

The basic, OAuth and automatic strategies and the plan check all talk to
the same backend endpoint family and differ only in the payload or the HTTP
method.  :class:`BrokerStrategy` holds the open
:class:`~chronos_auth.broker.BrokerClient` they share and the endpoint
paths.

The direct login does not go through the backend and therefore does not
extend this class; see :mod:`chronos_auth.auth.direct`.
"""

from __future__ import annotations

from chronos_auth.broker import BrokerClient

AUTHENTICATE_PATH = "/desktop-tracker/authenticate"
OAUTH_DATA_PATH = "/desktop-tracker/getDataForOAuth"
CHECK_USER_PLAN_PATH = "/desktop-tracker/check-user-plan"


class BrokerStrategy:
    """Base class for login strategies mediated by the Chronos backend.

    Args:
        broker: An opened broker client.  The strategy does not close it.
    """

    def __init__(self, broker: BrokerClient) -> None:
        self._broker = broker
