"""HTTP transport for the Chronos backend.

Provides :class:`BrokerClient`, an async wrapper around
:class:`httpx.AsyncClient` that turns transport failures into classified
:class:`~chronos_auth.exceptions.TransportError` instances, and
:func:`expect_json`, the single status policy shared by every backend call.

Example::

    from chronos_auth.broker import BrokerClient

    async with BrokerClient.from_config(config) as broker:
        response = await broker.get("/desktop-tracker/authenticate")
"""

from chronos_auth.broker.client import (
    FAILURE_STATUS_THRESHOLD,
    BrokerClient,
    decode_json,
    expect_json,
    is_failure,
)

__all__ = [
    "FAILURE_STATUS_THRESHOLD",
    "BrokerClient",
    "decode_json",
    "expect_json",
    "is_failure",
]
