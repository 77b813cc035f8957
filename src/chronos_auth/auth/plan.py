"""Eligibility check for a Jira host's Chronos plan."""

from __future__ import annotations

from chronos_auth.auth.base import CHECK_USER_PLAN_PATH, BrokerStrategy
from chronos_auth.output import debug


class PlanChecker(BrokerStrategy):
    """Ask the backend whether a Jira host is covered by an active plan."""

    async def check_user_plan(self, host: str) -> bool:
        """Return True only for a 200 answer whose body has a truthy ``success``.

        Any other status, or a body that is not a JSON object, counts as no
        plan.

        Raises:
            TransportError: If the backend cannot be reached.
        """
        response = await self._broker.post(
            CHECK_USER_PLAN_PATH,
            headers={"Content-Type": "application/json"},
            json_body={"baseUrl": host},
        )
        if response.status_code != 200:
            return False
        try:
            body = response.json()
        except ValueError:
            debug(f"{CHECK_USER_PLAN_PATH} returned a non-JSON body")
            return False
        return isinstance(body, dict) and bool(body.get("success"))
