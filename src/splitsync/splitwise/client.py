#!/usr/bin/env python3
"""
Splitwise API Client

Destination capability surface for the sync: creating an expense split
equally across the members of a group.
"""

import logging
from decimal import Decimal
from typing import Any

import requests

from ..core.currency import format_major

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://secure.splitwise.com/api/v3.0"


class SplitwiseAPIError(Exception):
    """Raised when Splitwise rejects a request or cannot be reached"""

    pass


class SplitwiseClient:
    """Splitwise API client with bearer-token authentication"""

    def __init__(
        self,
        api_key: str,
        base_url: str = DEFAULT_BASE_URL,
        timeout: int = 30,
        session: requests.Session | None = None,
    ):
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    def post(self, endpoint: str, payload: dict[str, Any]) -> dict[str, Any]:
        """
        Make authenticated POST request to the Splitwise API.

        Splitwise reports validation problems with a 200 status and a
        non-empty "errors" member, so both are checked.

        Raises:
            SplitwiseAPIError: Network error, non-200 status or reported errors
        """
        headers = {"Authorization": f"Bearer {self.api_key}"}
        url = f"{self.base_url}{endpoint}"

        try:
            response = self.session.post(url, headers=headers, json=payload, timeout=self.timeout)
        except requests.RequestException as e:
            raise SplitwiseAPIError(f"Network error: {e}") from e

        if response.status_code != 200:
            raise SplitwiseAPIError(f"Splitwise API error {response.status_code} for {endpoint}: {response.text}")

        body = response.json()
        errors = body.get("errors")
        if errors:
            raise SplitwiseAPIError(f"Splitwise rejected request to {endpoint}: {errors}")
        return body

    def create_expense(
        self,
        cost: Decimal,
        description: str,
        group_id: int,
        extra_params: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """
        Create an expense split equally among the group's members.

        Args:
            cost: Positive amount in major units
            description: Short display name of the expense
            group_id: Splitwise group id
            extra_params: Additional create_expense fields (details, date, category_id)

        Returns:
            The created expense object
        """
        payload: dict[str, Any] = {
            "cost": format_major(cost),
            "description": description,
            "group_id": group_id,
            "split_equally": True,
        }
        payload.update({key: value for key, value in (extra_params or {}).items() if value is not None})

        body = self.post("/create_expense", payload)
        expenses = body.get("expenses") or [{}]
        logger.debug(f"Created Splitwise expense {expenses[0].get('id')} for {description}")
        return expenses[0]
