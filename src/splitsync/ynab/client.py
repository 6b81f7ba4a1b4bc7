#!/usr/bin/env python3
"""
YNAB API Client

Thin authenticated wrapper over the YNAB REST API plus a cached facade that
exposes the two read capabilities the sync needs:

- list_transactions_since(date) -> list[YnabTransaction]
- list_category_groups() -> dict[category_id, group_name]

Both reads go through the ResponseCache, so repeated runs on the same day
cost one upstream call per query.
"""

import logging
from typing import Any

import requests

from ..core.cache import QueryKey, ResponseCache
from ..core.dates import FinancialDate
from .models import YnabCategoryGroup, YnabTransaction, build_category_group_index

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.youneedabudget.com/v1"


class YnabAPIError(Exception):
    """Base exception for YNAB API errors"""

    pass


class YnabUnauthorizedError(YnabAPIError):
    """401 - Invalid API token"""

    pass


class YnabRateLimitError(YnabAPIError):
    """429 - Rate limit exceeded"""

    def __init__(self, retry_after: int):
        self.retry_after = retry_after
        super().__init__(f"Rate limit exceeded. Retry after {retry_after}s")


class YnabClient:
    """YNAB API client with authentication and error handling"""

    def __init__(
        self,
        api_token: str,
        budget_id: str = "last-used",
        base_url: str = DEFAULT_BASE_URL,
        timeout: int = 30,
        session: requests.Session | None = None,
    ):
        self.api_token = api_token
        self.budget_id = budget_id
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    def get(self, endpoint: str, params: dict[str, Any] | None = None) -> dict[str, Any]:
        """
        Make authenticated GET request to YNAB API.

        Args:
            endpoint: API endpoint path (e.g., '/budgets/{id}/transactions')
            params: Optional query parameters

        Returns:
            The "data" object of the JSON response

        Raises:
            YnabUnauthorizedError: Invalid API token (401)
            YnabRateLimitError: Rate limit exceeded (429)
            YnabAPIError: Other API or network errors
        """
        headers = {"Authorization": f"Bearer {self.api_token}"}
        url = f"{self.base_url}{endpoint}"

        try:
            response = self.session.get(url, headers=headers, params=params, timeout=self.timeout)
        except requests.RequestException as e:
            raise YnabAPIError(f"Network error: {e}") from e

        if response.status_code == 200:
            return response.json().get("data", {})
        elif response.status_code == 401:
            raise YnabUnauthorizedError("Invalid YNAB API token")
        elif response.status_code == 429:
            retry_after = int(response.headers.get("Retry-After", 60))
            raise YnabRateLimitError(retry_after)
        else:
            raise YnabAPIError(f"YNAB API error {response.status_code} for {endpoint}: {response.text}")

    def get_transactions(self, since: FinancialDate | None = None) -> list[dict[str, Any]]:
        """Raw transaction dicts on or after since (all when since is None or earliest)."""
        params = {}
        if since is not None and not since.is_earliest:
            params["since_date"] = since.to_iso_string()
        data = self.get(f"/budgets/{self.budget_id}/transactions", params=params or None)
        return data.get("transactions", [])

    def get_category_groups(self) -> list[dict[str, Any]]:
        """Raw category group dicts, each with nested categories."""
        data = self.get(f"/budgets/{self.budget_id}/categories")
        return data.get("category_groups", [])


class CachedYnabClient:
    """
    Source capability surface for the sync, backed by a once-per-day cache.

    Cache entries are scoped by budget id; transaction queries are also
    scoped by their since-date.
    """

    def __init__(self, client: YnabClient, cache: ResponseCache):
        self.client = client
        self.cache = cache

    def list_transactions_since(self, since: FinancialDate) -> list[YnabTransaction]:
        query = QueryKey(kind="transactions", scope=f"{self.client.budget_id}_{since.to_iso_string()}")
        raw = self.cache.get_or_fetch(query, lambda: self.client.get_transactions(since))
        return [YnabTransaction.from_dict(tx) for tx in raw]

    def list_category_groups(self) -> dict[str, str]:
        query = QueryKey(kind="category_groups", scope=self.client.budget_id)
        raw = self.cache.get_or_fetch(query, self.client.get_category_groups)
        return build_category_group_index([YnabCategoryGroup.from_dict(group) for group in raw])
