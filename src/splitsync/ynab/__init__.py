"""
YNAB Integration Package

Read-only access to a YNAB budget: transactions since a date and the
category-group index, both served through the daily response cache.
"""

from .client import CachedYnabClient, YnabAPIError, YnabClient, YnabRateLimitError, YnabUnauthorizedError
from .models import CLEARED, YnabCategoryGroup, YnabTransaction, build_category_group_index

__all__ = [
    "CLEARED",
    "CachedYnabClient",
    "YnabAPIError",
    "YnabCategoryGroup",
    "YnabClient",
    "YnabRateLimitError",
    "YnabTransaction",
    "YnabUnauthorizedError",
    "build_category_group_index",
]
