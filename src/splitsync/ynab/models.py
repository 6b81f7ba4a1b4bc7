#!/usr/bin/env python3
"""
YNAB Domain Models

Type-safe models representing the parts of the YNAB API this job reads.
Amounts stay in YNAB milliunits; conversion happens when an expense is built.
"""

from dataclasses import dataclass, field
from typing import Any

from ..core.dates import FinancialDate

CLEARED = "cleared"


@dataclass(frozen=True)
class YnabTransaction:
    """
    YNAB transaction from API.

    Read-only to this system. Optional fields are None when YNAB omits them
    or sends null.
    """

    id: str
    date: FinancialDate
    amount: int  # milliunits, negative for outflows
    cleared: str  # "cleared", "uncleared", "reconciled"
    category_id: str | None = None
    category_name: str | None = None
    payee_name: str | None = None
    memo: str | None = None
    account_name: str | None = None
    deleted: bool = False

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "YnabTransaction":
        """
        Create YnabTransaction from API dict.

        Args:
            data: Transaction object from the YNAB API

        Returns:
            YnabTransaction instance
        """
        return cls(
            id=data["id"],
            date=FinancialDate.from_string(data["date"]),
            amount=int(data["amount"]),
            cleared=data.get("cleared", "uncleared"),  # Default to uncleared if not present
            category_id=data.get("category_id"),
            category_name=data.get("category_name"),
            payee_name=data.get("payee_name"),
            memo=data.get("memo"),
            account_name=data.get("account_name"),
            deleted=data.get("deleted", False),
        )

    @property
    def is_cleared(self) -> bool:
        return self.cleared == CLEARED

    @property
    def is_outflow(self) -> bool:
        return self.amount < 0


@dataclass(frozen=True)
class YnabCategoryGroup:
    """
    YNAB category group from API, with the ids of its categories.
    """

    id: str
    name: str
    category_ids: list[str] = field(default_factory=list)
    deleted: bool = False

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "YnabCategoryGroup":
        """
        Create YnabCategoryGroup from API dict.

        Deleted categories inside the group are dropped.
        """
        return cls(
            id=data["id"],
            name=data["name"],
            category_ids=[
                category["id"] for category in data.get("categories", []) if not category.get("deleted", False)
            ],
            deleted=data.get("deleted", False),
        )


def build_category_group_index(groups: list[YnabCategoryGroup]) -> dict[str, str]:
    """
    Map every category id to the name of the group it belongs to.

    Args:
        groups: Category groups from the API

    Returns:
        Dict of category id -> group name
    """
    index: dict[str, str] = {}
    for group in groups:
        if group.deleted:
            continue
        for category_id in group.category_ids:
            index[category_id] = group.name
    return index
