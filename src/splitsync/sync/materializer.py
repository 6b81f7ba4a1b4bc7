#!/usr/bin/env python3
"""
Expense Materializer

Turns a qualifying YNAB transaction into a Splitwise create-expense request.

The description embeds the source transaction id. It is the only persisted
link back to YNAB and is what duplicate audits in Splitwise search for.
"""

import logging
from dataclasses import dataclass
from decimal import Decimal
from pathlib import Path
from typing import Any

import yaml

from ..core.currency import MILLIUNITS_PER_UNIT, expense_cost, format_major
from ..ynab.models import YnabTransaction

logger = logging.getLogger(__name__)

# YNAB category id -> Splitwise category id
# (see https://secure.splitwise.com/api/v3.0/get_categories)
DEFAULT_CATEGORY_MAP: dict[str, int] = {
    "60037d9a-1a2e-4960-b067-f9d5d548d8ec": 1,  # Amazon Prime -> Utilities
    "4611dd30-b5c8-479b-a59c-b2794dd2d4f0": 28,  # Cabin Improvements -> Home (Other)
    "381373d1-56d3-4929-bb4c-c19abb41b8e6": 17,  # Cabin Maintenance -> Maintenance
    "9b8a7501-2aa8-42e1-93dc-68cc8a6a1e95": 37,  # Cabin Trash -> Trash
    "139acc44-1191-4c55-9768-b3a859bbf9a6": 12,  # Groceries
    "351520fd-4d45-4453-ae16-ad5571b59221": 13,  # Restaurants -> Dining Out
    "e90d2f8d-88c0-479d-9e5c-50811375ea69": 35,  # Vacation -> Plane
    "ea5f7fb9-64a8-42b0-9adf-d4a5b092b36f": 34,  # Transportation (Other)
    "70954a26-5c5b-4483-8e62-06af2a76d4df": 7,  # Cabin Water -> Water
    "bf72c56f-8041-4000-b72d-93ad9fb44931": 4,  # Oakland Mortgage -> Mortgage
    "5cc4da89-36e3-4f55-90a7-9853a958feae": 8,  # Apple TV+ -> TV
    "2d0eed50-4fbc-4694-b5be-54b340e3c8d0": 9,  # YouTube Premium -> TV
    "5c7bd50f-af65-417f-84c8-f035f25c5d62": 8,  # Oakland Internet
    "f1b7b3bb-b8ad-4831-bfd8-92f542c0c937": 6,  # Cabin Propane
    "a5782661-903e-4989-a52b-fcf9d259f50b": 5,  # PG&E
    "93de32c8-f916-44b8-b959-afa6ce0d2abf": 8,  # Garmin inReach
    "f0422845-46a3-433d-961d-d214592b8e29": 10,  # Car Insurance
    "730e72a6-1bfc-453b-8b9c-ba2ebab8ad86": 28,  # Oakland Gardening
    "f770a5db-4835-494e-ab45-f1364850613f": 8,  # Cabin Internet
}


class MissingRequiredFieldError(Exception):
    """Raised when a transaction lacks a field the destination requires"""

    def __init__(self, transaction_id: str, field_name: str):
        self.transaction_id = transaction_id
        self.field_name = field_name
        super().__init__(f"Transaction {transaction_id} has no {field_name}")


@dataclass(frozen=True)
class ExpenseRequest:
    """A create-expense call for the destination, derived 1:1 from a transaction."""

    transaction_id: str
    cost: Decimal
    name: str
    description: str
    group_id: int
    category_id: int | None
    date: str

    def to_params(self) -> dict[str, Any]:
        """Extra create_expense fields beyond cost, name and group."""
        return {
            "details": self.description,
            "date": self.date,
            "category_id": self.category_id,
        }


def format_description(transaction: YnabTransaction, cost: Decimal) -> str:
    """Fixed-format multi-line description; absent optional fields render empty."""
    return (
        f"ID: {transaction.id}\n"
        f"Category: {transaction.category_name or ''}\n"
        f"Payee: {transaction.payee_name or ''}\n"
        f"Memo: {transaction.memo or ''}\n"
        f"Amount: {format_major(cost)}\n"
    )


class ExpenseMaterializer:
    """
    Pure transaction -> ExpenseRequest translation.

    Args:
        category_map: YNAB category id -> Splitwise category id
        group_id: Splitwise group receiving the expenses
        minor_unit_scale: Source minor units per major unit
    """

    def __init__(self, category_map: dict[str, int], group_id: int, minor_unit_scale: int = MILLIUNITS_PER_UNIT):
        self.category_map = dict(category_map)
        self.group_id = group_id
        self.minor_unit_scale = minor_unit_scale

    def materialize(self, transaction: YnabTransaction, category_id: str | None) -> ExpenseRequest:
        """
        Build the expense request for a selected transaction.

        Raises:
            MissingRequiredFieldError: If the transaction has no category name
        """
        if not transaction.category_name:
            raise MissingRequiredFieldError(transaction.id, "category_name")

        cost = expense_cost(transaction.amount, self.minor_unit_scale)

        destination_category = self.category_map.get(category_id) if category_id else None
        if destination_category is None:
            logger.debug(f"No Splitwise category mapped for {category_id!r} ({transaction.category_name})")

        return ExpenseRequest(
            transaction_id=transaction.id,
            cost=cost,
            name=transaction.category_name,
            description=format_description(transaction, cost),
            group_id=self.group_id,
            category_id=destination_category,
            date=transaction.date.to_iso_string(),
        )


def load_category_map(path: Path | None) -> dict[str, int]:
    """
    Load the category id mapping from a YAML file.

    The file is a flat mapping of YNAB category id to Splitwise category id.
    When no file exists the built-in table is used.

    Raises:
        ValueError: If the file exists but is not a mapping of id -> integer
    """
    if path is None or not Path(path).exists():
        return dict(DEFAULT_CATEGORY_MAP)

    with open(path, encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}

    if not isinstance(data, dict):
        raise ValueError(f"Category map {path} must be a mapping, got {type(data).__name__}")

    try:
        category_map = {str(key): int(value) for key, value in data.items()}
    except (TypeError, ValueError) as e:
        raise ValueError(f"Category map {path} has a non-integer Splitwise category: {e}") from e

    logger.info(f"Loaded {len(category_map)} category mappings from {path}")
    return category_map
