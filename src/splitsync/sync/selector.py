#!/usr/bin/env python3
"""
Transaction Selector

Decides which YNAB transactions should become shared expenses.
"""

from collections.abc import Iterable, Iterator

from ..ynab.models import YnabTransaction

DEFAULT_MEMO_MARKER = "splitwise"


def is_shared(
    transaction: YnabTransaction,
    category_group_index: dict[str, str],
    target_group_name: str,
    memo_marker: str = DEFAULT_MEMO_MARKER,
) -> bool:
    """True if the transaction's category is in the target group or its memo carries the marker."""
    if transaction.category_id is not None and category_group_index.get(transaction.category_id) == target_group_name:
        return True
    return transaction.memo is not None and memo_marker.lower() in transaction.memo.lower()


def select_transactions(
    transactions: Iterable[YnabTransaction],
    category_group_index: dict[str, str],
    target_group_name: str,
    memo_marker: str = DEFAULT_MEMO_MARKER,
) -> Iterator[tuple[YnabTransaction, str | None]]:
    """
    Lazily yield the transactions that qualify for export, in input order.

    A transaction qualifies when it is cleared, not deleted, an outflow
    (amount < 0), and shared by category group or memo marker. Pending
    transactions are left for a later run since their amount may still change.

    Args:
        transactions: Source transactions, consumed once
        category_group_index: Category id -> group name
        target_group_name: Group whose categories are always shared
        memo_marker: Case-insensitive memo substring marking a shared transaction

    Yields:
        (transaction, category_id) pairs; category_id may be None for
        memo-marked transactions without a category
    """
    for transaction in transactions:
        if transaction.deleted or not transaction.is_cleared or not transaction.is_outflow:
            continue
        if is_shared(transaction, category_group_index, target_group_name, memo_marker):
            yield transaction, transaction.category_id
