#!/usr/bin/env python3
"""
Sync Orchestrator

Drives one sync run as a linear pipeline:

    read watermark -> fetch (cached) -> select -> materialize -> submit or log
    -> commit watermark (commit mode only)

Per-transaction failures are logged and counted; only a failure to commit the
watermark aborts the run. Dry runs never call the destination, never touch
the ledger and never move the watermark, so they can be repeated freely.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Any, Protocol

from ..core.dates import FinancialDate
from ..ynab.models import YnabTransaction
from .ledger import SubmissionLedger
from .materializer import ExpenseMaterializer, ExpenseRequest, MissingRequiredFieldError
from .selector import DEFAULT_MEMO_MARKER, select_transactions
from .watermark import WatermarkStore

logger = logging.getLogger(__name__)


class TransactionSource(Protocol):
    def list_transactions_since(self, since: FinancialDate) -> list[YnabTransaction]: ...

    def list_category_groups(self) -> dict[str, str]: ...


class ExpenseDestination(Protocol):
    def create_expense(
        self, cost: Decimal, description: str, group_id: int, extra_params: dict[str, Any] | None = None
    ) -> dict[str, Any]: ...


class CommitPolicy(Enum):
    """What to do with the watermark when some submissions failed."""

    # Advance to today regardless; failed items are not retried.
    BEST_EFFORT = "best-effort"
    # Hold the watermark at the earliest failed transaction's date.
    AT_LEAST_ONCE = "at-least-once"


@dataclass
class SyncResult:
    """Outcome of a single run."""

    start_date: FinancialDate
    dry_run: bool
    fetched: int = 0
    selected: int = 0
    planned: list[ExpenseRequest] = field(default_factory=list)
    submitted: list[ExpenseRequest] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    failed: list[YnabTransaction] = field(default_factory=list)
    duplicates: list[str] = field(default_factory=list)
    committed_watermark: FinancialDate | None = None

    @property
    def has_failures(self) -> bool:
        return bool(self.failed)


class SyncOrchestrator:
    """
    Runs the YNAB -> Splitwise sync for one budget and one group.

    Args:
        source: Cached YNAB reads
        destination: Splitwise expense creation
        watermark_store: Where the last successful sync date lives
        materializer: Transaction -> expense translation
        target_group_name: YNAB category group whose transactions are shared
        memo_marker: Memo substring that also marks a transaction as shared
        dry_run: Log intended expenses instead of creating them
        commit_policy: Watermark behaviour when submissions fail
        ledger: Optional record of already-submitted transaction ids
        clock: Source of "today" for the committed watermark
    """

    def __init__(
        self,
        source: TransactionSource,
        destination: ExpenseDestination,
        watermark_store: WatermarkStore,
        materializer: ExpenseMaterializer,
        target_group_name: str,
        memo_marker: str = DEFAULT_MEMO_MARKER,
        dry_run: bool = False,
        commit_policy: CommitPolicy = CommitPolicy.BEST_EFFORT,
        ledger: SubmissionLedger | None = None,
        clock: Callable[[], FinancialDate] = FinancialDate.today,
    ):
        self.source = source
        self.destination = destination
        self.watermark_store = watermark_store
        self.materializer = materializer
        self.target_group_name = target_group_name
        self.memo_marker = memo_marker
        self.dry_run = dry_run
        self.commit_policy = commit_policy
        self.ledger = ledger
        self.clock = clock

    def run(self) -> SyncResult:
        """
        Execute one sync run.

        Raises:
            WatermarkCommitError: If the new watermark could not be persisted
            YnabAPIError: If the source data could not be fetched
        """
        previous = self.watermark_store.read()
        start_date = previous or FinancialDate.earliest()
        logger.info(f"Last sync date: {start_date}")

        result = SyncResult(start_date=start_date, dry_run=self.dry_run)

        transactions = self.source.list_transactions_since(start_date)
        category_group_index = self.source.list_category_groups()
        result.fetched = len(transactions)

        selected = select_transactions(transactions, category_group_index, self.target_group_name, self.memo_marker)
        for transaction, category_id in selected:
            result.selected += 1
            self._process(transaction, category_id, result)

        if self.dry_run:
            logger.info(
                f"Dry run complete: {len(result.planned)} expenses would be created, watermark left at {start_date}"
            )
            return result

        new_watermark = self._next_watermark(previous, result)
        self.watermark_store.commit(new_watermark)
        result.committed_watermark = new_watermark

        logger.info(
            f"Sync complete: {len(result.submitted)} created, {len(result.failed)} failed, "
            f"{len(result.skipped)} skipped, {len(result.duplicates)} already submitted"
        )
        return result

    def _process(self, transaction: YnabTransaction, category_id: str | None, result: SyncResult) -> None:
        if self.ledger is not None and self.ledger.contains(transaction.id):
            logger.info(f"Skipping {transaction.id}: already submitted")
            result.duplicates.append(transaction.id)
            return

        try:
            request = self.materializer.materialize(transaction, category_id)
        except MissingRequiredFieldError as e:
            logger.warning(f"Skipping transaction: {e}")
            result.skipped.append(transaction.id)
            return

        if self.dry_run:
            logger.info(
                f"Will create expense with name: {request.name}, amount: {request.cost}, "
                f"description: {request.description!r}"
            )
            result.planned.append(request)
            return

        try:
            self.destination.create_expense(request.cost, request.name, request.group_id, request.to_params())
        except Exception as e:
            logger.error(f"Could not create expense for {transaction.id}: {e}")
            result.failed.append(transaction)
            return

        logger.info(f"Created expense {request.name} ({request.cost}) for {transaction.id}")
        result.submitted.append(request)
        if self.ledger is not None:
            self.ledger.record(transaction.id)

    def _next_watermark(self, previous: FinancialDate | None, result: SyncResult) -> FinancialDate:
        candidate = self.clock()
        if result.has_failures and self.commit_policy == CommitPolicy.AT_LEAST_ONCE:
            earliest_failed = min(transaction.date for transaction in result.failed)
            candidate = min(candidate, earliest_failed)
            logger.warning(
                f"{len(result.failed)} submissions failed; holding watermark at {candidate} so they are retried"
            )
        elif result.has_failures:
            logger.warning(f"{len(result.failed)} submissions failed and will not be retried")

        # Never move backwards.
        if previous is not None and previous > candidate:
            return previous
        return candidate
