#!/usr/bin/env python3
"""
Submission Ledger

Remembers which YNAB transaction ids have already been sent to Splitwise.
YNAB's since_date filter is inclusive, so the watermark day is fetched again
on the next run, and an at-least-once commit policy can re-fetch older days.
The ledger lets those overlapping windows be replayed without duplicates.
"""

import logging
from pathlib import Path
from typing import Protocol

from ..core.json_utils import format_json, read_json, write_text_atomic

logger = logging.getLogger(__name__)


class SubmissionLedger(Protocol):
    def contains(self, transaction_id: str) -> bool: ...

    def record(self, transaction_id: str) -> None: ...


class InMemorySubmissionLedger:
    def __init__(self, transaction_ids: set[str] | None = None):
        self.transaction_ids: set[str] = set(transaction_ids or ())

    def contains(self, transaction_id: str) -> bool:
        return transaction_id in self.transaction_ids

    def record(self, transaction_id: str) -> None:
        self.transaction_ids.add(transaction_id)


class FileSubmissionLedger:
    """
    Ledger persisted as a JSON list of transaction ids.

    Loaded lazily on first use. A missing or corrupt file starts an empty
    ledger; a failed save is logged since the expense already exists
    upstream and the run must go on.
    """

    def __init__(self, path: Path):
        self.path = Path(path)
        self._ids: set[str] | None = None

    def _load(self) -> set[str]:
        if self._ids is None:
            self._ids = set()
            if self.path.exists():
                try:
                    self._ids = {str(tx_id) for tx_id in read_json(self.path)}
                except (OSError, ValueError, TypeError) as e:
                    logger.warning(f"Ignoring unreadable submission ledger {self.path}: {e}")
        return self._ids

    def contains(self, transaction_id: str) -> bool:
        return transaction_id in self._load()

    def record(self, transaction_id: str) -> None:
        ids = self._load()
        ids.add(transaction_id)
        try:
            write_text_atomic(self.path, format_json(sorted(ids)))
        except OSError as e:
            logger.warning(f"Failed to save submission ledger {self.path}: {e}")
