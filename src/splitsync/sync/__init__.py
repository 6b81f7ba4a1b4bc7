"""
Sync Package

Incremental YNAB -> Splitwise synchronization.

Key Components:
- watermark: Date of the last successful run
- selector: Which transactions are shared expenses
- materializer: Transaction -> Splitwise expense request
- ledger: Already-submitted transaction ids
- orchestrator: The run itself, dry-run and commit policy

Safety Features:
- Dry-run mode that never writes anything
- Watermark only advances after a completed, non-dry run
- Per-transaction failures never abort the run
"""

from .ledger import FileSubmissionLedger, InMemorySubmissionLedger, SubmissionLedger
from .materializer import (
    DEFAULT_CATEGORY_MAP,
    ExpenseMaterializer,
    ExpenseRequest,
    MissingRequiredFieldError,
    format_description,
    load_category_map,
)
from .orchestrator import CommitPolicy, SyncOrchestrator, SyncResult
from .selector import DEFAULT_MEMO_MARKER, is_shared, select_transactions
from .watermark import FileWatermarkStore, InMemoryWatermarkStore, WatermarkCommitError, WatermarkStore

__all__ = [
    "DEFAULT_CATEGORY_MAP",
    "DEFAULT_MEMO_MARKER",
    "CommitPolicy",
    "ExpenseMaterializer",
    "ExpenseRequest",
    "FileSubmissionLedger",
    "FileWatermarkStore",
    "InMemorySubmissionLedger",
    "InMemoryWatermarkStore",
    "MissingRequiredFieldError",
    "SubmissionLedger",
    "SyncOrchestrator",
    "SyncResult",
    "WatermarkCommitError",
    "WatermarkStore",
    "format_description",
    "is_shared",
    "load_category_map",
    "select_transactions",
]
