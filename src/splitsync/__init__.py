"""
YNAB to Splitwise Sync

One-way, incremental batch sync of shared YNAB transactions into a
Splitwise group.

Domain Packages:
- core: Configuration, dates, currency, JSON helpers and the response cache
- ynab: YNAB API client and domain models
- splitwise: Splitwise API client
- sync: Watermark, selection, expense materialization and orchestration
- cli: Command-line interface

Example Usage:
    from splitsync.sync import SyncOrchestrator, select_transactions
    from splitsync.core.cache import ResponseCache, InMemoryCacheStore
"""

__version__ = "0.1.0"

from .core.config import Environment, get_config
from .core.dates import FinancialDate

__all__ = [
    "Environment",
    "FinancialDate",
    "get_config",
]
