"""
Core Utilities Package

Shared building blocks used by the YNAB, Splitwise and sync packages.

This package provides:
- Configuration management for environment-specific settings
- Day-granularity dates for watermarks and cache periods
- Minor-unit currency conversion using Decimal arithmetic
- A once-per-day response cache over pluggable storage
"""

from .cache import CacheStore, FileCacheStore, InMemoryCacheStore, QueryKey, ResponseCache
from .config import Config, Environment, get_config, reload_config
from .currency import MILLIUNITS_PER_UNIT, expense_cost, format_major, minor_to_major
from .dates import FinancialDate

__all__ = [
    # Cache
    "CacheStore",
    "FileCacheStore",
    "InMemoryCacheStore",
    "QueryKey",
    "ResponseCache",
    # Configuration
    "Config",
    "Environment",
    "get_config",
    "reload_config",
    # Currency
    "MILLIUNITS_PER_UNIT",
    "expense_cost",
    "format_major",
    "minor_to_major",
    "FinancialDate",
]
