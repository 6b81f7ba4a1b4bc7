#!/usr/bin/env python3
"""
Response Cache - once-per-day memoization of upstream read calls.

The YNAB read API is rate limited and the data this job needs changes at most
daily, so each distinct query is fetched at most once per calendar day. Keys
embed the day, which makes entries from a previous day unreachable without
any explicit expiry.

Storage is abstracted behind the CacheStore protocol so the same logic runs
against an in-memory dict (tests) or a directory of JSON files (production).
Cache problems never surface to callers: a bad read is a miss and a failed
write is logged and ignored.
"""

import json
import logging
import re
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Protocol

from .dates import FinancialDate
from .json_utils import write_text_atomic

logger = logging.getLogger(__name__)

_MISS = object()

_UNSAFE_KEY_CHARS = re.compile(r"[^A-Za-z0-9_.-]")


class CacheStore(Protocol):
    """Key/value storage for serialized responses."""

    def get(self, key: str) -> str | None:
        """
        Return the payload stored under key, or None when absent.

        Implementations may raise on I/O problems; ResponseCache treats
        any such error as a miss.
        """
        ...

    def put(self, key: str, payload: str) -> None:
        """Store payload under key, replacing any previous value."""
        ...


class InMemoryCacheStore:
    """CacheStore backed by a dict. Lives for the lifetime of the object."""

    def __init__(self) -> None:
        self.entries: dict[str, str] = {}

    def get(self, key: str) -> str | None:
        return self.entries.get(key)

    def put(self, key: str, payload: str) -> None:
        self.entries[key] = payload

    def clear(self) -> None:
        self.entries.clear()


class FileCacheStore:
    """
    CacheStore writing one JSON file per key into a cache directory.

    The directory is created on first write.
    """

    def __init__(self, cache_dir: Path):
        self.cache_dir = Path(cache_dir)

    def path_for(self, key: str) -> Path:
        return self.cache_dir / f"{_UNSAFE_KEY_CHARS.sub('-', key)}.json"

    def get(self, key: str) -> str | None:
        path = self.path_for(key)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def put(self, key: str, payload: str) -> None:
        write_text_atomic(self.path_for(key), payload)


@dataclass(frozen=True)
class QueryKey:
    """
    Identity of an upstream query.

    Attributes:
        kind: Call kind, e.g. "transactions" or "category_groups"
        scope: Account scope, e.g. the budget id, plus any query arguments
    """

    kind: str
    scope: str

    def cache_key(self, period: FinancialDate) -> str:
        """Period-scoped key: the same query on another day is a different key."""
        return f"{self.kind}_{self.scope}_{period.to_iso_string()}"


class ResponseCache:
    """
    Read-through cache of JSON-serializable upstream responses.

    For a fixed QueryKey and calendar day, get_or_fetch invokes the fetch
    function at most once (unless the backing store is cleared) and every call
    returns the same decoded payload.
    """

    def __init__(self, store: CacheStore, clock: Callable[[], FinancialDate] = FinancialDate.today):
        self.store = store
        self.clock = clock

    def get_or_fetch(self, query_key: QueryKey, fetch_fn: Callable[[], Any]) -> Any:
        """
        Return the cached payload for query_key today, fetching on a miss.

        Args:
            query_key: Identity of the query
            fetch_fn: Zero-argument upstream call returning JSON-serializable data

        Returns:
            Decoded payload

        Raises:
            Whatever fetch_fn raises; cache errors are never raised.
        """
        key = query_key.cache_key(self.clock())

        cached = self._read(key)
        if cached is not _MISS:
            logger.info(f"Reading {query_key.kind} from cache ({key})")
            return cached

        logger.info(f"No cache found for {query_key.kind}, fetching ({key})")
        payload = json.dumps(fetch_fn(), sort_keys=True)

        try:
            self.store.put(key, payload)
        except Exception as e:
            logger.warning(f"Failed to write cache entry {key}: {e}")

        return json.loads(payload)

    def _read(self, key: str) -> Any:
        try:
            raw = self.store.get(key)
        except Exception as e:
            logger.warning(f"Failed to read cache entry {key}: {e}")
            return _MISS

        if raw is None:
            return _MISS

        try:
            return json.loads(raw)
        except ValueError as e:
            logger.warning(f"Ignoring corrupt cache entry {key}: {e}")
            return _MISS
