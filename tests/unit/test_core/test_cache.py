#!/usr/bin/env python3
"""Tests for the once-per-day response cache."""

import pytest

from splitsync.core.cache import InMemoryCacheStore, QueryKey, ResponseCache
from splitsync.core.dates import FinancialDate


class CountingFetch:
    def __init__(self, payload):
        self.payload = payload
        self.calls = 0

    def __call__(self):
        self.calls += 1
        return self.payload


class BrokenStore:
    """Store whose every operation fails."""

    def get(self, key):
        raise OSError("disk gone")

    def put(self, key, payload):
        raise OSError("disk full")


class Clock:
    def __init__(self, day: str):
        self.current = FinancialDate.from_string(day)

    def __call__(self):
        return self.current


QUERY = QueryKey(kind="transactions", scope="budget-123")


@pytest.mark.cache
class TestResponseCache:
    def setup_method(self):
        self.store = InMemoryCacheStore()
        self.clock = Clock("2024-09-01")
        self.cache = ResponseCache(self.store, clock=self.clock)

    def test_same_day_fetches_once_and_returns_identical_payloads(self):
        fetch = CountingFetch([{"id": "t1", "amount": -4250}])

        first = self.cache.get_or_fetch(QUERY, fetch)
        second = self.cache.get_or_fetch(QUERY, fetch)

        assert fetch.calls == 1
        assert first == second == [{"id": "t1", "amount": -4250}]

    def test_key_includes_kind_scope_and_day(self):
        self.cache.get_or_fetch(QUERY, CountingFetch({"a": 1}))
        assert list(self.store.entries) == ["transactions_budget-123_2024-09-01"]

    def test_new_day_is_a_miss(self):
        fetch = CountingFetch({"a": 1})
        self.cache.get_or_fetch(QUERY, fetch)

        self.clock.current = FinancialDate.from_string("2024-09-02")
        self.cache.get_or_fetch(QUERY, fetch)

        assert fetch.calls == 2
        assert len(self.store.entries) == 2

    def test_previous_day_entry_is_never_returned(self):
        self.store.put(QUERY.cache_key(FinancialDate.from_string("2024-08-31")), '{"stale": true}')

        result = self.cache.get_or_fetch(QUERY, CountingFetch({"fresh": True}))

        assert result == {"fresh": True}

    def test_different_query_identity_is_a_miss(self):
        fetch = CountingFetch({"a": 1})
        self.cache.get_or_fetch(QUERY, fetch)
        self.cache.get_or_fetch(QueryKey(kind="category_groups", scope="budget-123"), fetch)
        self.cache.get_or_fetch(QueryKey(kind="transactions", scope="other-budget"), fetch)

        assert fetch.calls == 3

    def test_corrupt_entry_is_treated_as_miss(self):
        self.store.put(QUERY.cache_key(self.clock()), "{not json")
        fetch = CountingFetch({"a": 1})

        assert self.cache.get_or_fetch(QUERY, fetch) == {"a": 1}
        assert fetch.calls == 1
        # Overwritten with the good payload
        assert self.cache.get_or_fetch(QUERY, fetch) == {"a": 1}
        assert fetch.calls == 1

    def test_cleared_store_refetches(self):
        fetch = CountingFetch({"a": 1})
        self.cache.get_or_fetch(QUERY, fetch)
        self.store.clear()
        self.cache.get_or_fetch(QUERY, fetch)

        assert fetch.calls == 2

    def test_cached_null_payload_is_a_hit(self):
        fetch = CountingFetch(None)
        assert self.cache.get_or_fetch(QUERY, fetch) is None
        assert self.cache.get_or_fetch(QUERY, fetch) is None
        assert fetch.calls == 1

    def test_store_failures_are_absorbed(self):
        cache = ResponseCache(BrokenStore(), clock=self.clock)
        fetch = CountingFetch({"a": 1})

        assert cache.get_or_fetch(QUERY, fetch) == {"a": 1}
        assert cache.get_or_fetch(QUERY, fetch) == {"a": 1}
        assert fetch.calls == 2

    def test_fetch_errors_propagate(self):
        def failing_fetch():
            raise RuntimeError("upstream down")

        with pytest.raises(RuntimeError):
            self.cache.get_or_fetch(QUERY, failing_fetch)
        assert self.store.entries == {}
