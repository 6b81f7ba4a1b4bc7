#!/usr/bin/env python3
"""Tests for the sync orchestrator. Everything here runs in memory."""

import logging
from decimal import Decimal

import pytest

from splitsync.core.dates import FinancialDate
from splitsync.sync.ledger import InMemorySubmissionLedger
from splitsync.sync.materializer import ExpenseMaterializer
from splitsync.sync.orchestrator import CommitPolicy, SyncOrchestrator
from splitsync.sync.watermark import InMemoryWatermarkStore, WatermarkCommitError
from tests.fixtures.synthetic_data import (
    FUEL_ID,
    GROCERIES_ID,
    SYNTHETIC_CATEGORY_MAP,
    FakeDestination,
    FakeSource,
    make_transaction,
)

TODAY = FinancialDate.from_string("2024-09-01")


def d(value: str) -> FinancialDate:
    return FinancialDate.from_string(value)


def build(
    transactions,
    watermark=None,
    dry_run=False,
    destination=None,
    commit_policy=CommitPolicy.BEST_EFFORT,
    ledger=None,
    watermark_store=None,
):
    source = FakeSource(transactions)
    destination = destination or FakeDestination()
    store = watermark_store or InMemoryWatermarkStore(watermark)
    orchestrator = SyncOrchestrator(
        source=source,
        destination=destination,
        watermark_store=store,
        materializer=ExpenseMaterializer(SYNTHETIC_CATEGORY_MAP, group_id=42),
        target_group_name="Shared",
        memo_marker="splitwise",
        dry_run=dry_run,
        commit_policy=commit_policy,
        ledger=ledger,
        clock=lambda: TODAY,
    )
    return orchestrator, source, destination, store


class FailingWatermarkStore(InMemoryWatermarkStore):
    def commit(self, date):
        raise WatermarkCommitError("disk full")


class TestCommitMode:
    def test_submits_selected_and_commits_today(self):
        txs = [
            make_transaction(tx_id="t1", amount=-4250),
            make_transaction(tx_id="t2", amount=4250, memo="splitwise refund"),
            make_transaction(tx_id="t3", category_id=FUEL_ID, category_name="Fuel", memo="gas"),
        ]
        orchestrator, _, destination, store = build(txs, watermark=d("2024-08-01"))

        result = orchestrator.run()

        assert [call["description"] for call in destination.calls] == ["Groceries"]
        call = destination.calls[0]
        assert call["cost"] == Decimal("4.25")
        assert call["group_id"] == 42
        assert call["extra_params"]["category_id"] == 12
        assert call["extra_params"]["details"].startswith("ID: t1\n")
        assert result.fetched == 3
        assert result.selected == 1
        assert store.commits == [TODAY]
        assert result.committed_watermark == TODAY

    def test_absent_watermark_starts_from_earliest(self):
        txs = [make_transaction(tx_id="old", date="1999-01-01"), make_transaction(tx_id="new")]
        orchestrator, source, destination, _ = build(txs, watermark=None)

        result = orchestrator.run()

        assert source.since_calls == [FinancialDate.earliest()]
        assert result.start_date == FinancialDate.earliest()
        assert len(destination.calls) == 2

    def test_submission_failure_does_not_halt_run(self):
        txs = [make_transaction(tx_id=f"t{i}") for i in range(3)]
        orchestrator, _, destination, store = build(txs, destination=FakeDestination(fail_for={"t1"}))

        result = orchestrator.run()

        assert len(destination.calls) == 2
        assert [tx.id for tx in result.failed] == ["t1"]
        assert [r.transaction_id for r in result.submitted] == ["t0", "t2"]
        # Best effort: watermark still advances
        assert store.commits == [TODAY]

    def test_missing_category_name_is_skipped(self):
        txs = [
            make_transaction(tx_id="nameless", category_id=None, category_name=None, memo="splitwise"),
            make_transaction(tx_id="named"),
        ]
        orchestrator, _, destination, store = build(txs)

        result = orchestrator.run()

        assert result.skipped == ["nameless"]
        assert len(destination.calls) == 1
        assert store.commits == [TODAY]

    def test_watermark_never_moves_backwards(self):
        orchestrator, _, _, store = build([], watermark=d("2024-12-31"))
        orchestrator.run()
        assert store.commits == [d("2024-12-31")]

    def test_watermark_commit_failure_propagates(self):
        orchestrator, _, _, _ = build([make_transaction()], watermark_store=FailingWatermarkStore())
        with pytest.raises(WatermarkCommitError):
            orchestrator.run()

    def test_source_failure_propagates_without_commit(self):
        orchestrator, source, destination, store = build([make_transaction()])

        def broken(since):
            raise RuntimeError("YNAB down")

        source.list_transactions_since = broken
        with pytest.raises(RuntimeError):
            orchestrator.run()
        assert store.commits == []
        assert destination.calls == []


class TestAtLeastOncePolicy:
    def test_holds_watermark_at_earliest_failed_date(self):
        txs = [
            make_transaction(tx_id="a", date="2024-08-20"),
            make_transaction(tx_id="b", date="2024-08-10"),
            make_transaction(tx_id="c", date="2024-08-25"),
        ]
        orchestrator, _, _, store = build(
            txs,
            watermark=d("2024-08-01"),
            destination=FakeDestination(fail_for={"b", "c"}),
            commit_policy=CommitPolicy.AT_LEAST_ONCE,
        )

        orchestrator.run()

        assert store.commits == [d("2024-08-10")]

    def test_without_failures_advances_to_today(self):
        orchestrator, _, _, store = build(
            [make_transaction()], watermark=d("2024-08-01"), commit_policy=CommitPolicy.AT_LEAST_ONCE
        )
        orchestrator.run()
        assert store.commits == [TODAY]

    def test_retry_with_ledger_submits_only_failed_items(self):
        txs = [make_transaction(tx_id="ok", date="2024-08-20"), make_transaction(tx_id="flaky", date="2024-08-15")]
        ledger = InMemorySubmissionLedger()
        store = InMemoryWatermarkStore(d("2024-08-01"))

        first_destination = FakeDestination(fail_for={"flaky"})
        build(
            txs,
            destination=first_destination,
            commit_policy=CommitPolicy.AT_LEAST_ONCE,
            ledger=ledger,
            watermark_store=store,
        )[0].run()
        assert store.read() == d("2024-08-15")

        second_destination = FakeDestination()
        result = build(
            txs,
            destination=second_destination,
            commit_policy=CommitPolicy.AT_LEAST_ONCE,
            ledger=ledger,
            watermark_store=store,
        )[0].run()

        assert [call["extra_params"]["details"].splitlines()[0] for call in second_destination.calls] == [
            "ID: flaky"
        ]
        assert result.duplicates == ["ok"]
        assert store.read() == TODAY


class TestLedger:
    def test_overlapping_window_does_not_resubmit(self):
        txs = [make_transaction(tx_id="t1", date="2024-09-01")]
        ledger = InMemorySubmissionLedger()
        store = InMemoryWatermarkStore(d("2024-08-01"))

        build(txs, ledger=ledger, watermark_store=store)[0].run()
        destination = FakeDestination()
        result = build(txs, ledger=ledger, watermark_store=store, destination=destination)[0].run()

        assert destination.calls == []
        assert result.duplicates == ["t1"]

    def test_failed_submission_is_not_recorded(self):
        ledger = InMemorySubmissionLedger()
        build([make_transaction(tx_id="t1")], destination=FakeDestination(fail_for={"t1"}), ledger=ledger)[0].run()
        assert not ledger.contains("t1")


class TestDryRun:
    def test_no_destination_calls_and_watermark_unchanged(self):
        ledger = InMemorySubmissionLedger()
        orchestrator, _, destination, store = build(
            [make_transaction(tx_id="t1")], watermark=d("2024-08-01"), dry_run=True, ledger=ledger
        )

        result = orchestrator.run()

        assert destination.calls == []
        assert store.commits == []
        assert store.read() == d("2024-08-01")
        assert result.committed_watermark is None
        assert [r.transaction_id for r in result.planned] == ["t1"]
        assert not ledger.contains("t1")

    def test_consecutive_dry_runs_are_identical(self, caplog):
        txs = [make_transaction(tx_id="t1"), make_transaction(tx_id="t2", amount=-1000, memo="splitwise")]
        orchestrator, _, _, store = build(txs, watermark=d("2024-08-01"), dry_run=True)

        with caplog.at_level(logging.INFO, logger="splitsync"):
            first = orchestrator.run()
        first_log = [record.getMessage() for record in caplog.records]
        caplog.clear()

        with caplog.at_level(logging.INFO, logger="splitsync"):
            second = orchestrator.run()
        second_log = [record.getMessage() for record in caplog.records]

        assert first_log == second_log
        assert any("Will create expense with name: Groceries" in line for line in first_log)
        assert first.planned == second.planned
        assert store.read() == d("2024-08-01")


class TestWatermarkWindow:
    def test_earlier_watermark_is_a_superset(self):
        txs = [
            make_transaction(tx_id="before", date="2024-07-31"),
            make_transaction(tx_id="between", date="2024-08-10"),
            make_transaction(tx_id="on-d2", date="2024-08-15"),
            make_transaction(tx_id="after", date="2024-08-20"),
        ]

        def planned_ids(watermark):
            result = build(txs, watermark=watermark, dry_run=True)[0].run()
            return {request.transaction_id for request in result.planned}

        early = planned_ids(d("2024-08-01"))
        late = planned_ids(d("2024-08-15"))

        assert late <= early
        assert "between" in early - late
        assert "before" not in early
