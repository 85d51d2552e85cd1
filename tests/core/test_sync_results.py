"""Sync Results: report bookkeeping for batch publishing."""

from catalog_sync.core.domain_types import PublishOutcome
from catalog_sync.core.sync_results import ItemFailure, ReconciliationReport, SyncReport


def test_record_splits_published_and_skipped():
    report = SyncReport()
    report.record("a", PublishOutcome.CREATED)
    report.record("b", PublishOutcome.UPDATED)
    report.record("c", PublishOutcome.SKIPPED)
    report.failed.append(ItemFailure("d", RuntimeError("boom")))

    assert report.total == 4
    assert report.error_count == 1
    assert not report.fully_synchronized
    summary = report.summary()
    assert summary["created"] == 1
    assert summary["updated"] == 1
    assert summary["skipped"] == 1
    assert summary["failed"] == [{"publication_id": "d", "reason": "boom"}]


def test_empty_report_is_fully_synchronized():
    assert SyncReport().fully_synchronized
    assert ReconciliationReport().succeeded


def test_failure_reason_falls_back_to_type_name():
    assert ItemFailure("x", KeyError()).reason == "KeyError"
