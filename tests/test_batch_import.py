"""Tests for the sequential batch importer"""
import asyncio

from conftest import FakeStore
from src.prospect_tool.schemas.prospect import CompanyProspect
from src.prospect_tool.services.batch_import import (
    ALL_DUPLICATES_MESSAGE,
    CancellationToken,
    import_prospects,
    select_working_set,
)


def _records(count):
    return [CompanyProspect(created_by=1, company_name=f"Company {i}") for i in range(count)]


def test_skipping_duplicates_shrinks_the_working_set():
    records = _records(10)
    store = FakeStore()

    result = asyncio.run(import_prospects(records, {0, 3, 5}, True, store))

    assert sum(store.batch_sizes) == 7
    assert result.success == 7
    assert result.skipped == 3
    assert [r.company_name for r in store.batches[0]][:3] == ["Company 1", "Company 2", "Company 4"]


def test_duplicates_are_imported_when_not_skipped():
    records = _records(10)
    store = FakeStore()

    result = asyncio.run(import_prospects(records, {0, 3, 5}, False, store))

    assert result.success == 10
    assert result.skipped == 0
    assert select_working_set(records, {0}, False) == records


def test_batches_are_partitioned_in_order():
    store = FakeStore()

    asyncio.run(import_prospects(_records(120), set(), True, store, batch_size=50))

    assert store.batch_sizes == [50, 50, 20]
    assert store.batches[2][0].company_name == "Company 100"


def test_failed_batch_does_not_abort_the_run():
    store = FakeStore(failing_batches=[2])

    result = asyncio.run(import_prospects(_records(120), set(), True, store))

    assert result.success == 70
    assert result.failed == 50
    assert result.skipped == 0
    assert result.errors == ["Batch 2: insert failed: connection reset"]
    assert not result.all_failed


def test_every_batch_failing_is_reported_as_all_failed():
    store = FakeStore(failing_batches=[1, 2])

    result = asyncio.run(import_prospects(_records(60), set(), True, store))

    assert result.success == 0
    assert result.failed == 60
    assert len(result.errors) == 2
    assert result.all_failed


def test_all_duplicates_short_circuits():
    store = FakeStore()
    changed = []

    result = asyncio.run(
        import_prospects(_records(4), {0, 1, 2, 3}, True, store, on_data_changed=lambda: changed.append(True))
    )

    assert store.batches == []
    assert result.success == 0
    assert result.failed == 0
    assert result.skipped == 4
    assert result.errors == [ALL_DUPLICATES_MESSAGE]
    assert changed == []


def test_progress_rises_to_100():
    progress = []

    asyncio.run(import_prospects(_records(120), set(), True, FakeStore(), on_progress=progress.append))

    assert progress == [42, 83, 100]


def test_cancellation_is_checked_between_batches():
    store = FakeStore()
    token = CancellationToken()

    def cancel_after_first(percent):
        token.cancel()

    result = asyncio.run(
        import_prospects(_records(120), set(), True, store, on_progress=cancel_after_first, cancel_token=token)
    )

    assert store.batch_sizes == [50]
    assert result.cancelled
    assert result.success == 50
    assert result.errors == ["Import cancelled after batch 1: 70 records not imported"]


def test_data_changed_fires_once_after_attempted_batches():
    changed = []

    asyncio.run(
        import_prospects(_records(120), set(), True, FakeStore(), on_data_changed=lambda: changed.append(True))
    )

    assert changed == [True]
