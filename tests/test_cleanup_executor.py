import threading

import pytest

from conftest import FakeStore
from credential_hygiene.services.cleanup_executor import (
    NO_URL,
    REASON_INCOMPLETE,
    REASON_NOT_GROUPED_NO_URL,
    REASON_NOT_GROUPED_UNPARSEABLE,
    REASON_SAME_ITEM,
    REASON_SINGLE,
    CleanupExecutor,
)


@pytest.fixture
def executor(logger):
    return CleanupExecutor(logger=logger)


@pytest.fixture
def entries(make_entry):
    return [
        make_entry(id="keep", name="Amazon", url="https://www.amazon.co.uk", username="bob", password="pw"),
        make_entry(id="dup", name="Amazon old", url="shop.amazon.co.uk", username="bob"),
        make_entry(id="empty", name="Empty", url="example.com"),
        make_entry(id="solo", name="Forum", url="forum.org", username="bob", password="pw"),
        make_entry(id="nourl", name="Wifi", password="pw"),
        make_entry(id="bad", name="Broken", url="https://", username="bob"),
    ]


def test_cleanup_deletes_redundant_and_incomplete(executor, entries):
    store = FakeStore([])
    report = executor.run_cleanup(entries, store.delete_credential)

    assert sorted(store.deleted) == ["dup", "empty"]
    deleted = {item.id: item for item in report.deleted_items}
    assert deleted["empty"].reason == REASON_INCOMPLETE
    assert deleted["dup"].reason == "Duplicate of Amazon"
    assert deleted["dup"].url == "shop.amazon.co.uk"
    assert report.deleted_count == 2
    assert report.failed_items == ()
    assert not report.cancelled

    kept = {item.id: item.reason for item in report.kept_items}
    assert kept == {
        "keep": "Best entry (score: 2)",
        "solo": REASON_SINGLE,
        "nourl": REASON_NOT_GROUPED_NO_URL,
        "bad": REASON_NOT_GROUPED_UNPARSEABLE,
    }
    nourl = next(item for item in report.kept_items if item.id == "nourl")
    assert nourl.url == NO_URL


def test_every_entry_is_accounted_for(executor, entries):
    report = executor.run_cleanup(entries, FakeStore([]).delete_credential)
    ids = [i.id for i in report.kept_items + report.deleted_items + report.failed_items]
    assert sorted(ids) == sorted(e.id for e in entries)


def test_cluster_summary_and_processed_urls(executor, entries):
    report = executor.run_cleanup(entries, lambda _id: True)
    (cluster,) = report.clusters_found
    assert cluster.service_identity == "amazon.co.uk"
    assert [m.name for m in cluster.members] == ["Amazon", "Amazon old"]
    assert cluster.members[1].username == "bob"
    assert report.processed_urls == (
        "https://www.amazon.co.uk",
        "shop.amazon.co.uk",
        "example.com",
        "forum.org",
        "https://",
    )


def test_failed_deletions_do_not_stop_the_run(executor, entries):
    store = FakeStore([], failing_ids={"dup"})
    report = executor.run_cleanup(entries, store.delete_credential)
    assert store.deleted == ["empty"]
    (failed,) = report.failed_items
    assert failed.id == "dup"
    assert failed.reason.startswith("Deletion failed (Duplicate of Amazon): RuntimeError")
    assert report.deleted_count == 1


def test_false_return_counts_as_failure(executor, entries):
    report = executor.run_cleanup(entries, lambda _id: False)
    assert report.deleted_items == ()
    assert len(report.failed_items) == 2
    assert all("store refused" in item.reason for item in report.failed_items)


def test_none_return_counts_as_success(executor, entries):
    removed = []
    report = executor.run_cleanup(entries, removed.append)
    assert sorted(removed) == ["dup", "empty"]
    assert report.deleted_count == 2


def test_progress_and_cancellation(executor, entries):
    cancel = threading.Event()
    calls = []

    def on_progress(current, total):
        calls.append((current, total))
        if current == 1:
            cancel.set()

    store = FakeStore([])
    report = executor.run_cleanup(
        entries, store.delete_credential, on_progress=on_progress, cancel_event=cancel
    )
    assert report.cancelled
    assert len(store.deleted) == 1
    assert calls[0] == (0, 2)
    assert calls[-1] == (2, 2)


def test_nothing_to_delete(executor, make_entry):
    calls = []
    entries = [make_entry(url="a.com", username="u", password="p")]
    report = executor.run_cleanup(
        entries, FakeStore([]).delete_credential, on_progress=lambda c, t: calls.append((c, t))
    )
    assert report.deleted_count == 0
    assert report.clusters_found == ()
    assert calls == [(0, 0)]


def test_shared_store_id_is_never_deleted_when_kept(executor, make_entry):
    first = make_entry(id="42", name="Amazon", url="amazon.com", username="bob", password="pw")
    again = make_entry(id="42", name="Amazon", url="www.amazon.com", username="bob", password="pw")
    deleted = []
    report = executor.run_cleanup([first, again], deleted.append)

    assert deleted == []
    assert report.deleted_items == ()
    reasons = [item.reason for item in report.kept_items]
    assert reasons == ["Best entry (score: 2)", f"{REASON_SAME_ITEM} Amazon"]
    assert {i.id for i in report.kept_items} & {i.id for i in report.deleted_items} == set()


def test_repeated_ids_are_deleted_once(executor, make_entry):
    entries = [
        make_entry(id="7", name="Empty", url="example.com"),
        make_entry(id="7", name="Empty", url="example.com"),
    ]
    store = FakeStore([])
    report = executor.run_cleanup(entries, store.delete_credential)
    assert store.deleted == ["7"]
    assert report.failed_items == ()
    assert report.deleted_count == 1
