from __future__ import annotations

import threading

from src.models.product_record import ProductRecord
from src.services.record_store import RecordStore


def _records(*skus):
    return [ProductRecord(row_number=i, sku=s) for i, s in enumerate(skus, start=1)]


def test_commit_replaces_records():
    store = RecordStore()
    first = store.begin_load()
    assert store.commit(first, _records("a", "b"))
    assert [r.sku for r in store.records] == ["a", "b"]
    second = store.begin_load()
    assert store.commit(second, _records("c"))
    assert [r.sku for r in store.records] == ["c"]
    assert store.committed_load_id == second


def test_last_started_load_wins_when_older_finishes_late():
    store = RecordStore()
    old = store.begin_load()
    new = store.begin_load()
    assert store.commit(new, _records("new"))
    assert store.is_stale(old)
    assert store.commit(old, _records("old")) is False
    assert [r.sku for r in store.records] == ["new"]


def test_records_are_immutable_snapshot():
    store = RecordStore()
    source = _records("a")
    store.commit(store.begin_load(), source)
    source.append(ProductRecord(row_number=9, sku="z"))
    assert len(store) == 1
    assert isinstance(store.records, tuple)


def test_clear():
    store = RecordStore()
    store.commit(store.begin_load(), _records("a"))
    store.clear()
    assert len(store) == 0


def test_load_ids_unique_across_threads():
    store = RecordStore()
    ids: list[int] = []
    lock = threading.Lock()

    def worker():
        for _ in range(50):
            lid = store.begin_load()
            with lock:
                ids.append(lid)

    threads = [threading.Thread(target=worker) for _ in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert len(set(ids)) == 200
