import threading
from concurrent.futures import ThreadPoolExecutor

import pytest
from hypothesis import given, strategies as st

from zkit.codec import encode
from zkit.errors import ErrorCode, ZkitError
from zkit.ledger import MAX_ID, LedgerStore
from zkit.tests import configure_test_logging

configure_test_logging()


def test_ids_start_at_one_and_increase():
    store = LedgerStore()
    assert store.last_id == 0
    assert store.insert(encode(b"ABC")) == 1
    assert store.insert(encode(b"\x01")) == 2
    assert store.insert(encode(b"")) == 3
    assert store.ids() == [1, 2, 3]
    assert len(store) == 3
    assert 2 in store and 4 not in store


def test_get_returns_decoded_bytes_or_none():
    store = LedgerStore()
    entry_id = store.insert(encode(b"hello"))
    assert store.get(entry_id) == b"hello"
    assert store.get(entry_id + 1) is None
    assert store.get(0) is None
    entry = store.entry(entry_id)
    assert entry is not None and entry.id == entry_id and len(entry.record) == 5


@given(st.lists(st.binary(max_size=32), max_size=20))
def test_every_insert_retrievable(records):
    store = LedgerStore()
    ids = [store.insert(encode(r)) for r in records]
    assert ids == list(range(1, len(records) + 1))
    for entry_id, r in zip(ids, records):
        assert store.get(entry_id) == r


@pytest.mark.parametrize("workers", [4, 16])
def test_concurrent_inserts_get_distinct_gapless_ids(workers):
    store = LedgerStore()
    n = 400

    def job(i: int) -> int:
        return store.insert(encode(bytes([i % 256])))

    with ThreadPoolExecutor(max_workers=workers) as pool:
        ids = list(pool.map(job, range(n)))

    assert sorted(ids) == list(range(1, n + 1))
    assert store.last_id == n
    # every id maps to the record its inserter wrote
    for i, entry_id in enumerate(ids):
        assert store.get(entry_id) == bytes([i % 256])


def test_concurrent_readers_and_writers():
    store = LedgerStore()
    seen = []
    errors = []

    def writer():
        for i in range(100):
            store.insert(encode(bytes([i])))

    def reader():
        try:
            for _ in range(200):
                last = store.last_id
                if last:
                    seen.append(store.get(last) is not None)
        except Exception as e:  # pragma: no cover
            errors.append(e)

    threads = [threading.Thread(target=writer) for _ in range(3)] + [threading.Thread(target=reader) for _ in range(3)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert not errors
    assert all(seen)
    assert store.ids() == list(range(1, 301))


def test_exhausted_id_space_is_an_error():
    store = LedgerStore()
    store._counter = MAX_ID
    with pytest.raises(ZkitError) as ei:
        store.insert(encode(b"x"))
    assert ei.value.code == ErrorCode.LEDGER_FULL
    assert len(store) == 0
