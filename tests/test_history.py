# tests/test_history.py
import threading
from datetime import datetime, timezone

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from imageprocessor.errors import InvalidHistorySize, InvalidStatusFilter
from imageprocessor.history import HistoryStore
from imageprocessor.models import HistoryRecord, ProcessingOutcome

OK = ProcessingOutcome.PROCESSED_SUCCESSFULLY
FAILED = ProcessingOutcome.FAILED_TO_PROCESS


def _record(name: str, outcome: ProcessingOutcome = OK) -> HistoryRecord:
    return HistoryRecord(name, outcome, datetime.now(timezone.utc))


def test_default_capacity():
    assert HistoryStore().get_capacity() == 10


def test_query_all_and_filtered():
    store = HistoryStore(10)
    a, b, c = _record("a.jpg", OK), _record("b.png", FAILED), _record("c.jpg", OK)
    for r in (a, b, c):
        store.append(r)

    assert store.query() == [a, b, c]
    assert store.query(OK) == [a, c]
    assert store.query("processed_successfully") == [a, c]
    assert store.query("FAILED_TO_PROCESS") == [b]
    assert store.query("") == [a, b, c]
    assert store.query(ProcessingOutcome.IMAGE_REWRITE_ERROR) == []


def test_oldest_record_evicted():
    store = HistoryStore(2)
    a, b, c = _record("a"), _record("b"), _record("c")
    for r in (a, b, c):
        store.append(r)
    assert store.query() == [b, c]
    assert len(store) == 2


@pytest.mark.parametrize("status", ["bogus", "Processed Successfully", 3])
def test_unknown_filter(status):
    store = HistoryStore()
    with pytest.raises(InvalidStatusFilter):
        store.query(status)


def test_query_returns_a_copy():
    store = HistoryStore()
    store.append(_record("a"))
    store.query().clear()
    assert len(store) == 1


def test_shrinking_evicts_from_front_growing_keeps():
    store = HistoryStore(5)
    records = [_record(str(i)) for i in range(5)]
    for r in records:
        store.append(r)

    store.set_capacity(2)
    assert store.query() == records[3:]
    store.set_capacity(20)
    assert store.capacity == 20
    assert store.query() == records[3:]


@pytest.mark.parametrize("size", [0, -1, -100, True, 2.5])
def test_invalid_capacity_leaves_state_unchanged(size):
    store = HistoryStore(3)
    store.append(_record("a"))
    with pytest.raises(InvalidHistorySize):
        store.set_capacity(size)
    assert store.get_capacity() == 3
    assert [r.filename for r in store.query()] == ["a"]


def test_invalid_initial_capacity():
    with pytest.raises(InvalidHistorySize):
        HistoryStore(0)


_ops = st.lists(
    st.one_of(
        st.tuples(st.just("append"), st.sampled_from(list(ProcessingOutcome))),
        st.tuples(st.just("resize"), st.integers(min_value=-2, max_value=6)),
    ),
    max_size=60,
)


@settings(max_examples=200, deadline=None)
@given(initial=st.integers(min_value=1, max_value=6), ops=_ops)
def test_never_exceeds_capacity(initial, ops):
    store = HistoryStore(initial)
    capacity = initial
    expected: list[HistoryRecord] = []

    for i, (op, arg) in enumerate(ops):
        if op == "append":
            record = _record(f"f{i}", arg)
            store.append(record)
            expected = (expected + [record])[-capacity:]
        elif arg <= 0:
            with pytest.raises(InvalidHistorySize):
                store.set_capacity(arg)
        else:
            store.set_capacity(arg)
            capacity = arg
            expected = expected[-capacity:]

        assert len(store) <= store.get_capacity() == capacity
        assert store.query() == expected


def test_concurrent_appends_and_resizes():
    store = HistoryStore(50)
    stop = threading.Event()
    violations = []

    def writer(n):
        for i in range(300):
            store.append(_record(f"{n}-{i}"))
            # capacity may change between calls, so compare with the largest size used
            if len(store.query()) > 50:
                violations.append((n, i))

    def resizer():
        sizes = [5, 50, 1, 20]
        i = 0
        while not stop.is_set():
            store.set_capacity(sizes[i % len(sizes)])
            i += 1

    threads = [threading.Thread(target=writer, args=(n,)) for n in range(8)]
    r = threading.Thread(target=resizer)
    r.start()
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    stop.set()
    r.join()
    assert not violations

    store.set_capacity(50)
    for n in range(8):
        store.append(_record(f"final-{n}"))
    assert len(store) <= 50
    assert [rec.filename for rec in store.query()][-8:] == [f"final-{n}" for n in range(8)]
