from __future__ import annotations

import itertools

from diskage.store import AggregationStore


def test_accumulate_creates_and_sums() -> None:
    store = AggregationStore()
    store.accumulate("/r/a", 1, 100, is_stale=False)
    store.accumulate("/r/a", 1, 50, is_stale=True)

    group = store.find("/r/a")
    assert group is not None
    assert group.total_bytes == 150
    assert group.stale_bytes == 50
    assert len(store) == 1


def test_level_is_fixed_by_first_insert() -> None:
    store = AggregationStore()
    store.accumulate("/r/a", 1, 10, is_stale=False)
    store.accumulate("/r/a", 3, 10, is_stale=False)
    assert store.find("/r/a").level == 1


def test_totals_do_not_depend_on_order() -> None:
    entries = [("/r/a", 1, 5, True), ("/r/b", 1, 7, False), ("/r/a", 1, 11, False), ("/r/b", 1, 3, True)]
    results = set()
    for perm in itertools.permutations(entries):
        store = AggregationStore()
        for key, level, size, stale in perm:
            store.accumulate(key, level, size, stale)
        results.add(tuple((g.key, g.total_bytes, g.stale_bytes) for g in store.iter_sorted()))
    assert results == {(("/r/a", 16, 5), ("/r/b", 10, 3))}


def test_iter_sorted_is_bytewise_order() -> None:
    store = AggregationStore()
    for key in ["/r/b", "/r/B", "/r/a-1", "/r/a", "/r/é", "/r/z"]:
        store.accumulate(key, 1, 1, is_stale=False)
    assert [g.key for g in store.iter_sorted()] == ["/r/B", "/r/a", "/r/a-1", "/r/b", "/r/z", "/r/é"]


def test_remove_and_find() -> None:
    store = AggregationStore()
    store.accumulate("/r", 0, 1, is_stale=False)
    store.accumulate("/r/a", 1, 1, is_stale=False)

    removed = store.remove("/r")
    assert removed is not None and removed.key == "/r"
    assert store.find("/r") is None
    assert "/r" not in store
    assert store.remove("/r") is None
    assert [g.key for g in store.iter_sorted()] == ["/r/a"]


def test_copy_is_independent() -> None:
    store = AggregationStore()
    store.accumulate("/r/a", 1, 10, is_stale=True)

    other = store.copy()
    other.accumulate("/r/a", 1, 5, is_stale=False)
    other.remove("/r/a")

    assert store.find("/r/a").total_bytes == 10
    assert len(store) == 1
    assert store.total_bytes == 10
    assert store.stale_bytes == 10
