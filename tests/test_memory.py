"""MemoryProfiler footprint measurements and the heavy collection cycle."""

import tracemalloc

import pytest

from collections_bench import (
    DYNAMIC_ARRAY,
    LINKED_LIST,
    PRIORITY_HEAP,
    LinkedList,
    MemoryProfiler,
    build_default_context,
    heavy_gc,
    measure_object_size,
)
from collections_bench import memory as memory_module


def make_profiler(factory, populate_size, store=None):
    return MemoryProfiler(
        factory,
        build_default_context(populate_size),
        batch_size=20,
        gc_passes=1,
        gc_pause_seconds=0.0,
        store=store,
    )


def test_empty_priority_heap_still_reports_non_negative_size(factory):
    profiler = make_profiler(factory, populate_size=0)
    result = profiler.measure(PRIORITY_HEAP, batch_size=100)

    assert result.average_bytes >= 0
    assert result.batch_size == 100
    assert result.descriptor == PRIORITY_HEAP


def test_repeated_measurements_stay_within_twice_of_each_other(factory):
    profiler = make_profiler(factory, populate_size=1000)
    first = profiler.measure(DYNAMIC_ARRAY)
    second = profiler.measure(DYNAMIC_ARRAY)

    assert first.average_bytes > 0
    assert second.average_bytes > 0
    assert 0.5 <= first.average_bytes / second.average_bytes <= 2.0


def test_populated_instances_cost_more_than_empty_ones(factory):
    empty = make_profiler(factory, populate_size=0).measure(LINKED_LIST)
    populated = make_profiler(factory, populate_size=500).measure(LINKED_LIST)

    assert populated.average_bytes > empty.average_bytes
    assert populated.structural_bytes > empty.structural_bytes


def test_result_is_recorded_in_store(factory, store):
    profiler = make_profiler(factory, populate_size=10, store=store)
    result = profiler.measure(DYNAMIC_ARRAY)

    assert store.memory() == {DYNAMIC_ARRAY: result.average_bytes}


def test_tracing_is_stopped_when_profiler_started_it(factory):
    assert not tracemalloc.is_tracing()
    make_profiler(factory, populate_size=10).measure(DYNAMIC_ARRAY)
    assert not tracemalloc.is_tracing()


def test_tracing_started_by_caller_is_left_running(factory):
    tracemalloc.start()
    try:
        make_profiler(factory, populate_size=10).measure(DYNAMIC_ARRAY)
        assert tracemalloc.is_tracing()
    finally:
        tracemalloc.stop()


def test_batch_size_must_be_positive(factory):
    with pytest.raises(ValueError):
        make_profiler(factory, populate_size=10).measure(DYNAMIC_ARRAY, batch_size=0)


def test_heavy_gc_runs_every_pass(monkeypatch):
    calls = []
    sleeps = []
    monkeypatch.setattr(memory_module.gc, "collect", lambda: calls.append(1) or 0)
    monkeypatch.setattr(memory_module.time, "sleep", sleeps.append)

    heavy_gc(passes=5, pause_seconds=0.2)

    assert len(calls) == 5
    assert sleeps == [0.2] * 4


def test_measure_object_size_walks_long_linked_lists():
    linked = LinkedList()
    linked.add_all(str(i) for i in range(20_000))
    short = LinkedList()
    short.add("0")

    assert measure_object_size(linked) > measure_object_size(short) * 100


def test_measure_object_size_counts_shared_objects_once():
    shared = ["x" * 100]
    assert measure_object_size([shared, shared]) < measure_object_size([shared, ["x" * 100 + "y"]])
