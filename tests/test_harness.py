"""BenchmarkHarness task list, failure isolation and memory runs."""

import logging

from collections_bench import (
    DEQUE,
    DYNAMIC_ARRAY,
    HASH_SET,
    LINKED_LIST,
    PRIORITY_HEAP,
    BenchmarkConfig,
    BenchmarkHarness,
    ContainerTypeDescriptor,
    DynamicArray,
)
from collections_bench import harness as harness_module

EXPECTED_TASKS_200 = [
    "add 200 elements",
    "remove 20 elements by value",
    "add_all 200 times 1000 elements",
    "contains 200 times",
    "remove_all 10 times 1000 elements",
    "iterator 200 times",
    "contains_all 200 times",
    "to_array 200 times",
    "clear",
    "retain_all 10 times",
]


def test_task_list_order_and_loop_counts(harness):
    specs = harness.task_specs()
    assert [spec.task_name for spec in specs] == EXPECTED_TASKS_200
    assert [spec.loop_count for spec in specs] == [200, 20, 200, 200, 10, 200, 200, 200, 1, 10]


def test_loop_counts_are_capped_for_large_populations():
    harness = BenchmarkHarness(BenchmarkConfig(populate_size=100_000))
    counts = {spec.task_name: spec.loop_count for spec in harness.task_specs()}

    assert counts["remove 10000 elements by value"] == 10_000
    assert counts["add_all 1000 times 1000 elements"] == 1000
    assert counts["contains 1000 times"] == 1000
    assert counts["contains_all 5000 times"] == 5000
    assert counts["to_array 5000 times"] == 5000
    assert counts["retain_all 10 times"] == 10


def test_empty_population_still_runs_one_removal():
    config = BenchmarkConfig(populate_size=0, timeout_millis=1000, gc_passes=1, gc_pause_seconds=0.0)
    harness = BenchmarkHarness(config)

    assert harness.run(DYNAMIC_ARRAY)
    result = harness.store.trial("remove 1 elements by value", DYNAMIC_ARRAY)
    assert result.loop_count == 1
    assert harness.store.trial("add 0 elements", DYNAMIC_ARRAY).elapsed_ns == 0


def test_run_records_every_task(harness, store):
    assert harness.run(DYNAMIC_ARRAY)

    assert store.task_names() == EXPECTED_TASKS_200
    for task in EXPECTED_TASKS_200:
        result = store.trial(task, DYNAMIC_ARRAY)
        assert result is not None
        assert result.completed_loops == result.loop_count
        assert not result.timed_out


def test_run_all_covers_every_builtin(harness, factory, store):
    harness.run_all(factory.descriptors)

    timings = store.timings()
    assert set(timings) == set(EXPECTED_TASKS_200)
    for by_descriptor in timings.values():
        assert set(by_descriptor) == set(factory.descriptors)


def test_working_instance_is_released_after_run(harness):
    harness.run(DEQUE)
    assert harness.runner.instance is None


def test_heavy_collection_runs_after_every_implementation(harness, needs_capacity, monkeypatch):
    cycles = []
    monkeypatch.setattr(harness_module, "heavy_gc", lambda passes, pause: cycles.append((passes, pause)))

    assert harness.run(DEQUE)
    assert not harness.run(needs_capacity)

    assert cycles == [(1, 0.0), (1, 0.0)]
    assert harness.runner.instance is None


def test_unconstructible_implementation_is_logged_and_skipped(harness, store, needs_capacity, caplog):
    with caplog.at_level(logging.ERROR, logger="collections_bench.harness"):
        harness.run_all([needs_capacity, HASH_SET])

    assert "Failed running benchmark on needs_capacity" in caplog.text
    assert store.trial("add 200 elements", HASH_SET) is not None
    assert store.trial("add 200 elements", needs_capacity) is None


def test_implementation_without_capabilities_is_skipped(harness, factory, store, caplog):
    bare = ContainerTypeDescriptor("bare", frozenset())
    factory.register(bare, DynamicArray)

    with caplog.at_level(logging.WARNING, logger="collections_bench.harness"):
        assert not harness.run(bare)

    assert "Skipping bare" in caplog.text
    assert store.trials() == []


def test_timeouts_are_recorded_not_raised(factory, store):
    config = BenchmarkConfig(populate_size=20_000, timeout_millis=1, gc_passes=1, gc_pause_seconds=0.0)
    harness = BenchmarkHarness(config, factory=factory, store=store)

    assert harness.run(LINKED_LIST)
    assert any(store.is_timeout(task, LINKED_LIST) for task in store.task_names())
    for result in store.trials():
        if result.timed_out:
            assert result.elapsed_ns == config.timeout_ns
            assert result.completed_loops < result.loop_count


def test_memory_bench_measures_and_skips_failures(harness, store, needs_capacity, caplog):
    with caplog.at_level(logging.ERROR, logger="collections_bench.harness"):
        results = harness.run_memory_bench([DYNAMIC_ARRAY, needs_capacity, PRIORITY_HEAP])

    assert [result.descriptor for result in results] == [DYNAMIC_ARRAY, PRIORITY_HEAP]
    assert set(store.memory()) == {DYNAMIC_ARRAY, PRIORITY_HEAP}
    assert "Failed running memory benchmark on needs_capacity" in caplog.text
