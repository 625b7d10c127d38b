"""Runs the fixed task list and the memory benchmark across implementations."""

from __future__ import annotations

import logging
import time
from collections.abc import Iterable

from .config import BenchmarkConfig
from .containers import Container
from .context import build_default_context, build_probe_batch
from .factory import ContainerFactory
from .memory import MemoryProfiler, heavy_gc
from .models import Capability, ContainerTypeDescriptor, MemoryResult, TrialSpec
from .results import ResultStore
from .runner import TimedTrialRunner

logger = logging.getLogger(__name__)

BENCHMARKED_CAPABILITIES = frozenset({Capability.LIST, Capability.SET, Capability.QUEUE})


class BenchmarkHarness:
    """
    One benchmark run: a factory, a default context, a runner and a result store.

    Implementations run strictly one after another. Between implementations
    the working instance is dropped and a heavy collection cycle runs so one
    implementation's garbage does not skew the next one's numbers.
    """

    def __init__(
        self,
        config: BenchmarkConfig | None = None,
        factory: ContainerFactory | None = None,
        store: ResultStore | None = None,
    ) -> None:
        self.config = config or BenchmarkConfig()
        self.factory = factory or ContainerFactory.default()
        self.store = store if store is not None else ResultStore()
        self.context = build_default_context(self.config.populate_size)
        self.probe = build_probe_batch()
        self.runner = TimedTrialRunner(
            self.factory, self.context, self.config.timeout_millis, store=self.store
        )
        self.profiler = MemoryProfiler(
            self.factory,
            self.context,
            batch_size=self.config.memory_batch_size,
            gc_passes=self.config.gc_passes,
            gc_pause_seconds=self.config.gc_pause_seconds,
            store=self.store,
        )

    def task_specs(self) -> list[TrialSpec]:
        """The task list, in execution order. Each task's reset undoes the previous one."""
        n = self.config.populate_size
        probe = self.probe
        removals = max(1, n // 10)
        bulk = min(n, 1000)
        bulk_removals = min(n, 10)
        snapshots = min(n, 5000)

        return [
            TrialSpec(lambda c, i: c.add(str(i % 29)), n, f"add {n} elements"),
            TrialSpec(lambda c, i: c.remove(str(i)), removals, f"remove {removals} elements by value"),
            TrialSpec(
                lambda c, i: c.add_all(probe), bulk, f"add_all {bulk} times {len(probe)} elements"
            ),
            # int probe against str elements: never found, always a full scan
            TrialSpec(lambda c, i: c.contains(c.size() - i - 1), bulk, f"contains {bulk} times"),
            TrialSpec(
                lambda c, i: c.remove_all(probe),
                bulk_removals,
                f"remove_all {bulk_removals} times {len(probe)} elements",
            ),
            TrialSpec(lambda c, i: c.iterator(), n, f"iterator {n} times"),
            TrialSpec(lambda c, i: c.contains_all(probe), snapshots, f"contains_all {snapshots} times"),
            TrialSpec(lambda c, i: c.to_array(), snapshots, f"to_array {snapshots} times"),
            TrialSpec(lambda c, i: c.clear(), 1, "clear"),
            TrialSpec(lambda c, i: c.retain_all(probe), bulk_removals, f"retain_all {bulk_removals} times"),
        ]

    def run(self, descriptor: ContainerTypeDescriptor) -> bool:
        """
        Run every task against one implementation.

        Failures are logged with the implementation name and never propagate.

        Returns:
            True when the task list ran to completion.
        """
        start = time.perf_counter()
        instance: Container | None = None
        completed = False
        try:
            instance = self.factory.create(descriptor)
            logger.info(
                f"Performances of {descriptor.name} populated with "
                f"{self.config.populate_size} element(s)"
            )
            if not descriptor.capabilities & BENCHMARKED_CAPABILITIES:
                logger.warning(f"Skipping {descriptor.name}: no list, set or queue capability")
            else:
                for spec in self.task_specs():
                    self.runner.run_trial(instance, spec)
                    instance = self.runner.instance
                completed = True
                logger.info(
                    f"Benchmark of {descriptor.name} done in {time.perf_counter() - start:.3f}s"
                )
            instance.clear()
        except Exception:
            logger.exception(f"Failed running benchmark on {descriptor.name}")
        finally:
            instance = None
            self.runner.instance = None
            heavy_gc(self.config.gc_passes, self.config.gc_pause_seconds)
        return completed

    def run_all(self, descriptors: Iterable[ContainerTypeDescriptor]) -> ResultStore:
        """Benchmark each implementation in turn; a failing one is skipped."""
        for descriptor in descriptors:
            self.run(descriptor)
        return self.store

    def run_memory_bench(
        self, descriptors: Iterable[ContainerTypeDescriptor]
    ) -> list[MemoryResult]:
        """Measure each implementation's footprint; failures are logged and skipped."""
        results: list[MemoryResult] = []
        for descriptor in descriptors:
            try:
                results.append(self.profiler.measure(descriptor))
            except Exception:
                logger.exception(f"Failed running memory benchmark on {descriptor.name}")
        return results
