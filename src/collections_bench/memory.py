"""
Per-instance memory footprint of container implementations.

CPython frees most objects by reference counting, but cycles and allocator
free lists still make a single before/after sample noisy. The profiler keeps
a whole batch of populated instances alive and divides the heap delta by the
batch size. Three numbers are reported, all approximate:

- tracemalloc heap delta per instance (the headline figure)
- psutil process RSS delta per instance (includes allocator pages)
- deep ``sys.getsizeof`` of one instance (structural estimate)
"""

from __future__ import annotations

import gc
import logging
import sys
import time
import tracemalloc
from collections.abc import Iterable
from typing import TYPE_CHECKING, Any

import psutil

from .context import DefaultContext
from .models import ContainerTypeDescriptor, MemoryResult
from .runner import warm_up

if TYPE_CHECKING:
    from .factory import ContainerFactory
    from .results import ResultStore

logger = logging.getLogger(__name__)


def heavy_gc(passes: int = 4, pause_seconds: float = 0.2) -> None:
    """
    Force several full collections with pauses in between.

    Best effort: gives finalizers and deferred frees a chance to run before a
    baseline is taken. Nothing guarantees the heap is quiescent afterwards.
    """
    collected = 0
    for i in range(passes):
        if i:
            time.sleep(pause_seconds)
        collected += gc.collect()
    logger.debug(f"Heavy gc: {passes} pass(es), {collected} object(s) collected")


def measure_object_size(obj: Any, exclude: Iterable[Any] = ()) -> int:
    """
    Measure the size of an object including all referenced objects.

    Follows dict items, instance ``__dict__``, ``__slots__`` and the items of
    other iterables, counting each object once. Walks iteratively so long
    linked structures do not hit the recursion limit. Classes and anything in
    ``exclude`` are skipped.
    """
    seen = {id(o) for o in exclude}
    stack = [obj]
    size = 0

    while stack:
        o = stack.pop()
        if id(o) in seen or isinstance(o, type):
            continue
        seen.add(id(o))

        size += sys.getsizeof(o)

        if isinstance(o, dict):
            for k, v in o.items():
                stack.append(k)
                stack.append(v)
        elif hasattr(o, "__dict__") or hasattr(type(o), "__slots__"):
            if hasattr(o, "__dict__"):
                stack.append(vars(o))
            for slot in getattr(type(o), "__slots__", ()):
                if hasattr(o, slot):
                    stack.append(getattr(o, slot))
        elif hasattr(o, "__iter__") and not isinstance(o, (str, bytes, bytearray)):
            try:
                stack.extend(o)
            except TypeError:
                pass

    return size


class MemoryProfiler:
    """Measures the average populated-instance footprint of an implementation."""

    def __init__(
        self,
        factory: ContainerFactory,
        context: DefaultContext,
        batch_size: int = 100,
        gc_passes: int = 4,
        gc_pause_seconds: float = 0.2,
        store: ResultStore | None = None,
    ) -> None:
        self.factory = factory
        self.context = context
        self.batch_size = batch_size
        self.gc_passes = gc_passes
        self.gc_pause_seconds = gc_pause_seconds
        self.store = store
        self.process = psutil.Process()

    def measure(
        self, descriptor: ContainerTypeDescriptor, batch_size: int | None = None
    ) -> MemoryResult:
        """
        Build ``batch_size`` populated, warmed-up instances and average the heap growth.

        Args:
            descriptor: Implementation to measure.
            batch_size: Instances kept alive at once; defaults to the profiler's.

        Returns:
            MemoryResult with a non-negative ``average_bytes``.

        Raises:
            InstantiationError: If the implementation cannot be constructed.
            ValueError: If ``batch_size`` is smaller than 1.
        """
        if batch_size is None:
            batch_size = self.batch_size
        if batch_size < 1:
            raise ValueError(f"batch_size must be >= 1, got {batch_size}")

        started_tracing = not tracemalloc.is_tracing()
        if started_tracing:
            tracemalloc.start()
        try:
            batch: list[Any] = [None] * batch_size
            heavy_gc(self.gc_passes, self.gc_pause_seconds)
            heap_before, _ = tracemalloc.get_traced_memory()
            rss_before = self.process.memory_info().rss

            for i in range(batch_size):
                instance = self.factory.create(descriptor)
                instance.add_all(self.context)
                warm_up(instance)
                batch[i] = instance

            heap_after, _ = tracemalloc.get_traced_memory()
            rss_after = self.process.memory_info().rss
        finally:
            if started_tracing:
                tracemalloc.stop()

        # Shared context strings are counted once per instance here.
        structural_bytes = measure_object_size(batch[0], exclude=(descriptor,))
        average_bytes = max(0, heap_after - heap_before) // batch_size
        rss_per_instance = max(0, rss_after - rss_before) / batch_size

        logger.info(f"{descriptor.name} object size : {average_bytes} bytes")
        logger.debug(
            f"{descriptor.name} rss/instance: {rss_per_instance:.0f} bytes, "
            f"structural: {structural_bytes} bytes"
        )

        result = MemoryResult(
            descriptor=descriptor,
            average_bytes=average_bytes,
            batch_size=batch_size,
            rss_bytes_per_instance=rss_per_instance,
            structural_bytes=structural_bytes,
        )
        if self.store is not None:
            self.store.add_memory(result)

        del batch
        return result
