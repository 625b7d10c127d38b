"""
Timed trial execution with warmup, timeout abort and instance replacement.

A trial runs one operation in a tight loop on the calling thread. The only
other actor is a ``threading.Timer`` which, when the budget runs out, sets a
flag and clears the working container. Clearing is the abort: a long scan in
progress reads a structure that just vanished, fails or returns early, and
the loop sees the flag at its next iteration boundary. A single C-level call
(``x in some_list``) cannot be interrupted this way and runs to completion.

Because the forced clear can race with an in-flight mutation, the instance is
never trusted after a trial; the runner always swaps in a fresh one.
"""

from __future__ import annotations

import gc
import logging
import threading
import time
from typing import TYPE_CHECKING

from .containers import Container, IndexedContainer
from .context import DefaultContext
from .exceptions import InstantiationError, OperationError
from .models import TrialResult, TrialSpec

if TYPE_CHECKING:
    from .factory import ContainerFactory
    from .results import ResultStore

logger = logging.getLogger(__name__)


def warm_up(container: Container) -> None:
    """
    Touch the container's internals once so lazy structures exist before timing.

    Removes one element, re-reads the head position on index-addressable
    containers, takes an iterator and snapshots to a list.
    """
    if len(container):
        container.remove(next(iter(container)))
    if isinstance(container, IndexedContainer) and len(container):
        container.index_of(container.get(0))
    container.iterator()
    container.to_array()


class TimedTrialRunner:
    """Runs ``TrialSpec`` objects against one working instance at a time."""

    def __init__(
        self,
        factory: ContainerFactory,
        context: DefaultContext,
        timeout_millis: int,
        store: ResultStore | None = None,
    ) -> None:
        self.factory = factory
        self.context = context
        self.timeout_millis = timeout_millis
        self.store = store
        # Replacement produced by the last trial; feed it to the next one.
        self.instance: Container | None = None

    def reset(self, container: Container) -> None:
        """Restore the populated baseline, whatever the previous trial left."""
        container.clear()
        container.add_all(self.context)

    def run_trial(
        self,
        instance: Container,
        spec: TrialSpec,
        timeout_millis: int | None = None,
    ) -> TrialResult:
        """
        Reset, warm up, then time ``spec.operation`` for ``spec.loop_count`` iterations.

        Errors raised by individual invocations are counted and otherwise
        ignored. When the budget is exceeded the result carries the timeout
        sentinel (``timeout_millis`` in nanoseconds) instead of a measurement.

        Args:
            instance: Working container created by ``self.factory``.
            spec: Operation, loop count and task name.
            timeout_millis: Budget override; defaults to the runner's.

        Returns:
            The trial result. ``self.instance`` then holds a fresh replacement.
        """
        if timeout_millis is None:
            timeout_millis = self.timeout_millis
        descriptor = instance.descriptor
        if descriptor is None:
            raise ValueError("instance was not created by a ContainerFactory")

        self.reset(instance)
        warm_up(instance)

        timed_out = threading.Event()

        def abort() -> None:
            timed_out.set()
            instance.clear()

        timer = threading.Timer(timeout_millis / 1000, abort)
        timer.daemon = True

        operation = spec.operation
        loop_count = spec.loop_count
        completed = 0
        failures = 0
        first_error: OperationError | None = None

        timer.start()
        start = time.perf_counter_ns()
        deadline = start + timeout_millis * 1_000_000
        try:
            while completed < loop_count:
                try:
                    operation(instance, completed)
                except Exception as e:
                    failures += 1
                    if first_error is None:
                        first_error = OperationError(spec.task_name, completed, e)
                # An iteration interrupted by the abort does not count.
                if timed_out.is_set() or time.perf_counter_ns() >= deadline:
                    timed_out.set()
                    break
                completed += 1
            end = time.perf_counter_ns()
        finally:
            timer.cancel()

        aborted = completed < loop_count
        if aborted:
            elapsed_ns = timeout_millis * 1_000_000
            logger.info(f"{spec.task_name} ... Timeout (>{elapsed_ns}ns) after {completed} loop(s)")
        elif loop_count == 0:
            elapsed_ns = 0
            logger.info(f"{spec.task_name} ... 0ns (no loops)")
        else:
            elapsed_ns = end - start
            logger.info(f"{spec.task_name} ... {elapsed_ns}ns")

        if first_error is not None:
            logger.debug(f"{failures} operation failure(s) absorbed, first: {first_error}")

        self.instance = self._replace(instance)

        result = TrialResult(
            task_name=spec.task_name,
            descriptor=descriptor,
            elapsed_ns=elapsed_ns,
            completed_loops=completed,
            loop_count=loop_count,
            timed_out=aborted,
            failures=failures,
        )
        if self.store is not None:
            self.store.add_trial(result)

        gc.collect()
        return result

    def _replace(self, instance: Container) -> Container:
        # The replacement is not checked before the next reset.
        try:
            return self.factory.create(instance.descriptor)
        except InstantiationError as e:
            logger.warning(f"Keeping possibly corrupted instance, replacement failed: {e}")
            return instance
