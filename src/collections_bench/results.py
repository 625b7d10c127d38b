"""Accumulates trial and memory results for one harness run."""

from __future__ import annotations

import logging
from typing import Any

import msgspec

from .models import ContainerTypeDescriptor, MemoryResult, TrialResult

logger = logging.getLogger(__name__)


class ResultStore:
    """
    Timing results keyed by (task name, descriptor), memory results keyed by descriptor.

    Task names keep insertion order, which is the order tasks ran in.
    """

    def __init__(self) -> None:
        self._trials: dict[str, dict[ContainerTypeDescriptor, TrialResult]] = {}
        self._memory: dict[ContainerTypeDescriptor, MemoryResult] = {}

    # ------------------------------------------------------------------
    # Recording
    # ------------------------------------------------------------------

    def add_trial(self, result: TrialResult) -> None:
        by_descriptor = self._trials.setdefault(result.task_name, {})
        if result.descriptor in by_descriptor:
            logger.warning(
                f"Replacing earlier result for task '{result.task_name}' "
                f"on {result.descriptor.name}"
            )
        by_descriptor[result.descriptor] = result

    def add_memory(self, result: MemoryResult) -> None:
        if result.descriptor in self._memory:
            logger.warning(f"Replacing earlier memory result for {result.descriptor.name}")
        self._memory[result.descriptor] = result

    # ------------------------------------------------------------------
    # Views for reporting
    # ------------------------------------------------------------------

    def timings(self) -> dict[str, dict[ContainerTypeDescriptor, int]]:
        """Task name -> descriptor -> elapsed nanoseconds (timeout sentinel included)."""
        return {
            task: {descriptor: result.elapsed_ns for descriptor, result in results.items()}
            for task, results in self._trials.items()
        }

    def memory(self) -> dict[ContainerTypeDescriptor, int]:
        """Descriptor -> average bytes per populated instance."""
        return {descriptor: result.average_bytes for descriptor, result in self._memory.items()}

    def trial(self, task_name: str, descriptor: ContainerTypeDescriptor) -> TrialResult | None:
        return self._trials.get(task_name, {}).get(descriptor)

    def is_timeout(self, task_name: str, descriptor: ContainerTypeDescriptor) -> bool:
        result = self.trial(task_name, descriptor)
        return result is not None and result.timed_out

    def task_names(self) -> list[str]:
        return list(self._trials)

    def implementations(self) -> list[ContainerTypeDescriptor]:
        """Every descriptor with at least one timing or memory result, first-seen order."""
        seen: dict[ContainerTypeDescriptor, None] = {}
        for results in self._trials.values():
            seen.update(dict.fromkeys(results))
        seen.update(dict.fromkeys(self._memory))
        return list(seen)

    def trials(self) -> list[TrialResult]:
        return [result for results in self._trials.values() for result in results.values()]

    def memory_results(self) -> list[MemoryResult]:
        return list(self._memory.values())

    # ------------------------------------------------------------------
    # Export
    # ------------------------------------------------------------------

    def to_builtins(self) -> dict[str, Any]:
        """JSON-ready snapshot; implementations are keyed by descriptor name."""
        return {
            "timings": {
                task: {descriptor.name: elapsed for descriptor, elapsed in results.items()}
                for task, results in self.timings().items()
            },
            "memory": {descriptor.name: size for descriptor, size in self.memory().items()},
            "trials": msgspec.to_builtins(self.trials()),
            "memory_results": msgspec.to_builtins(self.memory_results()),
        }

    def to_json(self) -> bytes:
        return msgspec.json.encode(self.to_builtins())

    def __len__(self) -> int:
        return len(self.trials()) + len(self._memory)
