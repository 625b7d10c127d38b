"""Records shared by the runner, the memory profiler and the result store."""

from __future__ import annotations

from collections.abc import Callable
from enum import Enum
from typing import TYPE_CHECKING, Any

import msgspec

if TYPE_CHECKING:
    from .containers import Container


class Capability(str, Enum):
    """Behaviour groups a container implementation can expose."""

    LIST = "list"
    SET = "set"
    QUEUE = "queue"


class ContainerTypeDescriptor(msgspec.Struct, frozen=True):
    """Identifies one container implementation under test."""

    name: str
    capabilities: frozenset[Capability]

    def supports(self, capability: Capability) -> bool:
        return capability in self.capabilities


class TrialSpec(msgspec.Struct, frozen=True):
    """
    One timed task: ``operation(container, loop_index)`` run ``loop_count`` times.

    The operation receives the working instance on every call because the
    runner may swap instances between trials.
    """

    operation: Callable[[Container, int], Any]
    loop_count: int
    task_name: str


class TrialResult(msgspec.Struct, frozen=True):
    """Outcome of one (task, implementation) trial."""

    task_name: str
    descriptor: ContainerTypeDescriptor
    elapsed_ns: int
    completed_loops: int
    loop_count: int
    timed_out: bool = False
    failures: int = 0


class MemoryResult(msgspec.Struct, frozen=True):
    """
    Average footprint of one populated instance.

    ``average_bytes`` comes from tracemalloc heap deltas over a batch and is
    approximate. ``rss_bytes_per_instance`` is the process RSS delta over the
    same batch (coarser still, allocator pages included), and
    ``structural_bytes`` is the deep ``sys.getsizeof`` of a single instance.
    """

    descriptor: ContainerTypeDescriptor
    average_bytes: int
    batch_size: int
    rss_bytes_per_instance: float = 0.0
    structural_bytes: int = 0
