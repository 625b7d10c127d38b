"""collections-bench: timing and memory micro-benchmarks for container implementations."""

__version__ = "1.0.0"

from .config import BenchmarkConfig
from .containers import (
    Container,
    Deque,
    DynamicArray,
    HashSet,
    IndexedContainer,
    LinkedList,
    OrderedHashSet,
    PriorityHeap,
    QueueContainer,
    SortedTreeSet,
)
from .context import build_default_context, build_probe_batch
from .exceptions import (
    # Base Exception
    CollectionsBenchError,
    # Specific Exceptions
    ConfigurationError,
    InstantiationError,
    OperationError,
)
from .factory import (
    DEQUE,
    DYNAMIC_ARRAY,
    HASH_SET,
    LINKED_LIST,
    ORDERED_HASH_SET,
    PRIORITY_HEAP,
    SORTED_SET,
    ContainerFactory,
)
from .harness import BenchmarkHarness
from .memory import MemoryProfiler, heavy_gc, measure_object_size
from .models import Capability, ContainerTypeDescriptor, MemoryResult, TrialResult, TrialSpec
from .results import ResultStore
from .runner import TimedTrialRunner, warm_up

__all__ = [
    # Version
    "__version__",
    # Configuration
    "BenchmarkConfig",
    # Records
    "Capability",
    "ContainerTypeDescriptor",
    "TrialSpec",
    "TrialResult",
    "MemoryResult",
    # Containers
    "Container",
    "IndexedContainer",
    "QueueContainer",
    "DynamicArray",
    "LinkedList",
    "HashSet",
    "OrderedHashSet",
    "SortedTreeSet",
    "PriorityHeap",
    "Deque",
    # Factory and built-in descriptors
    "ContainerFactory",
    "DYNAMIC_ARRAY",
    "LINKED_LIST",
    "HASH_SET",
    "ORDERED_HASH_SET",
    "SORTED_SET",
    "PRIORITY_HEAP",
    "DEQUE",
    # Engine
    "build_default_context",
    "build_probe_batch",
    "TimedTrialRunner",
    "warm_up",
    "MemoryProfiler",
    "heavy_gc",
    "measure_object_size",
    "ResultStore",
    "BenchmarkHarness",
    # Exceptions
    "CollectionsBenchError",
    "ConfigurationError",
    "InstantiationError",
    "OperationError",
]
