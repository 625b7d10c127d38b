"""
Container implementations compared by the benchmark.

Every implementation exposes the same operation surface (``Container``) so a
single task list can drive all of them. Index-addressable implementations add
``IndexedContainer`` operations and FIFO/priority implementations add
``QueueContainer`` operations.

Operations are allowed to raise on hostile input (for example adding an
``int`` to a sorted set of ``str``); the trial runner absorbs those errors.
"""

from __future__ import annotations

import heapq
from abc import ABC, abstractmethod
from collections import deque
from collections.abc import Callable, Iterable, Iterator
from typing import Any, ClassVar

from sortedcontainers import SortedSet

from .models import Capability, ContainerTypeDescriptor

# ============================================================================
# Capability Interfaces
# ============================================================================


class Container(ABC):
    """Common operations shared by every benchmarked implementation."""

    capabilities: ClassVar[frozenset[Capability]] = frozenset()

    def __init__(self) -> None:
        # Set by ContainerFactory so a corrupted instance can be rebuilt.
        self.descriptor: ContainerTypeDescriptor | None = None

    @abstractmethod
    def add(self, element: Any) -> bool:
        """Insert ``element``; return True when the container changed."""

    @abstractmethod
    def remove(self, element: Any) -> bool:
        """Remove one occurrence of ``element`` by value; return True if found."""

    @abstractmethod
    def contains(self, element: Any) -> bool:
        """Membership test."""

    @abstractmethod
    def clear(self) -> None:
        """Remove every element."""

    @abstractmethod
    def __iter__(self) -> Iterator[Any]: ...

    @abstractmethod
    def __len__(self) -> int: ...

    def size(self) -> int:
        return len(self)

    def iterator(self) -> Iterator[Any]:
        return iter(self)

    def to_array(self) -> list[Any]:
        return list(self)

    def add_all(self, items: Iterable[Any]) -> bool:
        changed = False
        for item in items:
            if self.add(item):
                changed = True
        return changed

    def contains_all(self, items: Iterable[Any]) -> bool:
        return all(self.contains(item) for item in items)

    def remove_all(self, items: Iterable[Any]) -> bool:
        """Remove every element that is also in ``items``."""
        targets = set(items)
        return self._remove_if(lambda element: element in targets)

    def retain_all(self, items: Iterable[Any]) -> bool:
        """Remove every element that is not in ``items``."""
        keep = set(items)
        return self._remove_if(lambda element: element not in keep)

    def _remove_if(self, predicate: Callable[[Any], bool]) -> bool:
        doomed = [element for element in self if predicate(element)]
        for element in doomed:
            self.remove(element)
        return bool(doomed)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(size={len(self)})"


class IndexedContainer(Container):
    """Positional access on top of the common operations."""

    @abstractmethod
    def get(self, index: int) -> Any:
        """Return the element at ``index``; raise IndexError when out of range."""

    @abstractmethod
    def index_of(self, element: Any) -> int:
        """Return the first position of ``element``, or -1 when absent."""

    @abstractmethod
    def remove_at(self, index: int) -> Any:
        """Remove and return the element at ``index``."""


class QueueContainer(Container):
    """Head-of-queue access on top of the common operations."""

    def offer(self, element: Any) -> bool:
        return self.add(element)

    @abstractmethod
    def poll(self) -> Any:
        """Remove and return the head, or None when empty."""

    @abstractmethod
    def peek(self) -> Any:
        """Return the head without removing it, or None when empty."""


# ============================================================================
# Dynamic Array
# ============================================================================


class DynamicArray(IndexedContainer):
    """Backed by a Python ``list``."""

    capabilities = frozenset({Capability.LIST})

    def __init__(self) -> None:
        super().__init__()
        self._items: list[Any] = []

    def add(self, element: Any) -> bool:
        self._items.append(element)
        return True

    def remove(self, element: Any) -> bool:
        try:
            self._items.remove(element)
        except ValueError:
            return False
        return True

    def contains(self, element: Any) -> bool:
        return element in self._items

    def clear(self) -> None:
        self._items.clear()

    def get(self, index: int) -> Any:
        if index < 0:
            raise IndexError(f"index out of range: {index}")
        return self._items[index]

    def index_of(self, element: Any) -> int:
        try:
            return self._items.index(element)
        except ValueError:
            return -1

    def remove_at(self, index: int) -> Any:
        if index < 0:
            raise IndexError(f"index out of range: {index}")
        return self._items.pop(index)

    def add_all(self, items: Iterable[Any]) -> bool:
        before = len(self._items)
        self._items.extend(items)
        return len(self._items) != before

    def to_array(self) -> list[Any]:
        return self._items.copy()

    def _remove_if(self, predicate: Callable[[Any], bool]) -> bool:
        before = len(self._items)
        self._items[:] = [element for element in self._items if not predicate(element)]
        return len(self._items) != before

    def __iter__(self) -> Iterator[Any]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)


# ============================================================================
# Doubly Linked List
# ============================================================================


class _Node:
    __slots__ = ("value", "prev", "next")

    def __init__(self, value: Any) -> None:
        self.value = value
        self.prev: _Node | None = None
        self.next: _Node | None = None


class LinkedList(IndexedContainer, QueueContainer):
    """
    Doubly linked list with fail-fast iteration.

    ``clear()`` unlinks every node, so a scan running concurrently with it
    stops early instead of walking a detached chain, and live iterators raise
    RuntimeError on their next step.
    """

    capabilities = frozenset({Capability.LIST, Capability.QUEUE})

    def __init__(self) -> None:
        super().__init__()
        self._head: _Node | None = None
        self._tail: _Node | None = None
        self._size = 0
        self._mod_count = 0

    def add(self, element: Any) -> bool:
        node = _Node(element)
        tail = self._tail
        if tail is None:
            self._head = node
        else:
            tail.next = node
            node.prev = tail
        self._tail = node
        self._size += 1
        self._mod_count += 1
        return True

    def _unlink(self, node: _Node) -> Any:
        prev, nxt = node.prev, node.next
        if prev is None:
            self._head = nxt
        else:
            prev.next = nxt
        if nxt is None:
            self._tail = prev
        else:
            nxt.prev = prev
        node.prev = node.next = None
        self._size -= 1
        self._mod_count += 1
        return node.value

    def _find(self, element: Any) -> _Node | None:
        node = self._head
        while node is not None:
            if node.value == element:
                return node
            node = node.next
        return None

    def _node_at(self, index: int) -> _Node:
        if not 0 <= index < self._size:
            raise IndexError(f"index out of range: {index}")
        # Walk from whichever end is closer.
        if index < self._size // 2:
            node = self._head
            for _ in range(index):
                node = node.next
        else:
            node = self._tail
            for _ in range(self._size - 1 - index):
                node = node.prev
        if node is None:
            raise IndexError(f"index out of range: {index}")
        return node

    def remove(self, element: Any) -> bool:
        node = self._find(element)
        if node is None:
            return False
        self._unlink(node)
        return True

    def contains(self, element: Any) -> bool:
        return self._find(element) is not None

    def clear(self) -> None:
        node = self._head
        while node is not None:
            nxt = node.next
            node.value = None
            node.prev = node.next = None
            node = nxt
        self._head = self._tail = None
        self._size = 0
        self._mod_count += 1

    def get(self, index: int) -> Any:
        return self._node_at(index).value

    def index_of(self, element: Any) -> int:
        index = 0
        node = self._head
        while node is not None:
            if node.value == element:
                return index
            node = node.next
            index += 1
        return -1

    def remove_at(self, index: int) -> Any:
        return self._unlink(self._node_at(index))

    def poll(self) -> Any:
        if self._head is None:
            return None
        return self._unlink(self._head)

    def peek(self) -> Any:
        return None if self._head is None else self._head.value

    def _remove_if(self, predicate: Callable[[Any], bool]) -> bool:
        changed = False
        node = self._head
        while node is not None:
            nxt = node.next
            if predicate(node.value):
                self._unlink(node)
                changed = True
            node = nxt
        return changed

    def __iter__(self) -> Iterator[Any]:
        expected = self._mod_count
        node = self._head
        while node is not None:
            if self._mod_count != expected:
                raise RuntimeError("LinkedList changed during iteration")
            yield node.value
            node = node.next
        if self._mod_count != expected:
            raise RuntimeError("LinkedList changed during iteration")

    def __len__(self) -> int:
        return self._size


# ============================================================================
# Hash Sets
# ============================================================================

_MISSING = object()


class HashSet(Container):
    """Backed by a Python ``set``; iteration order is arbitrary."""

    capabilities = frozenset({Capability.SET})

    def __init__(self) -> None:
        super().__init__()
        self._items: set[Any] = set()

    def add(self, element: Any) -> bool:
        if element in self._items:
            return False
        self._items.add(element)
        return True

    def remove(self, element: Any) -> bool:
        if element not in self._items:
            return False
        self._items.discard(element)
        return True

    def contains(self, element: Any) -> bool:
        return element in self._items

    def clear(self) -> None:
        self._items.clear()

    def remove_all(self, items: Iterable[Any]) -> bool:
        before = len(self._items)
        self._items.difference_update(items)
        return len(self._items) != before

    def retain_all(self, items: Iterable[Any]) -> bool:
        before = len(self._items)
        self._items.intersection_update(items)
        return len(self._items) != before

    def __iter__(self) -> Iterator[Any]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)


class OrderedHashSet(Container):
    """Hash set that iterates in insertion order (``dict`` keys)."""

    capabilities = frozenset({Capability.SET})

    def __init__(self) -> None:
        super().__init__()
        self._items: dict[Any, None] = {}

    def add(self, element: Any) -> bool:
        if element in self._items:
            return False
        self._items[element] = None
        return True

    def remove(self, element: Any) -> bool:
        if element not in self._items:
            return False
        del self._items[element]
        return True

    def contains(self, element: Any) -> bool:
        return element in self._items

    def clear(self) -> None:
        self._items.clear()

    def remove_all(self, items: Iterable[Any]) -> bool:
        changed = False
        for element in set(items):
            if self._items.pop(element, _MISSING) is not _MISSING:
                changed = True
        return changed

    def __iter__(self) -> Iterator[Any]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)


# ============================================================================
# Sorted Set
# ============================================================================


class SortedTreeSet(Container):
    """Sorted set backed by ``sortedcontainers.SortedSet``; elements must be mutually comparable."""

    capabilities = frozenset({Capability.SET})

    def __init__(self) -> None:
        super().__init__()
        self._items: SortedSet = SortedSet()

    def add(self, element: Any) -> bool:
        if element in self._items:
            return False
        self._items.add(element)
        return True

    def remove(self, element: Any) -> bool:
        if element not in self._items:
            return False
        self._items.remove(element)
        return True

    def contains(self, element: Any) -> bool:
        return element in self._items

    def clear(self) -> None:
        self._items.clear()

    def remove_all(self, items: Iterable[Any]) -> bool:
        before = len(self._items)
        self._items.difference_update(items)
        return len(self._items) != before

    def retain_all(self, items: Iterable[Any]) -> bool:
        before = len(self._items)
        self._items.intersection_update(items)
        return len(self._items) != before

    def __iter__(self) -> Iterator[Any]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)


# ============================================================================
# Queues
# ============================================================================


class PriorityHeap(QueueContainer):
    """
    Binary min-heap on a ``list`` via ``heapq``.

    Iteration and ``to_array`` follow heap array order, not sorted order.
    """

    capabilities = frozenset({Capability.QUEUE})

    def __init__(self) -> None:
        super().__init__()
        self._heap: list[Any] = []

    def add(self, element: Any) -> bool:
        heapq.heappush(self._heap, element)
        return True

    def remove(self, element: Any) -> bool:
        try:
            index = self._heap.index(element)
        except ValueError:
            return False
        last = self._heap.pop()
        if index < len(self._heap):
            self._heap[index] = last
            heapq.heapify(self._heap)
        return True

    def contains(self, element: Any) -> bool:
        return element in self._heap

    def clear(self) -> None:
        self._heap.clear()

    def poll(self) -> Any:
        if not self._heap:
            return None
        return heapq.heappop(self._heap)

    def peek(self) -> Any:
        return self._heap[0] if self._heap else None

    def _remove_if(self, predicate: Callable[[Any], bool]) -> bool:
        before = len(self._heap)
        self._heap[:] = [element for element in self._heap if not predicate(element)]
        heapq.heapify(self._heap)
        return len(self._heap) != before

    def __iter__(self) -> Iterator[Any]:
        return iter(self._heap)

    def __len__(self) -> int:
        return len(self._heap)


class Deque(QueueContainer):
    """Backed by ``collections.deque``."""

    capabilities = frozenset({Capability.QUEUE})

    def __init__(self) -> None:
        super().__init__()
        self._items: deque[Any] = deque()

    def add(self, element: Any) -> bool:
        self._items.append(element)
        return True

    def remove(self, element: Any) -> bool:
        try:
            self._items.remove(element)
        except ValueError:
            return False
        return True

    def contains(self, element: Any) -> bool:
        return element in self._items

    def clear(self) -> None:
        self._items.clear()

    def add_all(self, items: Iterable[Any]) -> bool:
        before = len(self._items)
        self._items.extend(items)
        return len(self._items) != before

    def poll(self) -> Any:
        return self._items.popleft() if self._items else None

    def peek(self) -> Any:
        return self._items[0] if self._items else None

    def _remove_if(self, predicate: Callable[[Any], bool]) -> bool:
        kept = [element for element in self._items if not predicate(element)]
        if len(kept) == len(self._items):
            return False
        self._items.clear()
        self._items.extend(kept)
        return True

    def __iter__(self) -> Iterator[Any]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)
