"""Static registry that turns a container descriptor into a fresh instance."""

from __future__ import annotations

import logging
from collections.abc import Callable

from .containers import (
    Container,
    Deque,
    DynamicArray,
    HashSet,
    LinkedList,
    OrderedHashSet,
    PriorityHeap,
    SortedTreeSet,
)
from .exceptions import ConfigurationError, InstantiationError
from .models import ContainerTypeDescriptor

logger = logging.getLogger(__name__)

ContainerConstructor = Callable[[], Container]


def describe(name: str, container_cls: type[Container]) -> ContainerTypeDescriptor:
    """Build a descriptor carrying the class-level capability set."""
    return ContainerTypeDescriptor(name=name, capabilities=frozenset(container_cls.capabilities))


DYNAMIC_ARRAY = describe("dynamic_array", DynamicArray)
LINKED_LIST = describe("linked_list", LinkedList)
HASH_SET = describe("hash_set", HashSet)
ORDERED_HASH_SET = describe("ordered_hash_set", OrderedHashSet)
SORTED_SET = describe("sorted_set", SortedTreeSet)
PRIORITY_HEAP = describe("priority_heap", PriorityHeap)
DEQUE = describe("deque", Deque)

BUILTIN_IMPLEMENTATIONS: tuple[tuple[ContainerTypeDescriptor, ContainerConstructor], ...] = (
    (DYNAMIC_ARRAY, DynamicArray),
    (LINKED_LIST, LinkedList),
    (HASH_SET, HashSet),
    (ORDERED_HASH_SET, OrderedHashSet),
    (SORTED_SET, SortedTreeSet),
    (PRIORITY_HEAP, PriorityHeap),
    (DEQUE, Deque),
)


class ContainerFactory:
    """
    Maps descriptors to zero-argument constructors.

    ``create`` is called once per trial, once per timeout recovery and once
    per memory-batch element, so it only does a dict lookup and a call.
    """

    def __init__(self) -> None:
        self._registry: dict[str, tuple[ContainerTypeDescriptor, ContainerConstructor]] = {}

    @classmethod
    def default(cls) -> ContainerFactory:
        """Factory preloaded with every built-in implementation."""
        factory = cls()
        for descriptor, constructor in BUILTIN_IMPLEMENTATIONS:
            factory.register(descriptor, constructor)
        return factory

    def register(
        self, descriptor: ContainerTypeDescriptor, constructor: ContainerConstructor
    ) -> ContainerTypeDescriptor:
        """
        Register a constructor for ``descriptor``.

        Raises:
            ConfigurationError: If the name is already taken or the constructor
                is not callable.
        """
        if descriptor.name in self._registry:
            raise ConfigurationError(
                f"Implementation '{descriptor.name}' is already registered",
                suggestion="pick a unique descriptor name",
            )
        if not callable(constructor):
            raise ConfigurationError(f"Constructor for '{descriptor.name}' is not callable")
        self._registry[descriptor.name] = (descriptor, constructor)
        logger.debug(f"Registered container implementation {descriptor.name}")
        return descriptor

    def create(self, descriptor: ContainerTypeDescriptor) -> Container:
        """
        Return a new, empty instance of ``descriptor``'s implementation.

        Raises:
            InstantiationError: If nothing is registered under the descriptor or
                the constructor cannot be called without arguments.
        """
        entry = self._registry.get(descriptor.name)
        if entry is None or entry[0] != descriptor:
            raise InstantiationError(descriptor.name)

        try:
            instance = entry[1]()
        except Exception as e:
            raise InstantiationError(descriptor.name, original_error=e) from e

        instance.descriptor = descriptor
        return instance

    def descriptor(self, name: str) -> ContainerTypeDescriptor:
        """Look up a registered descriptor by name."""
        try:
            return self._registry[name][0]
        except KeyError:
            raise InstantiationError(name) from None

    @property
    def descriptors(self) -> list[ContainerTypeDescriptor]:
        return [descriptor for descriptor, _ in self._registry.values()]

    def __contains__(self, descriptor: object) -> bool:
        if not isinstance(descriptor, ContainerTypeDescriptor):
            return False
        entry = self._registry.get(descriptor.name)
        return entry is not None and entry[0] == descriptor

    def __len__(self) -> int:
        return len(self._registry)
