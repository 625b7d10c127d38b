"""ContainerFactory registry and instantiation failures."""

import pytest

from collections_bench import (
    DYNAMIC_ARRAY,
    Capability,
    ConfigurationError,
    ContainerFactory,
    ContainerTypeDescriptor,
    DynamicArray,
    InstantiationError,
)


def test_default_registry_has_every_builtin(factory):
    names = [descriptor.name for descriptor in factory.descriptors]
    assert names == [
        "dynamic_array",
        "linked_list",
        "hash_set",
        "ordered_hash_set",
        "sorted_set",
        "priority_heap",
        "deque",
    ]
    assert len(factory) == 7


def test_create_returns_fresh_stamped_instances(factory):
    first = factory.create(DYNAMIC_ARRAY)
    second = factory.create(DYNAMIC_ARRAY)
    assert first is not second
    assert first.descriptor == DYNAMIC_ARRAY
    assert len(first) == 0


def test_descriptor_capabilities_match_class(factory):
    for descriptor in factory.descriptors:
        instance = factory.create(descriptor)
        assert descriptor.capabilities == instance.capabilities


def test_missing_zero_argument_constructor_raises_instantiation_error(factory, needs_capacity):
    with pytest.raises(InstantiationError) as exc_info:
        factory.create(needs_capacity)

    assert exc_info.value.implementation == "needs_capacity"
    assert isinstance(exc_info.value.original_error, TypeError)
    assert "needs_capacity" in str(exc_info.value)


def test_unregistered_descriptor_raises_instantiation_error(factory):
    unknown = ContainerTypeDescriptor("skip_list", frozenset({Capability.SET}))
    with pytest.raises(InstantiationError):
        factory.create(unknown)


def test_same_name_different_capabilities_is_not_registered(factory):
    impostor = ContainerTypeDescriptor("dynamic_array", frozenset({Capability.SET}))
    assert impostor not in factory
    assert DYNAMIC_ARRAY in factory
    with pytest.raises(InstantiationError):
        factory.create(impostor)


def test_duplicate_registration_is_rejected(factory):
    with pytest.raises(ConfigurationError) as exc_info:
        factory.register(DYNAMIC_ARRAY, DynamicArray)
    assert exc_info.value.suggestion


def test_non_callable_constructor_is_rejected():
    factory = ContainerFactory()
    with pytest.raises(ConfigurationError):
        factory.register(DYNAMIC_ARRAY, "not a constructor")


def test_descriptor_lookup_by_name(factory):
    assert factory.descriptor("dynamic_array") == DYNAMIC_ARRAY
    with pytest.raises(InstantiationError):
        factory.descriptor("skip_list")
