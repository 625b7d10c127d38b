"""Shared fixtures: small, fast configurations of the benchmark engine."""

import pytest

from collections_bench import (
    BenchmarkConfig,
    BenchmarkHarness,
    Capability,
    ContainerFactory,
    ContainerTypeDescriptor,
    DynamicArray,
    ResultStore,
    TimedTrialRunner,
    build_default_context,
)

# No pauses between gc passes keeps the suite quick.
FAST_GC = {"gc_passes": 1, "gc_pause_seconds": 0.0}


@pytest.fixture
def config() -> BenchmarkConfig:
    return BenchmarkConfig(populate_size=200, timeout_millis=2000, memory_batch_size=10, **FAST_GC)


@pytest.fixture
def factory() -> ContainerFactory:
    return ContainerFactory.default()


@pytest.fixture
def store() -> ResultStore:
    return ResultStore()


@pytest.fixture
def runner(factory, config, store) -> TimedTrialRunner:
    context = build_default_context(config.populate_size)
    return TimedTrialRunner(factory, context, config.timeout_millis, store=store)


@pytest.fixture
def harness(config, factory, store) -> BenchmarkHarness:
    return BenchmarkHarness(config, factory=factory, store=store)


class NeedsCapacity(DynamicArray):
    """Implementation without a zero-argument construction path."""

    def __init__(self, capacity):
        super().__init__()
        self.capacity = capacity


@pytest.fixture
def needs_capacity(factory) -> ContainerTypeDescriptor:
    """Register an implementation the factory cannot construct and return its descriptor."""
    descriptor = ContainerTypeDescriptor("needs_capacity", frozenset({Capability.LIST}))
    factory.register(descriptor, NeedsCapacity)
    return descriptor
