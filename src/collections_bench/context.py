"""Baseline data every trial starts from."""

from __future__ import annotations

DefaultContext = tuple[str, ...]

PROBE_BATCH_SIZE = 1000


def build_default_context(populate_size: int) -> DefaultContext:
    """
    Return ``populate_size`` strings cycling through ``"0"`` .. ``"99"``.

    Args:
        populate_size: Number of elements; must be >= 0.

    Raises:
        ValueError: If ``populate_size`` is negative.
    """
    if populate_size < 0:
        raise ValueError(f"populate_size must be >= 0, got {populate_size}")
    return tuple(str(i % 100) for i in range(populate_size))


def build_probe_batch(size: int = PROBE_BATCH_SIZE) -> DefaultContext:
    """Batch used by the bulk tasks: ``size`` strings cycling through ``"0"`` .. ``"29"``."""
    return tuple(str(i % 30) for i in range(size))
