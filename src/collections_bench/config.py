"""
Benchmark configuration.

Defaults mirror a full-size run: 100k populated elements and a 15 second
budget per trial. Tests and quick runs override them.
"""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator


class BenchmarkConfig(BaseModel):
    """Validated settings shared by the harness, the runner and the memory profiler."""

    populate_size: int = Field(100_000, ge=0, description="Elements in the default context")
    timeout_millis: int = Field(15_000, gt=0, description="Per-trial budget in milliseconds")
    memory_batch_size: int = Field(100, ge=1, description="Instances kept alive per memory sample")
    gc_passes: int = Field(4, ge=1, description="gc.collect() calls in a heavy collection cycle")
    gc_pause_seconds: float = Field(0.2, ge=0.0, description="Pause between collection passes")

    model_config = {
        "frozen": True,
        "json_schema_extra": {
            "example": {
                "populate_size": 1000,
                "timeout_millis": 5000,
                "memory_batch_size": 100,
            }
        },
    }

    @field_validator("gc_pause_seconds")
    @classmethod
    def validate_gc_pause(cls, v: float) -> float:
        """Keep a heavy cycle from stalling the run for minutes."""
        if v > 5.0:
            raise ValueError("gc_pause_seconds must be at most 5 seconds")
        return v

    @property
    def timeout_ns(self) -> int:
        """Timeout sentinel recorded for aborted trials, in nanoseconds."""
        return self.timeout_millis * 1_000_000
