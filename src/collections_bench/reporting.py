"""Read-only HTTP view of a ResultStore, serialized with msgspec."""

from __future__ import annotations

import logging
from typing import Any, Generic, TypeVar

import msgspec
from fastapi import FastAPI
from fastapi.responses import JSONResponse

from . import __version__
from .config import BenchmarkConfig
from .results import ResultStore

logger = logging.getLogger(__name__)

T = TypeVar("T")

# ============================================================================
# Response Envelope
# ============================================================================


class ResponseModel(msgspec.Struct, Generic[T]):
    """Standard response envelope."""

    status: str = "ok"
    data: T | None = None
    message: str | None = None


class MsgspecJSONResponse(JSONResponse):
    """JSON response rendered with msgspec."""

    def render(self, content: Any) -> bytes:
        if hasattr(content, "model_dump"):
            content = content.model_dump()

        return msgspec.json.encode(content)


def response(
    data: Any = None,
    message: str | None = None,
    status: str = "ok",
    status_code: int = 200,
) -> MsgspecJSONResponse:
    """Wrap ``data`` in the standard envelope."""
    return MsgspecJSONResponse(
        content=ResponseModel(status=status, data=data, message=message),
        status_code=status_code,
    )


# ============================================================================
# App
# ============================================================================


def create_app(store: ResultStore, config: BenchmarkConfig | None = None) -> FastAPI:
    """
    Build an app exposing ``store``.

    Routes:
        GET /                     run summary
        GET /timings              task -> implementation -> elapsed ns
        GET /timings/{task_name}  one task, with timeout flags
        GET /memory               implementation -> memory figures
    """
    app = FastAPI(
        title="collections-bench results",
        version=__version__,
        description="Timing and memory results of a collections benchmark run",
    )
    app.router.default_response_class = MsgspecJSONResponse  # type: ignore[assignment]

    @app.get("/")
    async def summary() -> MsgspecJSONResponse:
        data: dict[str, Any] = {
            "tasks": store.task_names(),
            "implementations": [descriptor.name for descriptor in store.implementations()],
        }
        if config is not None:
            data["populate_size"] = config.populate_size
            data["timeout_millis"] = config.timeout_millis
        return response(data=data, message=f"{len(store.trials())} trial(s) recorded")

    @app.get("/timings")
    async def timings() -> MsgspecJSONResponse:
        return response(data=store.to_builtins()["timings"])

    @app.get("/timings/{task_name}")
    async def task_timings(task_name: str) -> MsgspecJSONResponse:
        results = store.timings().get(task_name)
        if results is None:
            logger.debug(f"Unknown task requested: {task_name}")
            return response(status="error", message=f"Unknown task: {task_name}", status_code=404)

        rows = [
            {
                "implementation": descriptor.name,
                "elapsed_ns": elapsed,
                "timed_out": store.is_timeout(task_name, descriptor),
            }
            for descriptor, elapsed in sorted(results.items(), key=lambda item: item[0].name)
        ]
        return response(data=rows)

    @app.get("/memory")
    async def memory() -> MsgspecJSONResponse:
        rows = {
            result.descriptor.name: {
                "average_bytes": result.average_bytes,
                "rss_bytes_per_instance": result.rss_bytes_per_instance,
                "structural_bytes": result.structural_bytes,
                "batch_size": result.batch_size,
            }
            for result in store.memory_results()
        }
        return response(data=rows)

    return app
