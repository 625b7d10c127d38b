"""Custom exceptions for the collections benchmark with detailed error context."""

from __future__ import annotations

from typing import Any


class CollectionsBenchError(Exception):
    """Base exception for all collections benchmark errors."""

    def __init__(self, message: str, context: dict[str, Any] | None = None) -> None:
        """
        Initialize the exception with a message and optional context.

        Args:
            message: The error message.
            context: Additional context information for debugging.
        """
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def __str__(self) -> str:
        """Return a formatted error message with context."""
        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"{self.message} (context: {context_str})"
        return self.message


class InstantiationError(CollectionsBenchError):
    """Raised when a container implementation cannot be constructed."""

    def __init__(self, implementation: str, original_error: Exception | None = None) -> None:
        """
        Initialize instantiation error.

        Args:
            implementation: Name of the implementation that failed.
            original_error: The original exception that caused the failure.
        """
        message = f"Cannot instantiate container implementation: {implementation}"
        context = {"implementation": implementation}
        if original_error:
            context["original_error"] = str(original_error)
            message += f" - {original_error}"

        super().__init__(message, context)
        self.implementation = implementation
        self.original_error = original_error


class OperationError(CollectionsBenchError):
    """Raised (and absorbed) when a single timed operation fails mid-loop."""

    def __init__(
        self,
        task_name: str,
        loop_index: int,
        original_error: Exception | None = None,
    ) -> None:
        """
        Initialize operation error.

        Args:
            task_name: The task whose operation failed.
            loop_index: Loop index passed to the failing invocation.
            original_error: The original exception that caused the failure.
        """
        message = f"Operation failed in task '{task_name}' at loop {loop_index}"
        context: dict[str, Any] = {"task_name": task_name, "loop_index": loop_index}
        if original_error:
            context["original_error"] = repr(original_error)

        super().__init__(message, context)
        self.task_name = task_name
        self.loop_index = loop_index
        self.original_error = original_error


class ConfigurationError(CollectionsBenchError):
    """Raised when there's a configuration issue."""

    def __init__(self, message: str, suggestion: str | None = None) -> None:
        """
        Initialize configuration error.

        Args:
            message: The error message.
            suggestion: Optional suggestion for fixing the issue.
        """
        if suggestion:
            message = f"{message}. Suggestion: {suggestion}"

        super().__init__(message)
        self.suggestion = suggestion
