"""
Exception module for sincpro_async_primitives.

This module defines specific exceptions that may be raised by the component.
Losing a completion race is not an error and never raises.
"""

from typing import Any


class AsyncPrimitivesError(Exception):
    """Base exception for errors in the async primitives."""


class CellFailedError(AsyncPrimitivesError):
    """Raised by SyncCell.wait() when the cell holds a recoverable failure."""

    def __init__(self, error: Any) -> None:
        super().__init__(f"Cell completed with failure: {error!r}")
        self.error = error


class CellDefectError(AsyncPrimitivesError):
    """Raised by SyncCell.wait() when the cell holds an unrecoverable defect."""

    def __init__(self, cause: Any) -> None:
        super().__init__(f"Cell completed with defect: {cause!r}")
        self.cause = cause


class QueueShutdownError(AsyncPrimitivesError):
    """Raised when a queue operation is interrupted by, or issued after, shutdown."""


class WorkerNotRunningError(AsyncPrimitivesError):
    """Raised when trying to use the worker when it's not running."""
