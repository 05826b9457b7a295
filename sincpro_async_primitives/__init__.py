"""
Async concurrency primitives: single-assignment cells and signal queues.
"""

from sincpro_async_primitives.core import make_cell, make_queue, run_async_task, shutdown
from sincpro_async_primitives.domain.outcome import Defect, Failure, Outcome, Success
from sincpro_async_primitives.domain.queue import CapacityPolicy, PolicyKind, QueueState
from sincpro_async_primitives.exceptions import (
    AsyncPrimitivesError,
    CellDefectError,
    CellFailedError,
    QueueShutdownError,
    WorkerNotRunningError,
)
from sincpro_async_primitives.infrastructure.cell_cache import CellCache
from sincpro_async_primitives.infrastructure.signal_queue import SignalQueue
from sincpro_async_primitives.infrastructure.sync_cell import SyncCell

__all__ = [
    "make_cell",
    "make_queue",
    "run_async_task",
    "shutdown",
    "SyncCell",
    "SignalQueue",
    "CellCache",
    "CapacityPolicy",
    "PolicyKind",
    "QueueState",
    "Outcome",
    "Success",
    "Failure",
    "Defect",
    "AsyncPrimitivesError",
    "CellFailedError",
    "CellDefectError",
    "QueueShutdownError",
    "WorkerNotRunningError",
]
