"""
Domain layer: value objects and interfaces, free of event loop details.
"""

from sincpro_async_primitives.domain.outcome import Defect, Failure, Outcome, Success
from sincpro_async_primitives.domain.queue import CapacityPolicy, PolicyKind, QueueState

__all__ = [
    "Outcome",
    "Success",
    "Failure",
    "Defect",
    "CapacityPolicy",
    "PolicyKind",
    "QueueState",
]
