"""
Domain interface for the SyncCell component.
"""

from typing import Any, Callable, Optional, Protocol, TypeVar, runtime_checkable

from sincpro_async_primitives.domain.outcome import Outcome

V = TypeVar("V")


@runtime_checkable
class SyncCellInterface(Protocol[V]):
    """
    Interface for the SyncCell component.
    Defines the contract that all SyncCell implementations must follow.
    """

    async def wait(self) -> V:
        """
        Wait until the cell is filled and return its value.

        Raises:
            CellFailedError: If the cell holds a Failure
            CellDefectError: If the cell holds a Defect
        """
        ...

    def succeed(self, value: V) -> bool:
        """Fill the cell with a value. Returns True if this call filled it."""
        ...

    def fail(self, error: Any) -> bool:
        """Fill the cell with a recoverable failure."""
        ...

    def die(self, cause: Any) -> bool:
        """Fill the cell with an unrecoverable defect."""
        ...

    async def complete(self, producer: Callable[[], Any]) -> bool:
        """Run producer once and fill the cell with its outcome."""
        ...

    def complete_with(self, producer: Callable[[], Any]) -> bool:
        """Bind producer so that every wait() runs it again."""
        ...

    def is_done(self) -> bool:
        """Check if the cell has been filled."""
        ...

    def poll(self) -> Optional[Outcome]:
        """Return the stored outcome without waiting, or None."""
        ...

    def is_bound(self) -> bool:
        """Check if the cell was filled by complete_with."""
        ...
