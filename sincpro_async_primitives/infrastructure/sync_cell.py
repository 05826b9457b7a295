"""
SyncCell component: a single-assignment cell that asyncio tasks can wait on.
"""

import asyncio
import inspect
import logging
from collections import deque
from typing import Any, Callable, Deque, Generic, Optional, TypeVar

from sincpro_async_primitives.domain.outcome import (
    Defect,
    Failure,
    Outcome,
    Success,
    is_outcome,
)
from sincpro_async_primitives.exceptions import CellDefectError, CellFailedError

logger = logging.getLogger(__name__)
V = TypeVar("V")


async def evaluate(producer: Callable[[], Any]) -> Outcome:
    """
    Run a producer once and turn whatever it yields into an Outcome.

    Args:
        producer: Zero-argument callable, sync or async

    Returns:
        The producer's Outcome if it returned one, Success for any other
        value, Failure for CellFailedError and Defect for any other exception
    """
    try:
        result = producer()
        if inspect.isawaitable(result):
            result = await result
    except CellFailedError as e:
        return Failure(e.error)
    except CellDefectError as e:
        return Defect(e.cause)
    except Exception as e:
        logger.debug(f"Producer raised {e!r}, recording it as a defect")
        return Defect(e)

    if is_outcome(result):
        return result
    return Success(result)


def unwrap(outcome: Outcome) -> Any:
    """Return the value of a Success, raise for Failure and Defect."""
    if isinstance(outcome, Success):
        return outcome.value
    if isinstance(outcome, Failure):
        error = outcome.error
        if isinstance(error, BaseException):
            raise CellFailedError(error) from error
        raise CellFailedError(error)
    cause = outcome.cause
    if isinstance(cause, BaseException):
        raise CellDefectError(cause) from cause
    raise CellDefectError(cause)


class SyncCell(Generic[V]):
    """
    Single-assignment synchronization cell.

    The cell starts empty and is filled exactly once, by whichever of
    succeed/fail/die/done/complete/complete_with gets there first. Every
    task waiting on the cell, now or later, observes the same outcome.
    Race losers are told so through a False return value.

    A cell belongs to the event loop of the tasks that wait on it and has
    no shutdown: waiters of a cell that is never filled stay suspended
    until they are cancelled.
    """

    def __init__(self) -> None:
        """Initialize an empty SyncCell."""
        self._outcome: Optional[Outcome] = None
        self._producer: Optional[Callable[[], Any]] = None
        self._waiters: Deque["asyncio.Future[None]"] = deque()

    @classmethod
    def make(cls) -> "SyncCell[Any]":
        """Create a new empty cell."""
        return cls()

    def is_done(self) -> bool:
        """Check if the cell has been filled. Never suspends."""
        return self._outcome is not None or self._producer is not None

    def poll(self) -> Optional[Outcome]:
        """
        Return the stored outcome without waiting.

        Returns None while the cell is empty, and also for a cell bound with
        complete_with, whose outcome only exists once a waiter runs it.
        """
        return self._outcome

    def is_bound(self) -> bool:
        """
        Check if the cell was filled by complete_with.

        Such a cell is done but poll() returns None for it, since its outcome
        is produced anew by every wait().
        """
        return self._producer is not None

    def done(self, outcome: Outcome) -> bool:
        """
        Fill the cell with an explicit outcome.

        Args:
            outcome: Success, Failure or Defect

        Returns:
            True if this call filled the cell, False if it was already filled
        """
        if not is_outcome(outcome):
            raise TypeError(f"Expected Success, Failure or Defect, got {outcome!r}")
        if self.is_done():
            logger.debug(f"Cell already filled, discarding {outcome!r}")
            return False

        self._outcome = outcome
        logger.debug(f"Cell filled with {type(outcome).__name__}")
        self._release_waiters()
        return True

    def succeed(self, value: V) -> bool:
        """Fill the cell with a value."""
        return self.done(Success(value))

    def fail(self, error: Any) -> bool:
        """Fill the cell with a recoverable failure."""
        return self.done(Failure(error))

    def die(self, cause: Any) -> bool:
        """Fill the cell with an unrecoverable defect."""
        return self.done(Defect(cause))

    async def complete(self, producer: Callable[[], Any]) -> bool:
        """
        Run producer once, right away, and fill the cell with its outcome.

        Exceptions raised by the producer are captured in the outcome
        rather than propagated. When several completions race, the first
        one to finish wins and the others are discarded.

        Returns:
            True if this call filled the cell
        """
        outcome = await evaluate(producer)
        return self.done(outcome)

    def complete_with(self, producer: Callable[[], Any]) -> bool:
        """
        Bind producer to the cell without running it.

        From then on the cell counts as filled, and each wait() runs
        producer again and returns its own outcome.

        Returns:
            True if this call filled the cell
        """
        if self.is_done():
            logger.debug("Cell already filled, ignoring producer")
            return False

        self._producer = producer
        logger.debug("Cell bound to a producer")
        self._release_waiters()
        return True

    async def wait(self) -> V:
        """
        Wait until the cell is filled and return its value.

        Returns:
            The value of a Success outcome

        Raises:
            CellFailedError: If the cell holds a Failure
            CellDefectError: If the cell holds a Defect
        """
        if not self.is_done():
            waiter = asyncio.get_running_loop().create_future()
            self._waiters.append(waiter)
            try:
                await waiter
            except asyncio.CancelledError:
                if waiter in self._waiters:
                    self._waiters.remove(waiter)
                raise

        if self._producer is not None:
            return unwrap(await evaluate(self._producer))
        return unwrap(self._outcome)

    def waiter_count(self) -> int:
        """Number of tasks currently suspended in wait()."""
        return len(self._waiters)

    def _release_waiters(self) -> None:
        """Wake every suspended waiter, oldest first."""
        released = 0
        while self._waiters:
            waiter = self._waiters.popleft()
            if not waiter.done():
                waiter.set_result(None)
                released += 1
        if released:
            logger.debug(f"Released {released} cell waiter(s)")

    def __await__(self):
        return self.wait().__await__()

    def __repr__(self) -> str:
        if self._producer is not None:
            state = "bound"
        elif self._outcome is not None:
            state = type(self._outcome).__name__.lower()
        else:
            state = "empty"
        return f"SyncCell(state={state}, waiters={len(self._waiters)})"
