"""
Core entry points of the async primitives.

Queues and cells are plain asyncio objects: inside a coroutine, create them
and await their operations directly. Synchronous code drives them through
run_async_task, which runs coroutines on a shared dedicated loop thread.
"""

import concurrent.futures
import logging
from typing import Any, Coroutine, Optional, TypeVar, Union

from sincpro_async_primitives.domain.queue import CapacityPolicy
from sincpro_async_primitives.infrastructure.dispatcher import Dispatcher
from sincpro_async_primitives.infrastructure.signal_queue import SignalQueue
from sincpro_async_primitives.infrastructure.sync_cell import SyncCell

logger = logging.getLogger(__name__)
T = TypeVar("T")

_dispatcher: Optional[Dispatcher] = None


def make_cell() -> SyncCell[Any]:
    """Create a new empty SyncCell."""
    return SyncCell.make()


def make_queue(policy: Optional[CapacityPolicy] = None) -> SignalQueue[Any]:
    """Create a new open SignalQueue, unbounded unless a policy is given."""
    return SignalQueue.make(policy)


def get_dispatcher() -> Dispatcher:
    """Return the shared dispatcher, creating it on first use."""
    global _dispatcher

    if _dispatcher is None:
        _dispatcher = Dispatcher()
    return _dispatcher


def run_async_task(
    task: Coroutine[Any, Any, T],
    timeout: Optional[float] = None,
    fire_and_forget: bool = False,
) -> Union[T, "concurrent.futures.Future[T]"]:
    """
    Run an async task on the shared loop thread.

    This is how synchronous code waits on a cell or offers to and takes from
    a queue. All operations on one queue or cell should go through the same
    loop.

    Args:
        task: Async task to execute
        timeout: Maximum time to wait for the result in seconds
        fire_and_forget: If True, return a Future immediately instead of
            waiting for the result

    Returns:
        The result of the task, or a Future when fire_and_forget is True

    Raises:
        TimeoutError: If the operation times out
        Exception: Any exception raised by the task
    """
    dispatcher = get_dispatcher()
    if fire_and_forget:
        return dispatcher.execute_async(task)
    return dispatcher.execute(task, timeout)


def shutdown() -> None:
    """Stop the shared loop thread, cancelling tasks still suspended on it."""
    global _dispatcher

    if _dispatcher is None:
        return
    _dispatcher.shutdown()
    _dispatcher = None
    logger.debug("Shared dispatcher shut down")
