"""
Worker component that owns the loop thread used by synchronous callers.
"""

import concurrent.futures
import logging
from typing import Any, Coroutine, Optional, TypeVar

from sincpro_async_primitives.domain.worker import WorkerInterface
from sincpro_async_primitives.exceptions import WorkerNotRunningError
from sincpro_async_primitives.infrastructure.event_loop import DEFAULT_THREAD_NAME, EventLoop

logger = logging.getLogger(__name__)
T = TypeVar("T")


class Worker(WorkerInterface):
    """
    Worker that runs coroutines on a dedicated event loop thread.
    """

    def __init__(self, thread_name: str = DEFAULT_THREAD_NAME) -> None:
        """Initialize the Worker component."""
        self._event_loop = EventLoop(thread_name=thread_name)
        logger.debug("Worker initialized")

    def start(self) -> None:
        """Start the loop thread."""
        self._event_loop.start()
        logger.debug("Worker started")

    def run_coroutine(
        self, coro: Coroutine[Any, Any, T]
    ) -> Optional["concurrent.futures.Future[T]"]:
        """
        Run a coroutine in the worker's event loop.

        Args:
            coro: The coroutine to run

        Returns:
            A future for the result of the coroutine, or None if failed
        """
        return self._event_loop.run_coroutine(coro)

    def call_soon(self, callback: Any, *args: Any) -> None:
        """
        Run a plain callback on the loop thread.

        Used for non-suspending operations such as SyncCell.succeed or
        SignalQueue.shutdown issued from another thread.
        """
        if not self.is_running():
            raise WorkerNotRunningError("Worker has not been started")
        self._event_loop.get_loop().call_soon_threadsafe(callback, *args)

    def shutdown(self) -> None:
        """Shutdown the worker."""
        self._event_loop.shutdown()
        logger.debug("Worker shutdown completed")

    def is_running(self) -> bool:
        """Check if the worker is running."""
        return self._event_loop.is_running()
