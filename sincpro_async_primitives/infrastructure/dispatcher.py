"""
Dispatcher component that executes async tasks for synchronous callers.
"""

import concurrent.futures
import logging
from typing import Any, Coroutine, Optional, TypeVar

from sincpro_async_primitives.domain.dispatcher import DispatcherInterface
from sincpro_async_primitives.exceptions import WorkerNotRunningError
from sincpro_async_primitives.infrastructure.worker import Worker

logger = logging.getLogger(__name__)
T = TypeVar("T")


class Dispatcher(DispatcherInterface):
    """
    Dispatcher that executes async tasks on its worker's loop thread.
    """

    def __init__(self, worker: Optional[Worker] = None) -> None:
        """Initialize the Dispatcher component."""
        self._owns_worker = worker is None
        self._worker = worker or Worker()
        if not self._worker.is_running():
            self._worker.start()
        logger.debug("Dispatcher initialized and worker started")

    @property
    def worker(self) -> Worker:
        return self._worker

    def execute(self, task: Coroutine[Any, Any, T], timeout: Optional[float] = None) -> T:
        """
        Execute an async task and block for its result.

        Args:
            task: The async task to execute
            timeout: Optional timeout in seconds

        Returns:
            The result of the task

        Raises:
            TimeoutError: If the task takes longer than timeout seconds
            Exception: Any exception raised by the task
        """
        future = self.execute_async(task)
        try:
            return future.result(timeout=timeout)
        except concurrent.futures.TimeoutError:
            if future.done():
                # The task itself raised TimeoutError
                raise
            future.cancel()
            raise TimeoutError(f"Task took longer than {timeout} seconds")
        except Exception:
            if not future.done():
                future.cancel()
            raise

    def execute_async(
        self, task: Coroutine[Any, Any, T]
    ) -> "concurrent.futures.Future[T]":
        """
        Submit an async task without waiting for it.

        Returns:
            A future that resolves with the task result
        """
        future = self._worker.run_coroutine(task)
        if future is None:
            raise WorkerNotRunningError("Could not schedule task on the worker loop")
        return future

    def shutdown(self) -> None:
        """
        Stop the worker loop if this dispatcher created it.

        Tasks still suspended there are cancelled. A worker passed in by the
        caller is left running.
        """
        if not self._owns_worker:
            logger.debug("Dispatcher does not own its worker, leaving it running")
            return
        self._worker.shutdown()
        logger.debug("Dispatcher shut down")

    def __del__(self) -> None:
        """Cleanup when the dispatcher is destroyed."""
        worker = getattr(self, "_worker", None)
        if worker is not None and getattr(self, "_owns_worker", False):
            worker.shutdown()
