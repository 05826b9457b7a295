"""
EventLoop component that drives queues and cells from synchronous code.
Always runs its own uvloop loop in a dedicated thread.
"""

import asyncio
import concurrent.futures
import logging
import threading
import warnings
from typing import Any, Coroutine, Optional, TypeVar

import uvloop

logger = logging.getLogger(__name__)
T = TypeVar("T")

DEFAULT_THREAD_NAME = "SignalLoopThread"


class EventLoop:
    """
    EventLoop that owns an uvloop loop running in a dedicated daemon thread.
    It never reuses a loop that is already running in the caller's thread.
    """

    def __init__(self, thread_name: str = DEFAULT_THREAD_NAME) -> None:
        """Initialize the EventLoop."""
        self._thread_name = thread_name
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._thread: Optional[threading.Thread] = None
        self._ready = threading.Event()
        self._is_running = False
        logger.debug("EventLoop initialized")

    def start(self) -> None:
        """Start the loop thread if not already running."""
        if self._is_running:
            logger.warning("EventLoop is already running")
            return

        self._loop = uvloop.new_event_loop()
        self._ready.clear()
        self._thread = threading.Thread(
            target=self._run_loop, args=(self._loop,), name=self._thread_name, daemon=True
        )
        self._thread.start()
        if not self._ready.wait(timeout=2.0):
            error_msg = f"Event loop thread {self._thread_name} did not start in time"
            logger.error(error_msg)
            self._loop.call_soon_threadsafe(self._loop.stop)
            self._loop = None
            self._thread = None
            raise RuntimeError(error_msg)
        self._is_running = True
        logger.info(f"Started event loop in thread {self._thread_name}")

    def _run_loop(self, loop: asyncio.AbstractEventLoop) -> None:
        # Works on its own reference: shutdown() may clear self._loop first
        asyncio.set_event_loop(loop)
        loop.call_soon(self._ready.set)
        try:
            loop.run_forever()
        finally:
            self._cancel_pending_tasks(loop)
            loop.close()
            logger.debug("Event loop closed")

    def _cancel_pending_tasks(self, loop: asyncio.AbstractEventLoop) -> None:
        """Cancel tasks still parked on queues or cells when the loop stops."""
        pending = [task for task in asyncio.all_tasks(loop) if not task.done()]
        if not pending:
            return
        logger.info(f"Cancelling {len(pending)} pending task(s)")
        for task in pending:
            task.cancel()
        loop.run_until_complete(asyncio.gather(*pending, return_exceptions=True))

    def run_coroutine(
        self, coro: Coroutine[Any, Any, T]
    ) -> Optional["concurrent.futures.Future[T]"]:
        """Schedule a coroutine on the loop thread."""
        if not self._is_running:
            self.start()

        if self._loop is None or self._loop.is_closed():
            warnings.warn("No event loop available", RuntimeWarning)
            coro.close()
            return None

        try:
            return asyncio.run_coroutine_threadsafe(coro, self._loop)
        except RuntimeError as e:
            error_msg = f"Failed to run coroutine: {e}"
            logger.error(error_msg)
            warnings.warn(error_msg, RuntimeWarning)
            coro.close()
            return None

    def get_loop(self) -> Optional[asyncio.AbstractEventLoop]:
        """Get the loop, starting it if needed."""
        if not self._is_running:
            self.start()
        return self._loop

    def shutdown(self, timeout: float = 2.0) -> None:
        """
        Stop the loop and wait for its thread to finish.

        Args:
            timeout: Maximum time to wait for the thread in seconds
        """
        if not self._is_running:
            return

        try:
            logger.info("Shutting down event loop")
            if self._loop and not self._loop.is_closed():
                self._loop.call_soon_threadsafe(self._loop.stop)

            if self._thread and self._thread.is_alive():
                self._thread.join(timeout=timeout)
                if self._thread.is_alive():
                    logger.warning(
                        f"Event loop thread still finishing after {timeout} seconds"
                    )
        except RuntimeError as e:
            error_msg = f"Error during shutdown: {e}"
            logger.error(error_msg)
            warnings.warn(error_msg, RuntimeWarning)
        finally:
            self._loop = None
            self._thread = None
            self._is_running = False

    def is_running(self) -> bool:
        """Check if the event loop is running."""
        return self._is_running and self._loop is not None and not self._loop.is_closed()
