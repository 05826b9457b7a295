"""
Domain interface for the Dispatcher component.
"""

import concurrent.futures
from typing import Any, Coroutine, Optional, Protocol, TypeVar, runtime_checkable

T = TypeVar("T")


@runtime_checkable
class DispatcherInterface(Protocol):
    """
    Interface for the Dispatcher component.
    Defines the contract that all Dispatcher implementations must follow.
    """

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
        ...

    def execute_async(
        self, task: Coroutine[Any, Any, T]
    ) -> "concurrent.futures.Future[T]":
        """
        Submit an async task without waiting for it.

        Returns:
            A future that resolves with the task result
        """
        ...
