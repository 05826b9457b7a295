"""
Base test module for the public entry points.
"""

import concurrent.futures
import threading
import time

import pytest

import sincpro_async_primitives
from sincpro_async_primitives import (
    CapacityPolicy,
    QueueShutdownError,
    SignalQueue,
    SyncCell,
    make_cell,
    make_queue,
    run_async_task,
    shutdown,
)
from sincpro_async_primitives import core


@pytest.fixture(autouse=True)
def shared_dispatcher_cleanup():
    """Stop the shared dispatcher after every test."""
    yield
    shutdown()


def test_make_cell_returns_empty_cell() -> None:
    """Test the cell factory."""
    cell = make_cell()
    assert isinstance(cell, SyncCell)
    assert not cell.is_done()


def test_make_queue_defaults_to_unbounded() -> None:
    """Test the queue factory without a policy."""
    queue = make_queue()
    assert isinstance(queue, SignalQueue)
    assert queue.capacity is None


def test_make_queue_with_policy() -> None:
    """Test the queue factory with a policy."""
    queue = make_queue(CapacityPolicy.sliding(3))
    assert queue.policy == CapacityPolicy.sliding(3)


def test_run_async_task_waits_for_cell_filled_from_another_thread() -> None:
    """Test that synchronous code can wait on a cell another thread fills."""
    cell = make_cell()

    async def fill() -> bool:
        return cell.succeed("filled")

    def filler() -> None:
        time.sleep(0.05)
        run_async_task(fill())

    thread = threading.Thread(target=filler)
    thread.start()
    result = run_async_task(cell.wait(), timeout=1.0)
    thread.join()

    assert result == "filled"


def test_run_async_task_timeout() -> None:
    """Test that a take on an empty queue respects the timeout."""
    queue = make_queue()

    with pytest.raises(TimeoutError):
        run_async_task(queue.take(), timeout=0.1)


def test_fire_and_forget_returns_future() -> None:
    """Test that fire-and-forget mode returns a Future immediately."""
    queue = make_queue()

    future = run_async_task(queue.take(), fire_and_forget=True)
    assert isinstance(future, concurrent.futures.Future)
    assert not future.done()

    run_async_task(queue.offer("item"))
    assert future.result(timeout=1.0) == "item"


def test_shutdown_of_queue_reaches_blocked_sync_caller() -> None:
    """Test that a synchronous consumer is released by queue shutdown."""
    queue = make_queue()
    future = run_async_task(queue.take(), fire_and_forget=True)

    async def close() -> None:
        queue.shutdown()

    run_async_task(close())

    with pytest.raises(QueueShutdownError):
        future.result(timeout=1.0)


def test_shutdown_resets_shared_dispatcher() -> None:
    """Test that shutdown() discards the shared dispatcher and it is recreated on demand."""
    first = core.get_dispatcher()
    shutdown()
    assert core._dispatcher is None

    second = core.get_dispatcher()
    assert second is not first
    assert second.worker.is_running()


def test_shutdown_without_dispatcher_is_noop() -> None:
    """Test shutdown() before any task ran."""
    shutdown()
    shutdown()
    assert core._dispatcher is None


def test_package_exports() -> None:
    """Test that the main names are exported at package level."""
    for name in ("SyncCell", "SignalQueue", "CellCache", "Success", "Failure", "Defect"):
        assert name in sincpro_async_primitives.__all__
