"""
Tests for the SyncCell component.

The SyncCell component should:
1. Be filled exactly once; race losers get False
2. Broadcast its outcome to every current and future waiter
3. Keep recoverable failures and defects apart
4. Run complete() producers once and complete_with() producers on every wait
"""

import asyncio

import pytest

from sincpro_async_primitives.domain.cell import SyncCellInterface
from sincpro_async_primitives.domain.outcome import Defect, Failure, Success
from sincpro_async_primitives.exceptions import CellDefectError, CellFailedError
from sincpro_async_primitives.infrastructure import SyncCell


@pytest.fixture
def cell():
    """Fixture that provides an empty cell."""
    return SyncCell.make()


def test_cell_should_implement_interface(cell):
    """Test that SyncCell follows the SyncCellInterface contract."""
    assert isinstance(cell, SyncCellInterface)


def test_new_cell_is_empty(cell):
    """Test the initial state."""
    assert not cell.is_done()
    assert cell.poll() is None


def test_only_first_fill_wins(cell):
    """Test that later succeed/fail/die calls do not alter the outcome."""
    assert cell.succeed(1) is True

    assert cell.succeed(2) is False
    assert cell.fail("error") is False
    assert cell.die("defect") is False

    assert cell.is_done()
    assert cell.poll() == Success(1)


def test_fail_and_die_store_distinct_outcomes():
    """Test that failures and defects are different outcome variants."""
    failed, dead = SyncCell(), SyncCell()

    failed.fail("bad input")
    dead.die("invariant broken")

    assert failed.poll() == Failure("bad input")
    assert dead.poll() == Defect("invariant broken")


def test_done_rejects_non_outcome(cell):
    """Test that done() only accepts Outcome variants."""
    with pytest.raises(TypeError):
        cell.done(42)
    assert not cell.is_done()


@pytest.mark.asyncio
async def test_wait_returns_value_after_fill(cell):
    """Test waiting on an already filled cell returns immediately."""
    cell.succeed("ready")

    assert await cell.wait() == "ready"
    assert await cell == "ready"


@pytest.mark.asyncio
async def test_wait_suspends_until_filled(cell):
    """Test that a waiter is released when a producer fills the cell."""
    waiter = asyncio.create_task(cell.wait())
    await asyncio.sleep(0.01)

    assert not waiter.done()
    assert cell.waiter_count() == 1

    cell.succeed(7)

    assert await waiter == 7
    assert cell.waiter_count() == 0


@pytest.mark.asyncio
async def test_all_waiters_observe_identical_outcome(cell):
    """Test broadcast to many concurrent waiters."""
    waiters = [asyncio.create_task(cell.wait()) for _ in range(10)]
    await asyncio.sleep(0.01)

    cell.succeed({"answer": 42})
    results = await asyncio.gather(*waiters)

    assert all(result is results[0] for result in results)
    assert results[0] == {"answer": 42}


@pytest.mark.asyncio
async def test_wait_raises_recoverable_failure(cell):
    """Test that Failure surfaces as CellFailedError with its payload."""
    cause = ValueError("invalid")
    cell.fail(cause)

    with pytest.raises(CellFailedError) as exc_info:
        await cell.wait()

    assert exc_info.value.error is cause
    assert exc_info.value.__cause__ is cause


@pytest.mark.asyncio
async def test_wait_raises_defect(cell):
    """Test that Defect surfaces as CellDefectError, not CellFailedError."""
    cell.die("corrupted state")

    with pytest.raises(CellDefectError) as exc_info:
        await cell.wait()

    assert exc_info.value.cause == "corrupted state"
    assert not isinstance(exc_info.value, CellFailedError)


@pytest.mark.asyncio
async def test_concurrent_fills_have_one_winner(cell):
    """Test that exactly one of many racing producers fills the cell."""

    async def producer(value):
        await asyncio.sleep(0)
        return cell.succeed(value)

    wins = await asyncio.gather(*(producer(i) for i in range(20)))

    assert wins.count(True) == 1
    winner = wins.index(True)
    assert await cell.wait() == winner


@pytest.mark.asyncio
async def test_complete_runs_producer_once(cell):
    """Test that complete() freezes the producer's result."""
    calls = []

    def producer():
        calls.append(1)
        return len(calls)

    assert await cell.complete(producer) is True

    assert await cell.wait() == 1
    assert await cell.wait() == 1
    assert len(calls) == 1


@pytest.mark.asyncio
async def test_complete_awaits_async_producer(cell):
    """Test that coroutine producers are awaited."""

    async def producer():
        await asyncio.sleep(0.01)
        return "computed"

    await cell.complete(producer)

    assert cell.poll() == Success("computed")


@pytest.mark.asyncio
async def test_complete_maps_producer_errors(cell):
    """Test how producer exceptions become outcomes."""
    failing, crashing, explicit = SyncCell(), SyncCell(), SyncCell()

    def fail():
        raise CellFailedError("not found")

    def crash():
        raise RuntimeError("unexpected")

    await failing.complete(fail)
    await crashing.complete(crash)
    await explicit.complete(lambda: Failure("explicit"))

    assert failing.poll() == Failure("not found")
    assert isinstance(crashing.poll(), Defect)
    assert isinstance(crashing.poll().cause, RuntimeError)
    assert explicit.poll() == Failure("explicit")


@pytest.mark.asyncio
async def test_complete_losers_are_discarded(cell):
    """Test that the first completion to finish wins and the rest are ignored."""

    async def slow():
        await asyncio.sleep(0.05)
        return "slow"

    async def fast():
        await asyncio.sleep(0.01)
        return "fast"

    results = await asyncio.gather(cell.complete(slow), cell.complete(fast))

    assert results == [False, True]
    assert await cell.wait() == "fast"


@pytest.mark.asyncio
async def test_complete_with_runs_producer_on_every_wait(cell):
    """Test that complete_with() re-executes the producer for each waiter."""
    counter = {"runs": 0}

    def producer():
        counter["runs"] += 1
        return counter["runs"]

    assert cell.complete_with(producer) is True
    assert counter["runs"] == 0
    assert cell.is_done()

    assert await cell.wait() == 1
    assert await cell.wait() == 2
    assert counter["runs"] == 2


@pytest.mark.asyncio
async def test_complete_with_releases_parked_waiters(cell):
    """Test that waiters parked before the binding each run the producer."""
    counter = {"runs": 0}

    async def producer():
        counter["runs"] += 1
        return "lazy"

    waiters = [asyncio.create_task(cell.wait()) for _ in range(3)]
    await asyncio.sleep(0.01)

    cell.complete_with(producer)

    assert await asyncio.gather(*waiters) == ["lazy", "lazy", "lazy"]
    assert counter["runs"] == 3


def test_complete_with_blocks_later_fills(cell):
    """Test that the first binding counts as the fill."""
    assert cell.complete_with(lambda: 1) is True

    assert cell.complete_with(lambda: 2) is False
    assert cell.succeed(3) is False
    assert cell.poll() is None


def test_is_bound_tells_bound_cell_from_empty_one(cell):
    """Test that a bound cell is distinguishable although poll() returns None."""
    filled = SyncCell.make()
    filled.succeed(1)

    assert not cell.is_bound()
    assert not filled.is_bound()

    cell.complete_with(lambda: 1)

    assert cell.is_bound()
    assert cell.is_done()
    assert cell.poll() is None


@pytest.mark.asyncio
async def test_cancelled_waiter_leaves_wait_list(cell):
    """Test that cancelling a parked waiter removes it."""
    waiter = asyncio.create_task(cell.wait())
    await asyncio.sleep(0.01)

    waiter.cancel()
    with pytest.raises(asyncio.CancelledError):
        await waiter

    assert cell.waiter_count() == 0
    assert cell.succeed(1) is True


@pytest.mark.asyncio
async def test_unfilled_cell_keeps_waiters_suspended(cell):
    """Test that cells have no shutdown: waiters stay parked until cancelled."""
    with pytest.raises(asyncio.TimeoutError):
        await asyncio.wait_for(cell.wait(), timeout=0.05)
