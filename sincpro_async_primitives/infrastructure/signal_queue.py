"""
SignalQueue component: a FIFO channel between asyncio producers and consumers.
"""

import asyncio
import logging
from collections import deque
from typing import Deque, Generic, Iterable, List, Optional, Tuple, TypeVar

from sincpro_async_primitives.domain.queue import CapacityPolicy, PolicyKind, QueueState
from sincpro_async_primitives.exceptions import QueueShutdownError

logger = logging.getLogger(__name__)
T = TypeVar("T")

# A parked producer and the value it wants to enqueue. The future is None for
# a value that was already accepted and only waits for a free slot.
_PendingOffer = Tuple[Optional["asyncio.Future[bool]"], T]


class SignalQueue(Generic[T]):
    """
    Multi-producer, multi-consumer FIFO queue with a capacity policy.

    Only two operations suspend: offer() on a full blocking queue and take()
    on an empty queue. Suspended callers are released first-come,
    first-served. shutdown() releases all of them with QueueShutdownError
    and makes every later operation fail fast.
    """

    def __init__(self, policy: Optional[CapacityPolicy] = None) -> None:
        """
        Initialize the queue.

        Args:
            policy: Capacity policy, unbounded when omitted
        """
        self._policy = policy or CapacityPolicy.unbounded()
        self._items: Deque[T] = deque()
        self._takers: Deque["asyncio.Future[T]"] = deque()
        self._offerers: Deque[_PendingOffer] = deque()
        self._shutdown_waiters: List["asyncio.Future[None]"] = []
        self._state = QueueState.OPEN
        logger.debug(f"SignalQueue created with {self._policy} policy")

    @classmethod
    def make(cls, policy: Optional[CapacityPolicy] = None) -> "SignalQueue[T]":
        return cls(policy)

    @classmethod
    def unbounded(cls) -> "SignalQueue[T]":
        return cls(CapacityPolicy.unbounded())

    @classmethod
    def bounded(cls, capacity: int) -> "SignalQueue[T]":
        return cls(CapacityPolicy.blocking(capacity))

    @classmethod
    def sliding(cls, capacity: int) -> "SignalQueue[T]":
        return cls(CapacityPolicy.sliding(capacity))

    @classmethod
    def dropping(cls, capacity: int) -> "SignalQueue[T]":
        return cls(CapacityPolicy.dropping(capacity))

    @property
    def policy(self) -> CapacityPolicy:
        return self._policy

    @property
    def capacity(self) -> Optional[int]:
        """Maximum number of buffered values, None when unbounded."""
        return self._policy.capacity

    @property
    def state(self) -> QueueState:
        return self._state

    # Producers

    async def offer(self, value: T) -> bool:
        """
        Offer a value to the queue.

        Args:
            value: Value to enqueue

        Returns:
            True if the value entered the queue, False if a dropping queue
            discarded it

        Raises:
            QueueShutdownError: If the queue is shut down before or while
                the caller is suspended
        """
        self._ensure_open()

        if self._hand_to_taker(value):
            return True

        kind = self._policy.kind
        if kind is PolicyKind.UNBOUNDED or len(self._items) < self._policy.capacity:
            self._items.append(value)
            return True

        if kind is PolicyKind.SLIDING:
            self._items.append(value)
            while len(self._items) > self._policy.capacity:
                evicted = self._items.popleft()
                logger.debug(f"Sliding queue evicted {evicted!r}")
            return True

        if kind is PolicyKind.DROPPING:
            logger.debug(f"Dropping queue discarded {value!r}")
            return False

        return await self._park_offer(value)

    async def offer_all(self, values: Iterable[T]) -> bool:
        """
        Offer several values in order, as if by sequential offer() calls.

        Returns:
            True if every value entered the queue
        """
        self._ensure_open()
        accepted = True
        for value in values:
            if not await self.offer(value):
                accepted = False
        return accepted

    async def _park_offer(self, value: T) -> bool:
        waiter: "asyncio.Future[bool]" = asyncio.get_running_loop().create_future()
        entry: _PendingOffer = (waiter, value)
        self._offerers.append(entry)
        logger.debug(f"Queue full, producer parked ({len(self._offerers)} waiting)")
        try:
            return await waiter
        except asyncio.CancelledError:
            if entry in self._offerers:
                self._offerers.remove(entry)
            elif waiter.done() and not waiter.cancelled() and waiter.exception() is None:
                # Admitted before the producer resumed; withdraw the value.
                self._withdraw(value)
            raise

    # Consumers

    async def take(self) -> T:
        """
        Remove and return the front value, waiting while the queue is empty.

        Raises:
            QueueShutdownError: If the queue is shut down before or while
                the caller is suspended
        """
        self._ensure_open()

        if self._items:
            value = self._items.popleft()
            self._admit_offerers()
            return value

        waiter: "asyncio.Future[T]" = asyncio.get_running_loop().create_future()
        self._takers.append(waiter)
        try:
            return await waiter
        except asyncio.CancelledError:
            if waiter in self._takers:
                self._takers.remove(waiter)
            elif waiter.done() and not waiter.cancelled() and waiter.exception() is None:
                # Cancelled after a value was handed over; keep the value.
                self._restore_front(waiter.result())
            raise

    def take_all(self) -> List[T]:
        """Drain the queue and return its contents in order. Never suspends."""
        self._ensure_open()
        values = list(self._items)
        self._items.clear()
        self._admit_offerers()
        return values

    def take_up_to(self, max_items: int) -> List[T]:
        """Remove and return at most max_items values from the front."""
        if max_items < 0:
            raise ValueError(f"max_items must be >= 0, got {max_items}")
        self._ensure_open()
        values = []
        while self._items and len(values) < max_items:
            values.append(self._items.popleft())
        self._admit_offerers()
        return values

    def poll(self) -> Optional[T]:
        """Remove and return the front value, or None if the queue is empty."""
        self._ensure_open()
        if not self._items:
            return None
        value = self._items.popleft()
        self._admit_offerers()
        return value

    # Queries

    def size(self) -> int:
        """Number of buffered values."""
        self._ensure_open()
        return len(self._items)

    def is_empty(self) -> bool:
        self._ensure_open()
        return not self._items

    def taker_count(self) -> int:
        """Number of consumers suspended in take()."""
        return len(self._takers)

    def offerer_count(self) -> int:
        """Number of producers suspended in offer()."""
        return sum(1 for waiter, _ in self._offerers if waiter is not None)

    def is_shutdown(self) -> bool:
        return self._state is not QueueState.OPEN

    # Lifecycle

    def shutdown(self) -> None:
        """
        Shut the queue down.

        Every suspended producer and consumer is released with
        QueueShutdownError and buffered values are discarded. Calling it
        again has no further effect.
        """
        if self._state is not QueueState.OPEN:
            logger.debug("Queue already shut down")
            return

        self._state = QueueState.SHUTTING_DOWN
        interrupted = 0

        while self._takers:
            waiter = self._takers.popleft()
            if not waiter.done():
                waiter.set_exception(QueueShutdownError("Queue was shut down"))
                interrupted += 1

        while self._offerers:
            waiter, _ = self._offerers.popleft()
            if waiter is not None and not waiter.done():
                waiter.set_exception(QueueShutdownError("Queue was shut down"))
                interrupted += 1

        discarded = len(self._items)
        self._items.clear()
        self._state = QueueState.CLOSED

        for waiter in self._shutdown_waiters:
            if not waiter.done():
                waiter.set_result(None)
        self._shutdown_waiters.clear()

        logger.debug(
            f"Queue shut down, interrupted {interrupted} waiter(s), "
            f"discarded {discarded} value(s)"
        )

    async def await_shutdown(self) -> None:
        """Wait until the queue is shut down."""
        if self._state is QueueState.CLOSED:
            return
        waiter: "asyncio.Future[None]" = asyncio.get_running_loop().create_future()
        self._shutdown_waiters.append(waiter)
        try:
            await waiter
        except asyncio.CancelledError:
            if waiter in self._shutdown_waiters:
                self._shutdown_waiters.remove(waiter)
            raise

    # Internals

    def _ensure_open(self) -> None:
        if self._state is not QueueState.OPEN:
            raise QueueShutdownError("Queue is shut down")

    def _hand_to_taker(self, value: T) -> bool:
        """Give value straight to the oldest suspended consumer, if any."""
        while self._takers:
            waiter = self._takers.popleft()
            if not waiter.done():
                waiter.set_result(value)
                return True
        return False

    def _admit_offerers(self) -> None:
        """Move parked values into freed slots in the order they were offered."""
        while self._offerers and len(self._items) < self._policy.capacity:
            waiter, value = self._offerers.popleft()
            if waiter is None:
                self._items.append(value)
            elif not waiter.done():
                self._items.append(value)
                waiter.set_result(True)

    def _withdraw(self, value: T) -> None:
        """Remove the newest buffered occurrence of value and refill the slot."""
        for index in range(len(self._items) - 1, -1, -1):
            if self._items[index] is value:
                del self._items[index]
                self._admit_offerers()
                return
        logger.debug(f"Value {value!r} already consumed, offer stays delivered")

    def _restore_front(self, value: T) -> None:
        """Put back a value whose consumer was cancelled before receiving it."""
        if self._state is not QueueState.OPEN or self._hand_to_taker(value):
            return

        kind = self._policy.kind
        if kind is PolicyKind.UNBOUNDED or len(self._items) < self._policy.capacity:
            self._items.appendleft(value)
        elif kind is PolicyKind.BLOCKING:
            self._items.appendleft(value)
            newest = self._items.pop()
            self._offerers.appendleft((None, newest))
        else:
            # Full sliding or dropping queue: the value is the oldest one,
            # so it is the one the policy discards.
            logger.debug(f"{kind.value} queue discarded restored value {value!r}")

    def __len__(self) -> int:
        return self.size()

    def __repr__(self) -> str:
        return (
            f"SignalQueue(policy={self._policy}, state={self._state.value}, "
            f"size={len(self._items)}, takers={len(self._takers)}, "
            f"offerers={len(self._offerers)})"
        )
