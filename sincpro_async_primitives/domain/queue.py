"""
Signal queue domain abstractions and value objects.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Optional, Protocol, TypeVar, runtime_checkable

T = TypeVar("T")


class PolicyKind(Enum):
    """How a queue admits values once it reaches its capacity."""

    UNBOUNDED = "unbounded"
    BLOCKING = "blocking"
    SLIDING = "sliding"
    DROPPING = "dropping"


class QueueState(Enum):
    """Lifecycle of a queue."""

    OPEN = "open"
    SHUTTING_DOWN = "shutting_down"
    CLOSED = "closed"


@dataclass(frozen=True)
class CapacityPolicy:
    """Capacity policy of a queue: a kind plus an optional bound."""

    kind: PolicyKind
    capacity: Optional[int] = None

    def __post_init__(self) -> None:
        if self.kind is PolicyKind.UNBOUNDED:
            if self.capacity is not None:
                raise ValueError("Unbounded policy takes no capacity")
            return
        if self.capacity is None or self.capacity < 1:
            raise ValueError(
                f"{self.kind.value} policy requires a capacity >= 1, got {self.capacity!r}"
            )

    @classmethod
    def unbounded(cls) -> "CapacityPolicy":
        return cls(PolicyKind.UNBOUNDED)

    @classmethod
    def blocking(cls, capacity: int) -> "CapacityPolicy":
        """Producers suspend while the queue is full."""
        return cls(PolicyKind.BLOCKING, capacity)

    @classmethod
    def sliding(cls, capacity: int) -> "CapacityPolicy":
        """New values evict the oldest ones while the queue is full."""
        return cls(PolicyKind.SLIDING, capacity)

    @classmethod
    def dropping(cls, capacity: int) -> "CapacityPolicy":
        """New values are discarded while the queue is full."""
        return cls(PolicyKind.DROPPING, capacity)

    @property
    def is_bounded(self) -> bool:
        return self.kind is not PolicyKind.UNBOUNDED

    def __str__(self) -> str:
        if not self.is_bounded:
            return self.kind.value
        return f"{self.kind.value}({self.capacity})"


@runtime_checkable
class SignalQueueInterface(Protocol[T]):
    """Protocol defining the signal queue interface."""

    async def offer(self, value: T) -> bool:
        """Offer a value; may suspend on a full blocking queue."""
        ...

    async def offer_all(self, values: Iterable[T]) -> bool:
        """Offer values in order, as sequential offers."""
        ...

    async def take(self) -> T:
        """Take the front value; suspends while the queue is empty."""
        ...

    def take_all(self) -> List[T]:
        """Drain and return the current contents without suspending."""
        ...

    def is_empty(self) -> bool:
        """Check if the queue is empty."""
        ...

    def size(self) -> int:
        """Number of buffered values."""
        ...

    def shutdown(self) -> None:
        """Close the queue and release every suspended caller."""
        ...
