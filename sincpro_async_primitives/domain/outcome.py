"""
Outcome value objects stored by a SyncCell.

An Outcome is a closed union of three variants:

- Success: the computation produced a value.
- Failure: the computation failed with a recoverable, typed error.
- Defect: the computation hit an unrecoverable condition.
"""

from dataclasses import dataclass
from typing import Any, Generic, TypeVar, Union

V = TypeVar("V")


@dataclass(frozen=True)
class Success(Generic[V]):
    """Successful outcome carrying a value."""

    value: V


@dataclass(frozen=True)
class Failure:
    """Recoverable failure carrying an error payload."""

    error: Any


@dataclass(frozen=True)
class Defect:
    """Unrecoverable defect carrying its cause."""

    cause: Any


Outcome = Union[Success[Any], Failure, Defect]

OUTCOME_TYPES = (Success, Failure, Defect)


def is_outcome(value: Any) -> bool:
    """Check whether a value is one of the Outcome variants."""
    return isinstance(value, OUTCOME_TYPES)
