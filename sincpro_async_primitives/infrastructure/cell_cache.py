"""
CellCache component: memoizing lookups with one SyncCell per key.
"""

import asyncio
import logging
from typing import Any, Callable, Dict, Generic, Hashable, List, TypeVar

from sincpro_async_primitives.infrastructure.sync_cell import SyncCell

logger = logging.getLogger(__name__)
K = TypeVar("K", bound=Hashable)
V = TypeVar("V")


class CellCache(Generic[K, V]):
    """
    Cache that computes each key at most once, even under concurrent access.

    The first caller for a key inserts an empty SyncCell and runs the
    computation into it; everyone else finds the cell and waits on it.
    Lookup and insertion happen without a suspension point in between, so
    two tasks can never both start computing the same key.
    """

    def __init__(self, compute: Callable[[K], Any]) -> None:
        """
        Initialize the cache.

        Args:
            compute: Function of the key, sync or async, producing the value
        """
        self._compute = compute
        self._cells: Dict[K, SyncCell[V]] = {}

    async def get(self, key: K) -> V:
        """
        Return the value for key, computing it on first access.

        Raises:
            CellFailedError: If the computation failed
            CellDefectError: If the computation raised unexpectedly
        """
        cell, created = self._get_or_insert(key)
        if created:
            logger.debug(f"Computing value for key {key!r}")
            try:
                await cell.complete(lambda: self._compute(key))
            except asyncio.CancelledError:
                # Nobody else will fill the cell; release its waiters.
                if self._cells.get(key) is cell:
                    del self._cells[key]
                cell.die(f"Computation for key {key!r} was cancelled")
                raise
        return await cell.wait()

    def _get_or_insert(self, key: K):
        cell = self._cells.get(key)
        if cell is not None:
            return cell, False
        cell = SyncCell()
        self._cells[key] = cell
        return cell, True

    def invalidate(self, key: K) -> bool:
        """Forget the cell for key. Tasks already waiting on it are unaffected."""
        return self._cells.pop(key, None) is not None

    def clear(self) -> None:
        self._cells.clear()

    def keys(self) -> List[K]:
        return list(self._cells)

    def __contains__(self, key: object) -> bool:
        return key in self._cells

    def __len__(self) -> int:
        return len(self._cells)
