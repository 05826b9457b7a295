"""
Infrastructure layer: asyncio implementations of the domain interfaces.
"""

from sincpro_async_primitives.infrastructure.cell_cache import CellCache
from sincpro_async_primitives.infrastructure.dispatcher import Dispatcher
from sincpro_async_primitives.infrastructure.event_loop import EventLoop
from sincpro_async_primitives.infrastructure.signal_queue import SignalQueue
from sincpro_async_primitives.infrastructure.sync_cell import SyncCell
from sincpro_async_primitives.infrastructure.worker import Worker

__all__ = ["CellCache", "Dispatcher", "EventLoop", "SignalQueue", "SyncCell", "Worker"]
