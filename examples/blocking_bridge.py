"""
Example demonstrating cells and queues driven from synchronous code.
"""

import logging
import threading
import time

from sincpro_async_primitives import make_cell, make_queue, run_async_task, shutdown
from sincpro_async_primitives.domain.queue import CapacityPolicy

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def main():
    cell = make_cell()
    queue = make_queue(CapacityPolicy.dropping(2))

    try:
        # Waiting on a cell from the main thread while another thread fills it
        waiting = run_async_task(cell.wait(), fire_and_forget=True)

        async def fill() -> bool:
            return cell.succeed("hello from another thread")

        filler = threading.Thread(target=lambda: run_async_task(fill()))
        time.sleep(0.1)
        filler.start()
        logger.info(f"Cell value: {waiting.result(timeout=1.0)}")
        filler.join()

        # Dropping queue keeps the first two values only
        run_async_task(queue.offer_all([1, 2, 3, 4]))

        async def drain() -> list:
            return queue.take_all()

        logger.info(f"Queue contents: {run_async_task(drain())}")

        # Timeout on a take that never completes
        try:
            run_async_task(queue.take(), timeout=0.5)
        except TimeoutError:
            logger.warning("Take timed out as expected")

    finally:
        # Clean shutdown
        shutdown()


if __name__ == "__main__":
    main()
