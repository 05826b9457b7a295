"""
Example: a producer feeding two workers through a bounded queue.
"""

import asyncio
import logging

from sincpro_async_primitives import QueueShutdownError, SignalQueue, SyncCell

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


async def worker(name: str, queue: SignalQueue[int]) -> None:
    """Take items until the queue is shut down."""
    while True:
        try:
            item = await queue.take()
        except QueueShutdownError:
            logger.info(f"{name} interrupted by shutdown")
            return
        logger.info(f"{name} processing item {item}")
        await asyncio.sleep(0.1)


async def main() -> None:
    queue: SignalQueue[int] = SignalQueue.bounded(2)
    started: SyncCell[str] = SyncCell()

    workers = [asyncio.create_task(worker(f"worker-{i}", queue)) for i in range(2)]

    async def producer() -> None:
        started.succeed("producer started")
        for item in range(1, 7):
            await queue.offer(item)
            logger.info(f"Offered item {item}")

    producing = asyncio.create_task(producer())
    logger.info(await started.wait())

    await producing
    while not queue.is_empty():
        await asyncio.sleep(0.05)
    await asyncio.sleep(0.2)

    queue.shutdown()
    await asyncio.gather(*workers)


if __name__ == "__main__":
    asyncio.run(main())
