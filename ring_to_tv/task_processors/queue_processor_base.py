"""Base class for queue processors that process work items."""

import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Any

logger = logging.getLogger(__name__)


class QueueProcessor(ABC):
    """
    Base class for processors that handle work queues.
    Items are consumed one at a time by a single consumer task.
    """

    def __init__(self):
        self._queue = None  # Defer creation until start()
        self._processor_task = None
        self._shutdown_event = asyncio.Event()

        logger.info(f"Initialized {self.__class__.__name__}")

    @abstractmethod
    async def process_item(self, item: Any) -> None:
        """Process a single work item."""
        pass

    async def add_work(self, item: Any) -> None:
        """Add work to the processor's queue."""
        if self._queue is None:
            self._queue = asyncio.Queue()

        await self._queue.put(item)
        logger.debug(f"{self.__class__.__name__}: Added item to queue: {item}")

    async def start(self) -> None:
        """Start the queue processor."""
        logger.info(f"Starting {self.__class__.__name__}")

        if self._queue is None:
            self._queue = asyncio.Queue()

        self._shutdown_event.clear()
        self._processor_task = asyncio.create_task(self._run())

    async def stop(self) -> None:
        """Stop the queue processor."""
        logger.info(f"Stopping {self.__class__.__name__}")
        self._shutdown_event.set()

        # Signal queue consumer to exit by putting a sentinel value
        if self._queue is not None:
            await self._queue.put(None)

        if self._processor_task:
            self._processor_task.cancel()
            try:
                await self._processor_task
            except asyncio.CancelledError:
                pass

        # Drop anything still queued; nothing is persisted between runs
        if self._queue is not None:
            dropped = 0
            while not self._queue.empty():
                item = self._queue.get_nowait()
                if item is not None:
                    dropped += 1
            if dropped:
                logger.warning(f"{self.__class__.__name__}: Dropped {dropped} queued item(s) on shutdown")

        self._queue = None

    async def _run(self) -> None:
        """Main processing loop."""
        while not self._shutdown_event.is_set():
            item = await self._queue.get()

            # Sentinel value (None) means exit cleanly
            if item is None:
                logger.debug(f"{self.__class__.__name__}: Received sentinel value, exiting")
                break

            try:
                await self.process_item(item)
            except Exception as e:
                logger.error(f"{self.__class__.__name__}: Error processing item {item}: {e}")
            finally:
                self._queue.task_done()

