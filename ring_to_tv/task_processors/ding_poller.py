import logging
from datetime import datetime, timedelta
from typing import Dict

import pytz

from ring_to_tv.cameras.base import Camera
from .polling_processor_base import PollingProcessor

logger = logging.getLogger(__name__)

# Ring keeps a ding active for a few minutes; forget ids well after that
SEEN_DING_RETENTION = timedelta(minutes=10)


class DingPoller(PollingProcessor):
    """
    Event subscription for one camera.
    Polls the camera for active dings and hands each new one to the dispatcher.
    """

    def __init__(self, camera: Camera, dispatcher, poll_interval: float = 2):
        super().__init__(poll_interval)
        self.camera = camera
        self.dispatcher = dispatcher
        self._seen_dings: Dict[str, datetime] = {}

    async def discover_work(self) -> None:
        """Poll the camera for dings; errors are logged and polling continues."""
        try:
            dings = await self.camera.get_active_dings()
        except Exception as e:
            logger.error(f"DING_POLLER: Error polling dings for {self.camera.name}: {e}")
            return

        now = datetime.now(pytz.utc)
        self._forget_old_dings(now)

        for ding in dings:
            if ding.id in self._seen_dings:
                continue
            self._seen_dings[ding.id] = now
            await self.dispatcher.add_work(ding)

    def _forget_old_dings(self, now: datetime) -> None:
        expired = [
            ding_id
            for ding_id, seen_at in self._seen_dings.items()
            if now - seen_at > SEEN_DING_RETENTION
        ]
        for ding_id in expired:
            del self._seen_dings[ding_id]
