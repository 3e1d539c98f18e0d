import asyncio
import logging
import os
import uuid
from typing import Optional, Set, Tuple

import aiofiles
import aiofiles.os
import pytz

from ring_to_tv.cameras.base import Camera
from ring_to_tv.models import Ding, DingKind, NotificationRequest
from ring_to_tv.utils.paths import get_error_image_path
from .queue_processor_base import QueueProcessor

logger = logging.getLogger(__name__)


def describe_ding(ding: Ding) -> Tuple[str, str]:
    """Map a ding to the (title, message) shown on the TV."""
    if ding.kind == DingKind.MOTION:
        return "Motion Detected", f"Motion detected at {ding.camera_name}!"
    if ding.kind == DingKind.DING:
        return "Doorbell Ring", f"Doorbell rung at {ding.camera_name}!"
    return "Video Started", f"Video started at {ding.camera_name}"


def _event_label(ding: Ding) -> str:
    if ding.kind == DingKind.MOTION:
        return "Motion detected"
    if ding.kind == DingKind.DING:
        return "Doorbell pressed"
    return f"Video started ({ding.kind_name})"


class DingDispatcher(QueueProcessor):
    """
    Turns each ding into exactly one TV notification.

    Dings are queued by the pollers; every dequeued ding is handled in its own
    task so a slow snapshot never holds up the next event.
    """

    def __init__(
        self,
        cameras,
        notifier,
        snapshot_dir: str,
        snapshot_timeout: float = 15.0,
        timezone: str = "UTC",
        error_image_path: Optional[str] = None,
    ):
        """
        Initialize the dispatcher.

        Args:
            cameras: Cameras keyed by camera id
            notifier: Object with an async send_notification(title, message, image_path)
            snapshot_dir: Directory for per-event snapshot files
            snapshot_timeout: Seconds to wait for a snapshot before falling back
            timezone: Timezone used when logging arrival times
            error_image_path: Image sent when no snapshot could be taken
        """
        super().__init__()
        self.cameras = dict(cameras)
        self.notifier = notifier
        self.snapshot_dir = snapshot_dir
        self.snapshot_timeout = snapshot_timeout
        self.timezone = pytz.timezone(timezone)
        self.error_image_path = error_image_path or str(get_error_image_path())
        self._in_flight: Set[asyncio.Task] = set()

    async def process_item(self, ding: Ding) -> None:
        task = asyncio.create_task(self.handle_ding(ding))
        self._in_flight.add(task)
        task.add_done_callback(self._in_flight.discard)

    async def handle_ding(self, ding: Ding) -> Optional[NotificationRequest]:
        """
        Fetch a snapshot for the ding and send its notification.

        Never raises; failures are logged.

        Returns:
            The notification that was sent, or None if sending itself blew up
        """
        received_at = ding.received_at.astimezone(self.timezone)
        logger.info(
            f"{_event_label(ding)} on {ding.camera_name} camera. Ding id {ding.id}. "
            f"Received at {received_at.strftime('%Y-%m-%d %H:%M:%S %Z')}"
        )

        title, message = describe_ding(ding)
        snapshot_path = await self._capture_snapshot(ding)
        request = NotificationRequest(
            title=title,
            message=message,
            image_path=snapshot_path or self.error_image_path,
        )

        try:
            await self.notifier.send_notification(
                request.title, request.message, request.image_path
            )
            return request
        except Exception as e:
            logger.error(f"Error sending notification for {ding}: {e}", exc_info=True)
            return None
        finally:
            if snapshot_path:
                await self.remove_snapshot(snapshot_path)

    async def _capture_snapshot(self, ding: Ding) -> Optional[str]:
        """Save a snapshot for the ding to its own file; None on any failure."""
        camera: Optional[Camera] = self.cameras.get(ding.camera_id)
        if camera is None:
            logger.error(f"Unable to get snapshot: no camera with id {ding.camera_id} for {ding}")
            return None
        return await self.capture_for_camera(camera, ding.id)

    async def capture_for_camera(self, camera: Camera, tag: str = "test") -> Optional[str]:
        """Fetch a snapshot with a bounded wait and write it to a uniquely named file."""
        try:
            image = await asyncio.wait_for(camera.get_snapshot(), timeout=self.snapshot_timeout)
        except asyncio.TimeoutError:
            logger.warning(
                f"Unable to get snapshot from {camera.name}: timed out after {self.snapshot_timeout}s"
            )
            return None
        except Exception as e:
            logger.warning(f"Unable to get snapshot from {camera.name}: {e}")
            return None

        path = os.path.join(
            self.snapshot_dir,
            f"snapshot_{camera.id}_{tag}_{uuid.uuid4().hex[:8]}.jpg",
        )
        try:
            await aiofiles.os.makedirs(self.snapshot_dir, exist_ok=True)
            async with aiofiles.open(path, "wb") as f:
                await f.write(image)
        except OSError as e:
            logger.error(f"Unable to save snapshot from {camera.name} to {path}: {e}")
            return None

        logger.info(f"Snapshot from {camera.name} saved to {path}: {len(image) // 1024} kb")
        return path

    async def remove_snapshot(self, path: str) -> None:
        try:
            await aiofiles.os.remove(path)
        except OSError as e:
            logger.warning(f"Could not remove snapshot {path}: {e}")

    async def drain(self, grace_period: float) -> None:
        """Wait up to grace_period seconds for in-flight dings, then cancel the rest."""
        if not self._in_flight:
            return
        pending_tasks = set(self._in_flight)
        logger.info(f"Waiting up to {grace_period}s for {len(pending_tasks)} in-flight notification(s)")
        done, pending = await asyncio.wait(pending_tasks, timeout=grace_period)
        for task in pending:
            task.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)
            logger.warning(f"Cancelled {len(pending)} notification(s) still running at shutdown")

    def get_in_flight_count(self) -> int:
        return len(self._in_flight)
