import asyncio
import logging
from typing import List, Optional, Tuple

import aiofiles.os

from ring_to_tv.api_integrations.pipup import PipupAPI
from ring_to_tv.api_integrations.ring import RingSession
from ring_to_tv.cameras import Camera, list_cameras, select_camera
from ring_to_tv.utils.config import Config
from ring_to_tv.utils.paths import get_error_image_path, get_shared_data_path
from ring_to_tv.task_processors import DingDispatcher, DingPoller

logger = logging.getLogger(__name__)

START_TITLE = "ring-to-android-tv"
START_MESSAGE = "Ring notifications started!"


class RingToTvApp:
    """
    Process-scoped context that wires the Ring session, the per-camera pollers
    and the ding dispatcher together and owns their lifecycle.
    """

    def __init__(
        self,
        config: Config,
        refresh_token: str,
        session: Optional[RingSession] = None,
        notifier: Optional[PipupAPI] = None,
    ):
        """
        Initialize the app.

        Args:
            config: Configuration object
            refresh_token: Ring refresh token
            session: Ring session (optional, will be created if not provided)
            notifier: PiPup client (optional, will be created if not provided)
        """
        self.config = config
        self.session = session or RingSession(
            refresh_token,
            display_name=config.ring.display_name,
            poll_interval=config.ring.poll_interval_seconds,
        )
        self.notifier = notifier or PipupAPI(config.tv)

        if config.app.snapshot_dir:
            self.snapshot_dir = str(config.resolve_path(config.app.snapshot_dir))
        else:
            self.snapshot_dir = str(get_shared_data_path() / "snapshots")

        self.cameras: List[Tuple[str, Camera]] = []
        self.dispatcher: Optional[DingDispatcher] = None
        self.pollers: List[DingPoller] = []

        self._shutdown_event = asyncio.Event()

    async def initialize(self):
        """
        Authenticate and discover cameras.

        Raises:
            AuthError, NetworkError: Startup failures are left to the caller
        """
        logger.info("Initializing RingToTvApp")
        await self.session.authenticate()
        self.cameras = await list_cameras(self.session)
        for location_name, camera in self.cameras:
            logger.info(f"Found camera {camera} at {location_name}")

    async def list_camera_lines(self) -> List[str]:
        """Return printable lines for every location and camera with their indices."""
        locations = await self.session.get_locations()
        lines = []
        for location_index, location in enumerate(locations):
            lines.append(f"Location {location_index}: {location.name}")
            for camera_index, camera in enumerate(location.cameras):
                lines.append(f"  [{location_index},{camera_index}] {camera.name} ({camera.model})")
        return lines

    async def run(self):
        """Subscribe to every camera and forward dings until shutdown is requested."""
        logger.info("Running RingToTvApp")
        await self.initialize()

        if not self.cameras:
            logger.warning("No cameras found on this Ring account; nothing to watch")

        self.dispatcher = DingDispatcher(
            cameras={camera.id: camera for _, camera in self.cameras},
            notifier=self.notifier,
            snapshot_dir=self.snapshot_dir,
            snapshot_timeout=self.config.ring.snapshot_timeout_seconds,
            timezone=self.config.app.timezone,
        )
        await self.dispatcher.start()

        self.pollers = [
            DingPoller(camera, self.dispatcher, poll_interval=self.session.poll_interval)
            for _, camera in self.cameras
        ]
        for poller in self.pollers:
            await poller.start()

        if self.config.app.notify_on_start:
            await self.notifier.send_notification(START_TITLE, START_MESSAGE)

        await self._watch_pollers()

    async def _watch_pollers(self):
        """Wait for shutdown, restarting any poller whose loop ends on its own."""
        while not self._shutdown_event.is_set():
            shutdown_task = asyncio.create_task(self._shutdown_event.wait())
            poller_tasks = {poller.task for poller in self.pollers if poller.task}
            done, _ = await asyncio.wait(
                poller_tasks | {shutdown_task}, return_when=asyncio.FIRST_COMPLETED
            )
            if shutdown_task not in done:
                shutdown_task.cancel()

            if self._shutdown_event.is_set():
                break

            for poller in self.pollers:
                if poller.task in done:
                    logger.error(
                        f"Ding subscription for {poller.camera.name} ended unexpectedly; resubscribing"
                    )
                    await asyncio.sleep(poller.poll_interval)
                    await poller.start()

    def request_shutdown(self):
        """Ask run() to return; safe to call from a signal handler."""
        logger.info("Shutdown requested")
        self._shutdown_event.set()

    async def run_test_snapshot(
        self, location_index: int = 0, camera_index: int = 0, exit_after: bool = False
    ) -> bool:
        """
        Take one snapshot from the selected camera and send it to the TV.

        Returns:
            bool: True if the notification was delivered
        """
        await self.session.authenticate()
        camera = await select_camera(self.session, location_index, camera_index)
        logger.info(f"Taking test snapshot from {camera}")

        dispatcher = DingDispatcher(
            cameras={camera.id: camera},
            notifier=self.notifier,
            snapshot_dir=self.snapshot_dir,
            snapshot_timeout=self.config.ring.snapshot_timeout_seconds,
            timezone=self.config.app.timezone,
        )
        path = await dispatcher.capture_for_camera(camera)
        try:
            if path:
                logger.info(f"Snapshot size: {await aiofiles.os.path.getsize(path) // 1024} kb")
                return await self.notifier.send_notification(
                    "Test Snapshot", "This is a test snapshot message!", path, exit_after=exit_after
                )
            return await self.notifier.send_notification(
                "Test Snapshot Failed",
                "An error occurred trying to get a snapshot!",
                str(get_error_image_path()),
                exit_after=exit_after,
            )
        finally:
            if path:
                await dispatcher.remove_snapshot(path)

    async def shutdown(self):
        """Shut down the application."""
        logger.info("Shutting down RingToTvApp")
        self._shutdown_event.set()

        for poller in self.pollers:
            await poller.stop()

        if self.dispatcher:
            await self.dispatcher.stop()
            await self.dispatcher.drain(self.config.app.shutdown_grace_seconds)

        await self.notifier.close()
        await self.session.close()
        logger.info("RingToTvApp shutdown complete")
