import logging
from typing import Any, Dict, List

from ring_to_tv.api_integrations.ring import SNAPSHOT_BASE_URL
from ring_to_tv.exceptions import BridgeError, SnapshotError
from ring_to_tv.models import Ding

from .base import Camera

logger = logging.getLogger(__name__)


class RingCamera(Camera):
    """Ring doorbell or stick-up camera reached through a RingSession."""

    def __init__(
        self,
        session,
        camera_id: str,
        name: str,
        model: str = "unknown",
        location_id: str = "",
        battery_powered: bool = False,
    ):
        self.session = session
        self.id = camera_id
        self.name = name
        self.model = model
        self.location_id = location_id
        self.battery_powered = battery_powered

    @classmethod
    def from_api(cls, session, device: Dict[str, Any]) -> "RingCamera":
        """Build a camera from an entry of the ring_devices endpoint."""
        return cls(
            session=session,
            camera_id=str(device["id"]),
            name=device.get("description") or f"Camera {device['id']}",
            model=device.get("kind", "unknown"),
            location_id=str(device.get("location_id", "")),
            battery_powered=device.get("battery_life") is not None,
        )

    async def get_active_dings(self) -> List[Ding]:
        dings = await self.session.get_active_dings()
        return [
            Ding.from_api(item, self.name)
            for item in dings
            if str(item.get("doorbot_id")) == self.id
        ]

    async def get_snapshot(self) -> bytes:
        url = f"{SNAPSHOT_BASE_URL}/next/{self.id}"
        try:
            response = await self.session.request(
                "GET", url, headers={"Accept": "image/jpeg"}
            )
        except BridgeError as e:
            raise SnapshotError(f"Snapshot request for {self.name} failed: {e}") from e

        if not response.content:
            raise SnapshotError(f"Camera {self.name} returned an empty snapshot")

        logger.debug(
            f"Snapshot from {self.name}: {len(response.content) // 1024} kb"
        )
        return response.content
