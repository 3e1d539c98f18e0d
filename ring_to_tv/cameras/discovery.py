"""Enumerates the cameras reachable through a Ring session."""

import logging
from typing import List, Tuple

from ring_to_tv.exceptions import CameraNotFoundError

from .base import Camera

logger = logging.getLogger(__name__)


async def list_cameras(session) -> List[Tuple[str, Camera]]:
    """
    Return (location name, camera) pairs in location order, then camera order.

    Raises:
        AuthError: If the session's credential is invalid or expired
        NetworkError: On transport failure
    """
    locations = await session.get_locations()
    cameras = [
        (location.name, camera)
        for location in locations
        for camera in location.cameras
    ]
    logger.info(f"Discovered {len(cameras)} camera(s) across {len(locations)} location(s)")
    return cameras


async def select_camera(session, location_index: int, camera_index: int) -> Camera:
    """
    Return the camera at the given location and camera index.

    Raises:
        CameraNotFoundError: If either index is out of range
    """
    locations = await session.get_locations()
    if not 0 <= location_index < len(locations):
        raise CameraNotFoundError(
            f"No location with index {location_index} ({len(locations)} available)"
        )
    location = locations[location_index]
    if not 0 <= camera_index < len(location.cameras):
        raise CameraNotFoundError(
            f"No camera with index {camera_index} at {location.name} ({len(location.cameras)} available)"
        )
    return location.cameras[camera_index]
