from abc import ABC, abstractmethod
from typing import List

from ring_to_tv.models import Ding


class Camera(ABC):
    """Base class for camera implementations."""

    id: str
    name: str
    model: str

    @abstractmethod
    async def get_active_dings(self) -> List[Ding]:
        """Return the events currently reported for this camera."""
        pass

    @abstractmethod
    async def get_snapshot(self) -> bytes:
        """
        Capture a still image from the camera.

        Raises:
            SnapshotError: If no image could be retrieved
        """
        pass

    def __str__(self) -> str:
        return f"{self.name} ({self.model})"
