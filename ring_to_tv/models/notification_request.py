from dataclasses import dataclass
from typing import Optional


@dataclass
class NotificationRequest:
    """A popup to show on the TV; image_path is None for text-only popups."""

    title: str
    message: str
    image_path: Optional[str] = None
