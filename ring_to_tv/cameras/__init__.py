from .base import Camera
from .discovery import list_cameras, select_camera
from .ring import RingCamera

__all__ = ["Camera", "RingCamera", "list_cameras", "select_camera"]
