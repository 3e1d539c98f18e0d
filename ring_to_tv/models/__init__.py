"""
Models package for ring_to_tv.
"""

from .ding import Ding, DingKind
from .notification_request import NotificationRequest

__all__ = ["Ding", "DingKind", "NotificationRequest"]
