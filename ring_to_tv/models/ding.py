"""
Ding model for Ring camera events.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Union

import pytz


class DingKind(str, Enum):
    """Ding kinds that get their own notification wording."""

    MOTION = "motion"
    DING = "ding"


@dataclass
class Ding:
    """A single camera event received from the Ring cloud."""

    id: str
    kind: Union[DingKind, str]
    camera_id: str
    camera_name: str
    received_at: datetime = field(default_factory=lambda: datetime.now(pytz.utc))

    @classmethod
    def from_api(cls, data: Dict[str, Any], camera_name: str) -> "Ding":
        """Build a Ding from an entry of the active dings endpoint."""
        raw_kind = data.get("kind", "")
        try:
            kind = DingKind(raw_kind)
        except ValueError:
            kind = raw_kind
        return cls(
            id=str(data.get("id_str") or data.get("id")),
            kind=kind,
            camera_id=str(data.get("doorbot_id")),
            camera_name=camera_name,
        )

    @property
    def kind_name(self) -> str:
        return self.kind.value if isinstance(self.kind, DingKind) else str(self.kind)

    def __str__(self) -> str:
        return f"Ding({self.kind_name} #{self.id} on {self.camera_name})"
