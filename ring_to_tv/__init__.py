"""
ring_to_tv - Forwards Ring camera events with snapshots to a PiPup popup on Android TV.
"""

from .bridge_app import RingToTvApp
from .version import __version__, __version_full__

__all__ = ["RingToTvApp", "__version__", "__version_full__"]
