"""
Exception hierarchy for ring_to_tv.
"""


class BridgeError(Exception):
    """Base class for all ring_to_tv errors."""
    pass


class ConfigError(BridgeError):
    """Raised when configuration or the refresh token cannot be loaded."""
    pass


class AuthError(BridgeError):
    """Raised when the Ring credential is rejected or has expired."""
    pass


class NetworkError(BridgeError):
    """Raised when there are network-related issues talking to Ring."""
    pass


class SnapshotError(BridgeError):
    """Raised when a camera snapshot cannot be retrieved."""
    pass


class DeliveryError(BridgeError):
    """Raised when a notification cannot be delivered to the TV."""
    pass


class CameraNotFoundError(BridgeError):
    """Raised when a location/camera index pair does not exist."""
    pass
