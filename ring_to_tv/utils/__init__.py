"""Utility helpers for ring_to_tv."""

from .config import Config, load_config, load_refresh_token
from .paths import get_error_image_path, get_shared_data_path

__all__ = [
    "Config",
    "load_config",
    "load_refresh_token",
    "get_error_image_path",
    "get_shared_data_path",
]
