"""
PiPup integration for ring_to_tv.

This module sends popup notifications, optionally with an image, to the PiPup
app running on an Android TV.
"""

import logging
import mimetypes
import os
import sys
from typing import Dict, List, Optional, Tuple

import aiofiles
import httpx

from ring_to_tv.exceptions import DeliveryError
from ring_to_tv.utils.config import TvConfig

logger = logging.getLogger(__name__)


class PipupAPI:
    """
    Sends notifications to the PiPup /notify endpoint.
    """

    def __init__(self, config: TvConfig, client: Optional[httpx.AsyncClient] = None):
        """
        Initialize the PiPup client.

        Args:
            config: TV configuration object
            client: Optional HTTP client (used by tests)
        """
        self.config = config
        self.url = f"http://{config.host}:{config.port}/notify"
        self._client = client

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.config.request_timeout_seconds)
        return self._client

    def build_fields(self, title: str, message: str) -> Dict[str, str]:
        """Return the text form fields for a popup."""
        return {
            "duration": str(self.config.display_duration),
            "position": str(self.config.position),
            "title": title,
            "titleColor": self.config.title_color,
            "titleSize": str(self.config.title_size),
            "message": message,
            "messageColor": self.config.message_color,
            "messageSize": str(self.config.message_size),
            "backgroundColor": self.config.background_color,
            "imageWidth": str(self.config.image_width),
        }

    async def _build_parts(
        self, title: str, message: str, image_path: Optional[str]
    ) -> List[Tuple[str, Tuple]]:
        # Text fields are sent as file parts without a filename so the body is
        # multipart/form-data even when there is no image.
        parts = [(name, (None, value)) for name, value in self.build_fields(title, message).items()]

        if image_path:
            async with aiofiles.open(image_path, "rb") as f:
                image_data = await f.read()
            content_type = mimetypes.guess_type(image_path)[0] or "application/octet-stream"
            parts.append(("image", (os.path.basename(image_path), image_data, content_type)))

        return parts

    async def send_notification(
        self,
        title: str,
        message: str,
        image_path: Optional[str] = None,
        exit_after: bool = False,
    ) -> bool:
        """
        Send a notification to PiPup.

        Args:
            title: Title of the popup
            message: Text of the popup
            image_path: Optional path to an image to attach
            exit_after: End the process once the send completes (one-shot modes)

        Returns:
            bool: True if PiPup accepted the notification, False otherwise
        """
        try:
            parts = await self._build_parts(title, message, image_path)
            try:
                response = await self.client.post(self.url, files=parts)
            except httpx.HTTPError as e:
                raise DeliveryError(f"Error posting to PiPup at {self.url}: {e}") from e

            if response.status_code >= 300:
                raise DeliveryError(
                    f"PiPup at {self.url} returned status {response.status_code}"
                )
            logger.info(f"Sent notification successfully: {title}")
            delivered = True
        except (DeliveryError, OSError) as e:
            logger.error(f"Error sending notification '{title}': {e}")
            delivered = False

        if exit_after:
            sys.exit(0 if delivered else 1)
        return delivered

    async def close(self):
        """Close the HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None
