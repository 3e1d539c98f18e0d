"""
Ring cloud integration for ring_to_tv.

This module provides a minimal asynchronous client for the Ring endpoints the
bridge needs: refresh-token exchange, session registration, locations, devices,
active dings and camera snapshots.
"""

import asyncio
import logging
import time
import uuid
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import httpx

from ring_to_tv.exceptions import AuthError, NetworkError

logger = logging.getLogger(__name__)

OAUTH_URL = "https://oauth.ring.com/oauth/token"
CLIENT_API_BASE_URL = "https://api.ring.com/clients_api"
DEVICE_API_BASE_URL = "https://app.ring.com/rhq/v1/devices/v1"
SNAPSHOT_BASE_URL = "https://app-snaps.ring.com/snapshots"

OAUTH_CLIENT_ID = "ring_official_android"
USER_AGENT = "android:com.ringapp"

# Device groups returned by ring_devices that are cameras, in listing order
CAMERA_DEVICE_GROUPS = ("doorbots", "authorized_doorbots", "stickup_cams")


@dataclass
class Location:
    """A Ring location and the cameras installed there."""

    location_id: str
    name: str
    cameras: List[Any] = field(default_factory=list)


class RingSession:
    """
    Authenticated handle to the Ring cloud.

    One session is created per process. It owns the HTTP client, the access
    token and the ding polling interval shared by every camera.
    """

    def __init__(
        self,
        refresh_token: str,
        display_name: str = "ring-to-android-tv",
        poll_interval: int = 2,
        client: Optional[httpx.AsyncClient] = None,
    ):
        """
        Initialize the Ring session.

        Args:
            refresh_token: Opaque refresh token obtained out of band
            display_name: Name shown for this client in the Ring control center
            poll_interval: Seconds between ding polls for each camera
            client: Optional HTTP client (used by tests)
        """
        self.refresh_token = refresh_token
        self.display_name = display_name
        self.poll_interval = poll_interval
        self.hardware_id = str(uuid.uuid4())
        self.access_token: Optional[str] = None
        self._client = client
        self._auth_lock = asyncio.Lock()

        # Active dings are account wide, so every camera shares one fetch per interval
        self._dings_cache: Optional[List[Dict[str, Any]]] = None
        self._dings_fetched_at = 0.0
        self._dings_lock = asyncio.Lock()

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(20.0, connect=10.0),
                headers={"User-Agent": USER_AGENT, "hardware_id": self.hardware_id},
            )
        return self._client

    async def authenticate(self) -> None:
        """
        Exchange the refresh token for an access token and register the session.

        Raises:
            AuthError: If Ring rejects the refresh token
            NetworkError: If Ring cannot be reached
        """
        async with self._auth_lock:
            await self._refresh_access_token()
            await self._register_session()
        logger.info("Authenticated with Ring")

    async def _refresh_access_token(self) -> None:
        try:
            response = await self.client.post(
                OAUTH_URL,
                json={
                    "client_id": OAUTH_CLIENT_ID,
                    "scope": "client",
                    "grant_type": "refresh_token",
                    "refresh_token": self.refresh_token,
                },
                headers={"2fa-support": "true", "2fa-code": ""},
            )
        except httpx.RequestError as e:
            raise NetworkError(f"Failed to reach Ring OAuth server: {e}") from e

        if response.status_code in (400, 401, 403):
            raise AuthError(
                f"Ring rejected the refresh token (status {response.status_code}); generate a new token"
            )
        if response.status_code >= 400:
            raise NetworkError(f"Ring OAuth server returned status {response.status_code}")

        try:
            data = response.json()
            access_token = data["access_token"]
            # Ring rotates refresh tokens; keep the newest for later renewals
            refresh_token = data.get("refresh_token", self.refresh_token)
        except (ValueError, KeyError, TypeError, AttributeError) as e:
            raise NetworkError(f"Unexpected response from {OAUTH_URL}: {e}") from e
        self.access_token = access_token
        self.refresh_token = refresh_token

    async def _register_session(self) -> None:
        body = {
            "device": {
                "hardware_id": self.hardware_id,
                "metadata": {"api_version": 11, "device_model": self.display_name},
                "os": "android",
            }
        }
        await self.request("POST", f"{CLIENT_API_BASE_URL}/session", json=body, renew=False)

    async def request(
        self, method: str, url: str, renew: bool = True, **kwargs: Any
    ) -> httpx.Response:
        """
        Send an authenticated request to Ring.

        A 401 response triggers one access-token refresh followed by a single
        repeat of the request.

        Raises:
            AuthError: If the request is still unauthorized after renewal
            NetworkError: On transport failure or any other error status
        """
        if self.access_token is None:
            await self.authenticate()

        response = await self._send(method, url, **kwargs)
        if response.status_code == 401 and renew:
            logger.info("Ring access token expired, refreshing")
            async with self._auth_lock:
                await self._refresh_access_token()
            response = await self._send(method, url, **kwargs)

        if response.status_code == 401:
            raise AuthError(f"Unauthorized request to {url}")
        if response.status_code >= 400:
            raise NetworkError(f"{method} {url} failed with status {response.status_code}")
        return response

    async def _send(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        headers = dict(kwargs.pop("headers", None) or {})
        headers["Authorization"] = f"Bearer {self.access_token}"
        try:
            return await self.client.request(method, url, headers=headers, **kwargs)
        except httpx.RequestError as e:
            raise NetworkError(f"{method} {url} failed: {e}") from e

    async def get_locations(self) -> List[Location]:
        """
        Fetch locations with their cameras, in the order Ring returns them.

        Raises:
            AuthError: If the credential is invalid or expired
            NetworkError: On transport failure or a malformed response
        """
        from ring_to_tv.cameras.ring import RingCamera

        locations_url = f"{DEVICE_API_BASE_URL}/locations"
        devices_url = f"{CLIENT_API_BASE_URL}/ring_devices"
        locations_response = await self.request("GET", locations_url)
        devices_response = await self.request("GET", devices_url)

        try:
            locations = [
                Location(location_id=str(item["location_id"]), name=item.get("name", ""))
                for item in locations_response.json().get("user_locations", [])
            ]
        except (ValueError, KeyError, TypeError, AttributeError) as e:
            raise NetworkError(f"Unexpected response from {locations_url}: {e}") from e
        by_id = {location.location_id: location for location in locations}

        try:
            devices = devices_response.json()
            for group in CAMERA_DEVICE_GROUPS:
                for device in devices.get(group, []):
                    location = by_id.get(str(device.get("location_id")))
                    if location is None:
                        logger.debug(
                            f"Skipping camera {device.get('description')} with unknown location {device.get('location_id')}"
                        )
                        continue
                    location.cameras.append(RingCamera.from_api(self, device))
        except (ValueError, KeyError, TypeError, AttributeError) as e:
            raise NetworkError(f"Unexpected response from {devices_url}: {e}") from e

        return locations

    async def get_active_dings(self) -> List[Dict[str, Any]]:
        """Return the account's active dings, fetched at most once per poll interval."""
        async with self._dings_lock:
            now = time.monotonic()
            if self._dings_cache is None or now - self._dings_fetched_at >= self.poll_interval / 2:
                url = f"{CLIENT_API_BASE_URL}/dings/active"
                response = await self.request("GET", url)
                try:
                    dings = response.json()
                except ValueError as e:
                    raise NetworkError(f"Unexpected response from {url}: {e}") from e
                if not isinstance(dings, list):
                    raise NetworkError(f"Unexpected response from {url}: expected a list of dings")
                self._dings_cache = dings
                self._dings_fetched_at = now
            return self._dings_cache

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None
