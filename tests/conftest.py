import asyncio
from typing import List

import pytest
import pytest_asyncio
from unittest.mock import AsyncMock

from ring_to_tv.cameras.base import Camera
from ring_to_tv.models import Ding
from ring_to_tv.utils.config import AppConfig, Config, RingConfig, TvConfig


class FakeCamera(Camera):
    """Camera whose dings and snapshots are scripted by the test."""

    def __init__(self, camera_id="101", name="Front Door", model="doorbell_v3", snapshot=b"jpeg-bytes"):
        self.id = camera_id
        self.name = name
        self.model = model
        self.snapshot = snapshot
        self.dings: List[Ding] = []
        self.snapshot_calls = 0

    async def get_active_dings(self) -> List[Ding]:
        if isinstance(self.dings, Exception):
            raise self.dings
        return list(self.dings)

    async def get_snapshot(self) -> bytes:
        self.snapshot_calls += 1
        if isinstance(self.snapshot, Exception):
            raise self.snapshot
        if callable(self.snapshot):
            return await self.snapshot()
        return self.snapshot


class RecordingNotifier:
    """Stands in for PipupAPI and keeps the bytes of every attached image."""

    def __init__(self, delivered=True):
        self.delivered = delivered
        self.calls = []
        self.images = []
        self.close = AsyncMock()

    async def send_notification(self, title, message, image_path=None, exit_after=False):
        self.calls.append((title, message, image_path))
        if image_path:
            with open(image_path, "rb") as f:
                self.images.append(f.read())
        else:
            self.images.append(None)
        return self.delivered


@pytest.fixture
def fake_camera():
    return FakeCamera()


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def app_config(tmp_path):
    """Create a configuration pointing at a temporary directory."""
    return Config(
        tv=TvConfig(host="192.168.1.11"),
        ring=RingConfig(poll_interval_seconds=1, snapshot_timeout_seconds=1),
        app=AppConfig(
            notify_on_start=False,
            timezone="America/New_York",
            snapshot_dir=str(tmp_path / "snapshots"),
            shutdown_grace_seconds=1,
        ),
        base_dir=str(tmp_path),
    )


@pytest_asyncio.fixture(scope="function", autouse=True)
async def cleanup_asyncio_tasks():
    """Automatically cancel all pending asyncio tasks at the end of each test."""
    yield

    try:
        current_task = asyncio.current_task()
        pending_tasks = [
            task for task in asyncio.all_tasks() if task != current_task and not task.done()
        ]
        for task in pending_tasks:
            task.cancel()
        if pending_tasks:
            await asyncio.gather(*pending_tasks, return_exceptions=True)
    except RuntimeError:
        # Event loop might already be closed
        pass
