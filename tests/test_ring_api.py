"""Tests for the Ring session, camera and discovery helpers."""

import httpx
import pytest
import respx

from ring_to_tv.api_integrations.ring import (
    CLIENT_API_BASE_URL,
    DEVICE_API_BASE_URL,
    OAUTH_URL,
    SNAPSHOT_BASE_URL,
    RingSession,
)
from ring_to_tv.cameras import RingCamera, list_cameras, select_camera
from ring_to_tv.exceptions import AuthError, CameraNotFoundError, NetworkError, SnapshotError
from ring_to_tv.models import DingKind

LOCATIONS = {
    "user_locations": [
        {"location_id": "loc-1", "name": "Home"},
        {"location_id": "loc-2", "name": "Cabin"},
    ]
}

DEVICES = {
    "doorbots": [
        {"id": 101, "description": "Front Door", "kind": "doorbell_v3", "location_id": "loc-1"}
    ],
    "authorized_doorbots": [],
    "stickup_cams": [
        {
            "id": 202,
            "description": "Backyard",
            "kind": "stickup_cam_v4",
            "location_id": "loc-1",
            "battery_life": 87,
        },
        {"id": 303, "description": "Lost Cam", "kind": "cocoa_camera", "location_id": "gone"},
    ],
    "chimes": [{"id": 404, "description": "Chime", "location_id": "loc-1"}],
}


def mock_auth(status=200):
    respx.post(OAUTH_URL).mock(
        return_value=httpx.Response(
            status, json={"access_token": "access-1", "refresh_token": "refresh-2"}
        )
    )
    respx.post(f"{CLIENT_API_BASE_URL}/session").mock(return_value=httpx.Response(201, json={}))


def mock_devices():
    respx.get(f"{DEVICE_API_BASE_URL}/locations").mock(
        return_value=httpx.Response(200, json=LOCATIONS)
    )
    respx.get(f"{CLIENT_API_BASE_URL}/ring_devices").mock(
        return_value=httpx.Response(200, json=DEVICES)
    )


@pytest.mark.asyncio
@respx.mock
async def test_authenticate_stores_tokens():
    mock_auth()
    session = RingSession("refresh-1", client=httpx.AsyncClient())

    await session.authenticate()

    assert session.access_token == "access-1"
    assert session.refresh_token == "refresh-2"
    await session.close()


@pytest.mark.asyncio
@respx.mock
async def test_authenticate_rejected_token():
    mock_auth(status=401)
    session = RingSession("bad-token", client=httpx.AsyncClient())

    with pytest.raises(AuthError):
        await session.authenticate()
    await session.close()


@pytest.mark.asyncio
@respx.mock
async def test_authenticate_network_error():
    respx.post(OAUTH_URL).mock(side_effect=httpx.ConnectError("offline"))
    session = RingSession("refresh-1", client=httpx.AsyncClient())

    with pytest.raises(NetworkError):
        await session.authenticate()
    await session.close()


@pytest.mark.asyncio
@respx.mock
async def test_authenticate_non_json_response():
    respx.post(OAUTH_URL).mock(
        return_value=httpx.Response(
            200, content=b"<html>portal</html>", headers={"Content-Type": "text/html"}
        )
    )
    session = RingSession("refresh-1", client=httpx.AsyncClient())

    with pytest.raises(NetworkError):
        await session.authenticate()
    assert session.access_token is None
    await session.close()


@pytest.mark.asyncio
@respx.mock
async def test_authenticate_response_without_access_token():
    respx.post(OAUTH_URL).mock(return_value=httpx.Response(200, json={"error": "try later"}))
    session = RingSession("refresh-1", client=httpx.AsyncClient())

    with pytest.raises(NetworkError):
        await session.authenticate()
    await session.close()


@pytest.mark.asyncio
@respx.mock
async def test_get_locations_malformed_devices():
    mock_auth()
    respx.get(f"{DEVICE_API_BASE_URL}/locations").mock(
        return_value=httpx.Response(200, json=LOCATIONS)
    )
    respx.get(f"{CLIENT_API_BASE_URL}/ring_devices").mock(
        return_value=httpx.Response(200, content=b"not json")
    )
    session = RingSession("refresh-1", client=httpx.AsyncClient())

    with pytest.raises(NetworkError):
        await session.get_locations()
    await session.close()


@pytest.mark.asyncio
@respx.mock
async def test_active_dings_non_list_response():
    mock_auth()
    respx.get(f"{CLIENT_API_BASE_URL}/dings/active").mock(
        return_value=httpx.Response(200, json={"message": "maintenance"})
    )
    session = RingSession("refresh-1", client=httpx.AsyncClient())

    with pytest.raises(NetworkError):
        await session.get_active_dings()
    await session.close()


@pytest.mark.asyncio
@respx.mock
async def test_get_locations_groups_cameras():
    mock_auth()
    mock_devices()
    session = RingSession("refresh-1", client=httpx.AsyncClient())

    locations = await session.get_locations()

    assert [location.name for location in locations] == ["Home", "Cabin"]
    home = locations[0]
    assert [camera.name for camera in home.cameras] == ["Front Door", "Backyard"]
    assert home.cameras[0].id == "101"
    assert home.cameras[0].battery_powered is False
    assert home.cameras[1].battery_powered is True
    assert locations[1].cameras == []
    await session.close()


@pytest.mark.asyncio
@respx.mock
async def test_list_cameras_and_select_camera():
    mock_auth()
    mock_devices()
    session = RingSession("refresh-1", client=httpx.AsyncClient())

    cameras = await list_cameras(session)
    assert [(name, camera.name) for name, camera in cameras] == [
        ("Home", "Front Door"),
        ("Home", "Backyard"),
    ]

    camera = await select_camera(session, 0, 1)
    assert camera.name == "Backyard"

    with pytest.raises(CameraNotFoundError):
        await select_camera(session, 1, 0)
    with pytest.raises(CameraNotFoundError):
        await select_camera(session, 5, 0)
    await session.close()


@pytest.mark.asyncio
@respx.mock
async def test_expired_access_token_is_refreshed_once():
    mock_auth()
    route = respx.get(f"{CLIENT_API_BASE_URL}/dings/active").mock(
        side_effect=[httpx.Response(401), httpx.Response(200, json=[])]
    )
    session = RingSession("refresh-1", client=httpx.AsyncClient())

    assert await session.get_active_dings() == []
    assert route.call_count == 2
    await session.close()


@pytest.mark.asyncio
@respx.mock
async def test_still_unauthorized_raises_auth_error():
    mock_auth()
    respx.get(f"{CLIENT_API_BASE_URL}/dings/active").mock(return_value=httpx.Response(401))
    session = RingSession("refresh-1", client=httpx.AsyncClient())

    with pytest.raises(AuthError):
        await session.get_active_dings()
    await session.close()


@pytest.mark.asyncio
@respx.mock
async def test_camera_filters_dings_by_doorbot():
    mock_auth()
    respx.get(f"{CLIENT_API_BASE_URL}/dings/active").mock(
        return_value=httpx.Response(
            200,
            json=[
                {"id": 1, "id_str": "9001", "kind": "motion", "doorbot_id": 101},
                {"id": 2, "id_str": "9002", "kind": "on_demand", "doorbot_id": 101},
                {"id": 3, "id_str": "9003", "kind": "ding", "doorbot_id": 202},
            ],
        )
    )
    session = RingSession("refresh-1", poll_interval=2, client=httpx.AsyncClient())
    front = RingCamera(session, "101", "Front Door")
    back = RingCamera(session, "202", "Backyard")

    front_dings = await front.get_active_dings()
    back_dings = await back.get_active_dings()

    assert [(d.id, d.kind) for d in front_dings] == [("9001", DingKind.MOTION), ("9002", "on_demand")]
    assert front_dings[0].camera_name == "Front Door"
    assert [(d.id, d.kind) for d in back_dings] == [("9003", DingKind.DING)]
    # Both cameras share one fetch within the poll interval
    assert respx.calls.call_count == 3
    await session.close()


@pytest.mark.asyncio
@respx.mock
async def test_snapshot_success():
    mock_auth()
    respx.get(f"{SNAPSHOT_BASE_URL}/next/101").mock(
        return_value=httpx.Response(200, content=b"\xff\xd8image")
    )
    session = RingSession("refresh-1", client=httpx.AsyncClient())
    camera = RingCamera(session, "101", "Front Door")

    assert await camera.get_snapshot() == b"\xff\xd8image"
    await session.close()


@pytest.mark.asyncio
@respx.mock
async def test_snapshot_failure_raises_snapshot_error():
    mock_auth()
    respx.get(f"{SNAPSHOT_BASE_URL}/next/101").mock(return_value=httpx.Response(504))
    session = RingSession("refresh-1", client=httpx.AsyncClient())
    camera = RingCamera(session, "101", "Front Door")

    with pytest.raises(SnapshotError):
        await camera.get_snapshot()
    await session.close()


@pytest.mark.asyncio
@respx.mock
async def test_empty_snapshot_raises_snapshot_error():
    mock_auth()
    respx.get(f"{SNAPSHOT_BASE_URL}/next/101").mock(return_value=httpx.Response(200, content=b""))
    session = RingSession("refresh-1", client=httpx.AsyncClient())
    camera = RingCamera(session, "101", "Front Door")

    with pytest.raises(SnapshotError):
        await camera.get_snapshot()
    await session.close()
