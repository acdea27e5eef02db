"""Tests for the device WebSocket endpoint."""

from fastapi.testclient import TestClient

from smartlight_hub.api.app import create_app
from smartlight_hub.domain.devices import DeviceStatus


def test_register_and_heartbeat_over_websocket(container) -> None:
    client = TestClient(create_app(container))

    with client.websocket_connect("/ws") as websocket:
        websocket.send_json({"type": "register", "deviceId": "smartlight_d2"})
        register_ack = websocket.receive_json()
        websocket.send_json({"type": "heartbeat", "servo1": {"angle": 45}})
        heartbeat_ack = websocket.receive_json()

        online = client.get("/devices/online").json()

    assert register_ack == {
        "type": "ack",
        "action": "register",
        "deviceId": "smartlight_d2",
    }
    assert heartbeat_ack == {"type": "ack", "action": "heartbeat"}
    assert [(d["deviceId"], d["servo1Angle"]) for d in online] == [
        ("smartlight_d2", 45)
    ]
    device = container.directory.get("smartlight_d2")
    assert device.name == "Smart Light (d2)"
    assert device.address == "testclient"


def test_error_frames_keep_connection_open(container) -> None:
    client = TestClient(create_app(container))

    with client.websocket_connect("/ws") as websocket:
        websocket.send_text("not json")
        invalid = websocket.receive_json()
        websocket.send_json({"type": "dance"})
        unknown = websocket.receive_json()
        websocket.send_json({"type": "register", "deviceId": "d3"})
        ack = websocket.receive_json()

    assert invalid == {"type": "error", "error": "invalid_json"}
    assert unknown == {"type": "error", "error": "unknown_type"}
    assert ack["action"] == "register"


def test_disconnect_unbinds_session(container) -> None:
    client = TestClient(create_app(container))

    with client.websocket_connect("/ws") as websocket:
        websocket.send_json({"type": "register", "deviceId": "d4"})
        websocket.receive_json()
        assert container.runtime.find_by_device("d4") is not None

    assert container.runtime.count() == 0
    assert container.directory.get("d4").status is DeviceStatus.CONNECTED


def test_disconnect_without_register(container) -> None:
    client = TestClient(create_app(container))

    with client.websocket_connect("/ws") as websocket:
        websocket.send_json({"type": "heartbeat"})
        assert websocket.receive_json() == {"type": "ack", "action": "heartbeat"}

    assert container.runtime.count() == 0
    assert container.directory.list_devices() == []


def test_servo_command_reaches_open_websocket(container, device_client) -> None:
    with TestClient(create_app(container)) as client:
        with client.websocket_connect("/ws") as websocket:
            websocket.send_json({"type": "register", "deviceId": "d5"})
            websocket.receive_json()

            response = client.post("/devices/d5/servo", json={"servo": 1, "angle": 90})
            frame = websocket.receive_json()

    assert response.json() == {"success": True, "transport": "live"}
    assert frame == {"type": "set_servo", "id": 1, "angle": 90}
    assert device_client.commands == []
    assert container.directory.get("d5").servo1_angle == 90


def test_binary_frames_keep_session_bound(container) -> None:
    client = TestClient(create_app(container))

    with client.websocket_connect("/ws") as websocket:
        websocket.send_json({"type": "register", "deviceId": "d3"})
        websocket.receive_json()
        websocket.send_bytes(b'{"type": "heartbeat"}')
        heartbeat_ack = websocket.receive_json()
        websocket.send_bytes(b"\x89PNG")
        invalid = websocket.receive_json()

        bound = container.runtime.find_by_device("d3")

    assert heartbeat_ack == {"type": "ack", "action": "heartbeat"}
    assert invalid == {"type": "error", "error": "invalid_json"}
    assert bound is not None
    assert container.runtime.count() == 0
