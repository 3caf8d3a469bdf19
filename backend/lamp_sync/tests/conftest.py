"""
Pytest configuration and shared fixtures for Lamp Status Sync tests.
"""

import json
import os

import pytest

os.environ.setdefault("POWERTOOLS_TRACE_DISABLED", "true")
os.environ.setdefault("POWERTOOLS_SERVICE_NAME", "lamp-status-sync")


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def fake_clock():
    """Fixture providing a controllable clock for debounce tests."""
    return FakeClock()


@pytest.fixture
def sample_message():
    """Fixture providing a sample IoT Central telemetry export."""
    return {
        "applicationId": "app-123",
        "deviceId": "rgbled-01",
        "enqueuedTime": "2024-01-01T00:00:00.000Z",
        "enrichments": {"room": "kitchen"},
        "messageProperties": {"iothub-creation-time-utc": "2024-01-01T00:00:00.000Z"},
        "messageSource": "telemetry",
        "schema": "default@v1",
        "telemetry": {"led_status": 1},
        "templateId": "dtmi:rgbled:template;1",
    }


@pytest.fixture
def make_raw_message(sample_message):
    """Fixture returning a builder for raw message bodies with a given led_status."""
    def _make(led_status=1):
        message = dict(sample_message)
        message["telemetry"] = {"led_status": led_status}
        return json.dumps(message)
    return _make


@pytest.fixture
def sample_device_list():
    """Fixture providing a registry device list with several lamps."""
    return {
        "PageNumber": 1,
        "PageSize": 10,
        "Succeeded": True,
        "Message": None,
        "Errors": None,
        "Data": [
            {"Id": 3, "Name": "Desk Lamp", "Type": "Lamp", "Status": False, "RoomId": 1},
            {"Id": 9, "Name": "Front Door", "Type": "Door", "Status": True, "RoomId": 1},
            {"Id": 7, "Name": "Ceiling Lamp", "Type": "Lamp", "Status": False, "RoomId": 2},
            {"Id": 5, "Name": "Floor Lamp", "Type": "Lamp", "Status": True, "RoomId": 2},
            {"Id": 12, "Name": "Thermostat", "Type": "Sensor", "Status": True, "RoomId": 3},
        ],
    }
