"""
Unit tests for telemetry envelope parsing and registry models.
"""

import json

import pytest

from shared.models import (
    Device,
    DeviceListResponse,
    MessageParseError,
    Telemetry,
    TelemetryMessage,
    UpdateDeviceCommand,
    parse_telemetry_message,
)


class TestTelemetryStatus:
    """Tests for deriving the lamp status from led_status."""

    def test_led_status_one_is_on(self, make_raw_message):
        message = parse_telemetry_message(make_raw_message(1))

        assert message.telemetry.led_status == 1
        assert message.telemetry.is_on is True

    @pytest.mark.parametrize("led_status", [0, 2, -1, 255])
    def test_other_values_are_off(self, make_raw_message, led_status):
        message = parse_telemetry_message(make_raw_message(led_status))

        assert message.telemetry.is_on is False

    def test_missing_led_status_defaults_to_off(self, sample_message):
        sample_message["telemetry"] = {"temperature": 21.5}

        message = parse_telemetry_message(json.dumps(sample_message))

        assert message.telemetry.led_status == 0
        assert message.telemetry.is_on is False

    def test_numeric_string_is_coerced(self):
        assert Telemetry.from_dict({"led_status": "1"}).is_on is True

    def test_integral_float_is_coerced(self):
        assert Telemetry.from_dict({"led_status": 1.0}).led_status == 1

    @pytest.mark.parametrize("bad_value", ["on", 1.5, True, None, [1], {"v": 1}])
    def test_non_integer_led_status_is_parse_error(self, bad_value):
        with pytest.raises(MessageParseError):
            Telemetry.from_dict({"led_status": bad_value})


class TestParseTelemetryMessage:
    """Tests for decoding raw queue messages."""

    def test_parses_all_envelope_fields(self, sample_message):
        message = parse_telemetry_message(json.dumps(sample_message))

        assert message.application_id == "app-123"
        assert message.device_id == "rgbled-01"
        assert message.enqueued_time == "2024-01-01T00:00:00.000Z"
        assert message.enrichments == {"room": "kitchen"}
        assert message.message_properties.iothub_creation_time_utc == "2024-01-01T00:00:00.000Z"
        assert message.message_source == "telemetry"
        assert message.schema == "default@v1"
        assert message.template_id == "dtmi:rgbled:template;1"

    def test_extra_fields_are_ignored(self, sample_message):
        sample_message["unexpected"] = {"nested": True}

        message = parse_telemetry_message(json.dumps(sample_message))

        assert message.telemetry.is_on is True

    def test_invalid_json_raises(self):
        with pytest.raises(MessageParseError):
            parse_telemetry_message("{not json")

    def test_empty_body_raises(self):
        with pytest.raises(MessageParseError):
            parse_telemetry_message("")

    def test_array_body_raises(self):
        with pytest.raises(MessageParseError):
            parse_telemetry_message("[1, 2, 3]")

    def test_null_body_returns_none(self):
        assert parse_telemetry_message("null") is None

    def test_missing_telemetry_is_none(self, sample_message):
        del sample_message["telemetry"]

        message = parse_telemetry_message(json.dumps(sample_message))

        assert message.telemetry is None

    def test_null_telemetry_is_none(self, sample_message):
        sample_message["telemetry"] = None

        message = parse_telemetry_message(json.dumps(sample_message))

        assert message.telemetry is None

    def test_scalar_telemetry_raises(self, sample_message):
        sample_message["telemetry"] = 1

        with pytest.raises(MessageParseError):
            parse_telemetry_message(json.dumps(sample_message))

    def test_enrichments_stay_opaque(self, sample_message):
        sample_message["enrichments"] = {"a": [1, 2, {"b": None}]}

        message = parse_telemetry_message(json.dumps(sample_message))

        assert message.enrichments == {"a": [1, 2, {"b": None}]}

    def test_to_log_dict_is_json_serializable(self, sample_message):
        message = parse_telemetry_message(json.dumps(sample_message))

        logged = json.loads(json.dumps(message.to_log_dict()))

        assert logged["led_status"] == 1
        assert logged["device_id"] == "rgbled-01"

    def test_minimal_envelope(self):
        message = TelemetryMessage.from_dict({"telemetry": {"led_status": 0}})

        assert message.device_id is None
        assert message.enrichments == {}
        assert message.message_properties is None


class TestRegistryModels:
    """Tests for device registry models."""

    def test_device_list_response(self, sample_device_list):
        response = DeviceListResponse.from_dict(sample_device_list)

        assert response.page_number == 1
        assert response.page_size == 10
        assert response.succeeded is True
        assert response.errors == []
        assert [d.id for d in response.data] == [3, 9, 7, 5, 12]

    def test_null_name_is_kept(self):
        device = Device.from_dict({"Id": 4, "Name": None, "Type": "Lamp"})

        assert device.name is None

    @pytest.mark.parametrize("raw,expected", [
        (True, True), (False, False), ("true", True), ("false", False),
        ("False", False), (1, True), (0, False), (None, False),
    ])
    def test_status_coercion(self, raw, expected):
        assert Device.from_dict({"Id": 1, "Status": raw}).status is expected

    @pytest.mark.parametrize("raw", ["maybe", 2, [True]])
    def test_invalid_status_raises(self, raw):
        with pytest.raises(ValueError):
            Device.from_dict({"Id": 1, "Status": raw})

    def test_camel_case_keys_are_accepted(self):
        device = Device.from_dict({"id": 4, "name": "Lamp A", "type": "Lamp", "status": True, "roomId": 8})

        assert device.id == 4
        assert device.name == "Lamp A"
        assert device.type == "Lamp"
        assert device.status is True
        assert device.room_id == 8

    def test_missing_data_is_none(self):
        response = DeviceListResponse.from_dict({"Succeeded": False, "Errors": ["boom"]})

        assert response.data is None
        assert response.errors == ["boom"]

    def test_non_object_entries_are_skipped(self):
        response = DeviceListResponse.from_dict({"Data": [None, "x", {"Id": 1, "Type": "Lamp"}]})

        assert len(response.data) == 1
        assert response.data[0].id == 1

    def test_update_command_body(self):
        command = UpdateDeviceCommand(id=7, name="Ceiling Lamp", status=True)

        assert command.to_request_body() == {"Id": 7, "Name": "Ceiling Lamp", "Status": True}
