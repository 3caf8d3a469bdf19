"""
Data models for Lamp Status Sync.

Contains the inbound and registry-facing shapes:
- TelemetryMessage (IoT Central export envelope) and Telemetry payload
- Device and DeviceListResponse (device registry list endpoint)
- UpdateDeviceCommand (device registry update endpoint)
"""

import json
from dataclasses import dataclass, field
from typing import Optional, List, Dict, Any


class MessageParseError(ValueError):
    """Raised when a queue message cannot be decoded into a TelemetryMessage."""


def _coerce_int(value: Any, field_name: str) -> int:
    """
    Coerce a JSON value to int the way lenient JSON deserializers do.

    Accepts ints, integral floats and integral numeric strings. Booleans are
    rejected even though they subclass int.
    """
    if isinstance(value, bool):
        raise MessageParseError(f"{field_name} must be an integer, got boolean")
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            pass
    raise MessageParseError(f"{field_name} must be an integer, got {value!r}")


def _coerce_bool(value: Any, field_name: str) -> bool:
    """Coerce a JSON value to bool, accepting "true"/"false" strings and 0/1."""
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered == "true":
            return True
        if lowered == "false":
            return False
    raise MessageParseError(f"{field_name} must be a boolean, got {value!r}")


def _optional_str(value: Any, field_name: str) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, (dict, list)):
        raise MessageParseError(f"{field_name} must be a string, got {type(value).__name__}")
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


@dataclass
class Telemetry:
    """Telemetry payload sent by the LED device."""
    led_status: int = 0

    @property
    def is_on(self) -> bool:
        """Only a status code of exactly 1 means the LED is on."""
        return self.led_status == 1

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Telemetry":
        if "led_status" not in data:
            return cls()
        return cls(led_status=_coerce_int(data["led_status"], "telemetry.led_status"))


@dataclass
class MessageProperties:
    """Transport metadata attached by IoT Hub."""
    iothub_creation_time_utc: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MessageProperties":
        # IoT Hub uses dashes on the wire; accept the underscore form as well
        raw = data.get("iothub-creation-time-utc", data.get("iothub_creation_time_utc"))
        return cls(
            iothub_creation_time_utc=_optional_str(
                raw, "messageProperties.iothub-creation-time-utc"
            )
        )


@dataclass
class TelemetryMessage:
    """
    IoT Central telemetry export envelope.

    Only telemetry.led_status drives behaviour; every other field is carried
    for logging. Enrichments are kept as an opaque mapping.
    """
    application_id: Optional[str] = None
    device_id: Optional[str] = None
    enqueued_time: Optional[str] = None
    enrichments: Dict[str, Any] = field(default_factory=dict)
    message_properties: Optional[MessageProperties] = None
    message_source: Optional[str] = None
    schema: Optional[str] = None
    telemetry: Optional[Telemetry] = None
    template_id: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TelemetryMessage":
        telemetry = data.get("telemetry")
        if telemetry is not None and not isinstance(telemetry, dict):
            raise MessageParseError(
                f"telemetry must be an object, got {type(telemetry).__name__}"
            )

        properties = data.get("messageProperties")
        if properties is not None and not isinstance(properties, dict):
            raise MessageParseError(
                f"messageProperties must be an object, got {type(properties).__name__}"
            )

        enrichments = data.get("enrichments")
        if not isinstance(enrichments, dict):
            enrichments = {} if enrichments is None else {"value": enrichments}

        return cls(
            application_id=_optional_str(data.get("applicationId"), "applicationId"),
            device_id=_optional_str(data.get("deviceId"), "deviceId"),
            enqueued_time=_optional_str(data.get("enqueuedTime"), "enqueuedTime"),
            enrichments=enrichments,
            message_properties=MessageProperties.from_dict(properties) if properties is not None else None,
            message_source=_optional_str(data.get("messageSource"), "messageSource"),
            schema=_optional_str(data.get("schema"), "schema"),
            telemetry=Telemetry.from_dict(telemetry) if telemetry is not None else None,
            template_id=_optional_str(data.get("templateId"), "templateId"),
        )

    def to_log_dict(self) -> Dict[str, Any]:
        """Convert to a JSON-safe dict for structured logging."""
        return {
            "application_id": self.application_id,
            "device_id": self.device_id,
            "enqueued_time": self.enqueued_time,
            "enrichments": self.enrichments,
            "iothub_creation_time_utc": (
                self.message_properties.iothub_creation_time_utc
                if self.message_properties else None
            ),
            "message_source": self.message_source,
            "schema": self.schema,
            "led_status": self.telemetry.led_status if self.telemetry else None,
            "template_id": self.template_id,
        }


def parse_telemetry_message(raw_message: str) -> Optional[TelemetryMessage]:
    """
    Decode a raw queue message into a TelemetryMessage.

    Args:
        raw_message: Message body as received from the queue

    Returns:
        Parsed TelemetryMessage, or None when the body is the JSON literal null

    Raises:
        MessageParseError: If the body is not JSON or does not fit the envelope shape
    """
    try:
        data = json.loads(raw_message)
    except (TypeError, ValueError) as e:
        raise MessageParseError(f"Invalid JSON: {e}") from e

    if data is None:
        return None
    if not isinstance(data, dict):
        raise MessageParseError(f"Expected a JSON object, got {type(data).__name__}")

    return TelemetryMessage.from_dict(data)


def _get_ci(data: Dict[str, Any], key: str, default: Any = None) -> Any:
    """Case-insensitive dict lookup, exact match first."""
    if key in data:
        return data[key]
    lowered = key.lower()
    for k, v in data.items():
        if isinstance(k, str) and k.lower() == lowered:
            return v
    return default


@dataclass
class Device:
    """Controllable device owned by the registry service."""
    id: int
    name: Optional[str] = None
    type: Optional[str] = None
    status: bool = False
    room_id: int = 0

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Device":
        room_id = _get_ci(data, "RoomId")
        name = _get_ci(data, "Name")
        device_type = _get_ci(data, "Type")
        return cls(
            id=_coerce_int(_get_ci(data, "Id", 0), "Device.Id"),
            name=None if name is None else str(name),
            type=None if device_type is None else str(device_type),
            status=_coerce_bool(_get_ci(data, "Status", False), "Device.Status"),
            room_id=0 if room_id is None else _coerce_int(room_id, "Device.RoomId"),
        )

    def to_log_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "type": self.type,
            "status": self.status,
            "room_id": self.room_id,
        }


@dataclass
class DeviceListResponse:
    """Paged response from the registry's GetAllDevices endpoint."""
    page_number: int = 0
    page_size: int = 0
    succeeded: bool = False
    message: Optional[str] = None
    errors: List[str] = field(default_factory=list)
    data: Optional[List[Device]] = None

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "DeviceListResponse":
        raw_devices = _get_ci(payload, "Data")
        devices = None
        if isinstance(raw_devices, list):
            devices = [Device.from_dict(item) for item in raw_devices if isinstance(item, dict)]

        errors = _get_ci(payload, "Errors") or []
        if not isinstance(errors, list):
            errors = [errors]

        message = _get_ci(payload, "Message")
        return cls(
            page_number=_coerce_int(_get_ci(payload, "PageNumber", 0) or 0, "PageNumber"),
            page_size=_coerce_int(_get_ci(payload, "PageSize", 0) or 0, "PageSize"),
            succeeded=bool(_get_ci(payload, "Succeeded", False)),
            message=None if message is None else str(message),
            errors=[str(err) for err in errors],
            data=devices,
        )


@dataclass
class UpdateDeviceCommand:
    """Partial update sent to the registry's UpdateDevice endpoint."""
    id: int
    name: Optional[str]
    status: bool

    def to_request_body(self) -> Dict[str, Any]:
        """Convert to the JSON body expected by the registry."""
        return {
            "Id": self.id,
            "Name": self.name,
            "Status": self.status,
        }
