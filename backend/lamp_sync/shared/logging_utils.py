"""
Logging utilities for structured logging across the lamp sync functions.

Provides helper functions for consistent structured logging with AWS Lambda Powertools.
"""

import json
from typing import Dict, Any, Optional
from aws_lambda_powertools import Logger

DIAGNOSTIC_FIELD_PATH = ("telemetry", "doorPosition")


def log_parse_failure(
    logger: Logger,
    raw_message: str,
    error: Exception
) -> None:
    """
    Log a message parse failure together with the diagnostic field value.

    The diagnostic lookup re-reads the raw body independently of the failed
    parse; if it fails too, that failure is logged and swallowed.

    Args:
        logger: Logger instance
        raw_message: Message body that failed to parse
        error: Exception raised by the parser
    """
    logger.exception(
        "Telemetry message deserialization error",
        extra={
            "error": str(error),
            "error_type": type(error).__name__,
            "event_category": "parse_failure"
        }
    )

    try:
        value = extract_diagnostic_field(raw_message)
    except Exception as e:
        logger.error(
            "Error while parsing message for problematic property",
            extra={
                "error": str(e),
                "error_type": type(e).__name__,
                "event_category": "parse_failure"
            }
        )
        return

    logger.error(
        "Problematic property",
        extra={
            "property_path": ".".join(DIAGNOSTIC_FIELD_PATH),
            "property_value": "null" if value is None else value,
            "event_category": "parse_failure"
        }
    )


def extract_diagnostic_field(raw_message: str) -> Optional[str]:
    """
    Pull telemetry.doorPosition out of a raw message for diagnostics.

    Args:
        raw_message: Raw message body

    Returns:
        The field rendered as text, or None if absent

    Raises:
        ValueError: If the body is not a JSON object
    """
    node: Any = json.loads(raw_message)
    if not isinstance(node, dict):
        raise ValueError(f"Expected a JSON object, got {type(node).__name__}")

    for key in DIAGNOSTIC_FIELD_PATH:
        if not isinstance(node, dict) or key not in node:
            return None
        node = node[key]

    if node is None:
        return None
    if isinstance(node, str):
        return node
    return json.dumps(node)


def log_debounce_skip(
    logger: Logger,
    status: bool,
    seconds_since_last_update: Optional[float],
    window_seconds: float,
    device_id: Optional[str] = None
) -> None:
    """
    Log when an update is suppressed by the debounce filter.

    Args:
        logger: Logger instance
        status: Status that was suppressed
        seconds_since_last_update: Elapsed time since the last accepted update
        window_seconds: Debounce window
        device_id: Optional IoT device id from the envelope
    """
    logger.info(
        "Lamp status has not changed or debounce time not passed. No update necessary.",
        extra={
            "device_id": device_id,
            "led_status": status,
            "seconds_since_last_update": seconds_since_last_update,
            "debounce_seconds": window_seconds,
            "event_category": "debounce_skip"
        }
    )


def log_registry_failure(
    logger: Logger,
    message: str,
    status_code: Optional[int],
    response_text: str,
    extra_data: Optional[Dict[str, Any]] = None
) -> None:
    """
    Log a non-success response from the device registry.

    Args:
        logger: Logger instance
        message: Log message
        status_code: HTTP status code, if a response was received
        response_text: Response body
        extra_data: Optional additional context
    """
    extra = {
        "status_code": status_code,
        "response": response_text,
        "event_category": "registry_failure"
    }
    if extra_data:
        extra.update(extra_data)

    logger.error(message, extra=extra)
