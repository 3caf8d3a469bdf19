"""
Runtime configuration for the Lamp Status Sync functions.

All settings come from environment variables with defaults suitable for the
production registry deployment.
"""

import os
from dataclasses import dataclass


DEFAULT_REGISTRY_BASE_URL = "https://softwarebackenddeployment2.azurewebsites.net"
DEFAULT_TIMEOUT_SECONDS = 30.0
DEFAULT_PAGE_NUMBER = 1
DEFAULT_PAGE_SIZE = 10
DEFAULT_TARGET_DEVICE_TYPE = "Lamp"
DEFAULT_DEBOUNCE_SECONDS = 1.0


@dataclass(frozen=True)
class Settings:
    """Settings for talking to the device registry and debouncing updates."""
    registry_base_url: str = DEFAULT_REGISTRY_BASE_URL
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS
    page_number: int = DEFAULT_PAGE_NUMBER
    page_size: int = DEFAULT_PAGE_SIZE
    target_device_type: str = DEFAULT_TARGET_DEVICE_TYPE
    debounce_seconds: float = DEFAULT_DEBOUNCE_SECONDS


def _read_int(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}")
    if value < 1:
        raise ValueError(f"{name} must be >= 1, got {value}")
    return value


def _read_float(name: str, default: float) -> float:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}")
    if value < 0:
        raise ValueError(f"{name} must not be negative, got {value}")
    return value


def load_settings() -> Settings:
    """
    Build Settings from the current environment.

    Returns:
        Settings populated from environment variables, falling back to defaults

    Raises:
        ValueError: If a numeric variable cannot be parsed or is out of range
    """
    base_url = os.environ.get("REGISTRY_BASE_URL") or DEFAULT_REGISTRY_BASE_URL

    return Settings(
        registry_base_url=base_url.rstrip("/"),
        timeout_seconds=_read_float("REGISTRY_TIMEOUT_SECONDS", DEFAULT_TIMEOUT_SECONDS),
        page_number=_read_int("DEVICE_PAGE_NUMBER", DEFAULT_PAGE_NUMBER),
        page_size=_read_int("DEVICE_PAGE_SIZE", DEFAULT_PAGE_SIZE),
        target_device_type=os.environ.get("TARGET_DEVICE_TYPE") or DEFAULT_TARGET_DEVICE_TYPE,
        debounce_seconds=_read_float("DEBOUNCE_SECONDS", DEFAULT_DEBOUNCE_SECONDS),
    )
