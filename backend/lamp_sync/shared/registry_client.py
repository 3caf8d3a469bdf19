"""
HTTP client for the device registry service.

Wraps the two registry endpoints used by the lamp sync:
- GET /api/v1/Device/GetAllDevices
- PUT /api/v1/Device/UpdateDevice
"""

from typing import Optional

import requests
from aws_lambda_powertools import Logger

from shared.config import DEFAULT_REGISTRY_BASE_URL, DEFAULT_TIMEOUT_SECONDS
from shared.models import DeviceListResponse, UpdateDeviceCommand

logger = Logger(child=True)

GET_ALL_DEVICES_PATH = "/api/v1/Device/GetAllDevices"
UPDATE_DEVICE_PATH = "/api/v1/Device/UpdateDevice"


def _is_success(response: requests.Response) -> bool:
    return 200 <= response.status_code < 300


class RegistryError(Exception):
    """Base class for device registry failures."""

    def __init__(self, message: str, status_code: Optional[int] = None, response_text: str = ""):
        super().__init__(message)
        self.status_code = status_code
        self.response_text = response_text


class RegistryFetchError(RegistryError):
    """The device list could not be fetched or decoded."""


class RegistryUpdateError(RegistryError):
    """The registry rejected a device update."""

    def __init__(self, message: str, device_id: int, status_code: Optional[int] = None, response_text: str = ""):
        super().__init__(message, status_code=status_code, response_text=response_text)
        self.device_id = device_id


class RegistryClient:
    """Client for the device registry REST API."""

    def __init__(
        self,
        base_url: str = DEFAULT_REGISTRY_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        session: Optional[requests.Session] = None
    ):
        """
        Initialize the registry client.

        Args:
            base_url: Registry base URL without trailing slash
            timeout: Per-request timeout in seconds
            session: Optional requests session, reused across calls
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    def get_all_devices_url(self, page_number: int, page_size: int) -> str:
        return f"{self.base_url}{GET_ALL_DEVICES_PATH}?PageNumber={page_number}&PageSize={page_size}"

    def update_device_url(self, device_id: int) -> str:
        return f"{self.base_url}{UPDATE_DEVICE_PATH}?id={device_id}"

    def get_devices(self, page_number: int = 1, page_size: int = 10) -> DeviceListResponse:
        """
        Fetch one page of devices.

        Args:
            page_number: 1-based page number
            page_size: Number of devices per page

        Returns:
            Parsed DeviceListResponse

        Raises:
            RegistryFetchError: On a non-success status or an undecodable body
            requests.RequestException: On transport failures
        """
        url = self.get_all_devices_url(page_number, page_size)
        logger.info("Fetching devices", extra={"url": url})

        response = self.session.get(url, timeout=self.timeout)

        if not _is_success(response):
            raise RegistryFetchError(
                f"Failed to fetch devices. Status Code: {response.status_code}",
                status_code=response.status_code,
                response_text=response.text
            )

        try:
            payload = response.json()
        except ValueError as e:
            raise RegistryFetchError(
                f"Device list response is not valid JSON: {e}",
                status_code=response.status_code,
                response_text=response.text
            ) from e

        if payload is None:
            return DeviceListResponse()
        if not isinstance(payload, dict):
            raise RegistryFetchError(
                f"Device list response must be an object, got {type(payload).__name__}",
                status_code=response.status_code,
                response_text=response.text
            )

        try:
            return DeviceListResponse.from_dict(payload)
        except ValueError as e:
            raise RegistryFetchError(
                f"Device list response has an unexpected shape: {e}",
                status_code=response.status_code,
                response_text=response.text
            ) from e

    def update_device(self, command: UpdateDeviceCommand) -> requests.Response:
        """
        Send a partial update for one device.

        Args:
            command: Update to apply

        Returns:
            The successful HTTP response

        Raises:
            RegistryUpdateError: If the registry returns a non-success status
            requests.RequestException: On transport failures
        """
        url = self.update_device_url(command.id)
        body = command.to_request_body()
        logger.info("Sending device update", extra={"url": url, "body": body})

        response = self.session.put(url, json=body, timeout=self.timeout)

        if not _is_success(response):
            raise RegistryUpdateError(
                f"Failed to update device {command.id}. Status Code: {response.status_code}",
                device_id=command.id,
                status_code=response.status_code,
                response_text=response.text
            )

        return response
