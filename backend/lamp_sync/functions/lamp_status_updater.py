"""
Lamp Status Updater Lambda Handler

Keeps the newest lamp in the device registry in sync with LED telemetry:
- Parses IoT Central telemetry messages from the SQS queue
- Debounces repeated statuses within a short window
- Looks up the lamp with the highest id in the registry
- Sends the new on/off status to the registry

Processes SQS records; failed updates are reported as batch item failures.
"""

from enum import Enum
from typing import Dict, Any, Optional
from aws_lambda_powertools import Logger
from aws_lambda_powertools.utilities.typing import LambdaContext

from shared.batch_utils import process_sqs_batch_with_isolation
from shared.config import Settings, load_settings
from shared.debounce import DebounceState
from shared.device_selection import select_latest_device
from shared.logging_utils import log_parse_failure, log_debounce_skip, log_registry_failure
from shared.models import MessageParseError, UpdateDeviceCommand, parse_telemetry_message
from shared.registry_client import RegistryClient, RegistryFetchError, RegistryUpdateError

logger = Logger()


class UpdateOutcome(str, Enum):
    """Why processing of a message stopped."""
    UPDATED = "updated"
    INVALID_MESSAGE = "invalid_message"
    MISSING_TELEMETRY = "missing_telemetry"
    DEBOUNCED = "debounced"
    FETCH_FAILED = "fetch_failed"
    NO_DEVICES = "no_devices"
    NO_TARGET_DEVICE = "no_target_device"


class LampStatusUpdater:
    """
    Applies LED telemetry to the target lamp in the device registry.

    One instance lives per process; its DebounceState is shared by every
    message the process handles.
    """

    def __init__(
        self,
        registry: RegistryClient,
        settings: Settings,
        debounce: Optional[DebounceState] = None
    ):
        self.registry = registry
        self.settings = settings
        self.debounce = debounce or DebounceState(window_seconds=settings.debounce_seconds)

    def handle_message(self, raw_message: str) -> UpdateOutcome:
        """
        Process one raw queue message.

        Args:
            raw_message: Message body

        Returns:
            Outcome describing whether the lamp was updated or why not

        Raises:
            RegistryUpdateError: If the registry rejects the update
            requests.RequestException: On transport failures talking to the registry
        """
        logger.info("Raw message", extra={"raw_message": raw_message})

        try:
            message = parse_telemetry_message(raw_message)
        except MessageParseError as e:
            log_parse_failure(logger, raw_message, e)
            return UpdateOutcome.INVALID_MESSAGE

        # "message" is a reserved LogRecord attribute
        logger.info("Deserialized message", extra={
            "telemetry_message": message.to_log_dict() if message is not None else None
        })

        if message is None or message.telemetry is None:
            logger.error("Telemetry data is null. Message is invalid.")
            return UpdateOutcome.MISSING_TELEMETRY

        current_status = message.telemetry.is_on

        if not self.debounce.try_accept(current_status):
            log_debounce_skip(
                logger,
                status=current_status,
                seconds_since_last_update=self.debounce.seconds_since_last_update(),
                window_seconds=self.debounce.window_seconds,
                device_id=message.device_id
            )
            return UpdateOutcome.DEBOUNCED

        try:
            device_list = self.registry.get_devices(
                page_number=self.settings.page_number,
                page_size=self.settings.page_size
            )
        except RegistryFetchError as e:
            log_registry_failure(logger, str(e), e.status_code, e.response_text)
            return UpdateOutcome.FETCH_FAILED

        if not device_list.data:
            logger.error("No devices found.", extra={
                "succeeded": device_list.succeeded,
                "registry_message": device_list.message,
                "errors": device_list.errors
            })
            return UpdateOutcome.NO_DEVICES

        # Only the fetched page is searched
        target = select_latest_device(device_list.data, self.settings.target_device_type)
        if target is None:
            logger.error("Failed to find the latest lamp device.", extra={
                "device_type": self.settings.target_device_type,
                "device_count": len(device_list.data)
            })
            return UpdateOutcome.NO_TARGET_DEVICE

        logger.info("Selected target device", extra={"device": target.to_log_dict()})

        command = UpdateDeviceCommand(id=target.id, name=target.name, status=current_status)

        try:
            self.registry.update_device(command)
        except RegistryUpdateError as e:
            log_registry_failure(
                logger,
                "Failed to update data",
                e.status_code,
                e.response_text,
                extra_data={"device_id": e.device_id}
            )
            raise

        logger.info("Data updated successfully.", extra={
            "device_id": target.id,
            "status": current_status
        })
        return UpdateOutcome.UPDATED


_updater: Optional[LampStatusUpdater] = None


def get_updater() -> LampStatusUpdater:
    """Return the process-wide updater, creating it on first use."""
    global _updater
    if _updater is None:
        settings = load_settings()
        registry = RegistryClient(
            base_url=settings.registry_base_url,
            timeout=settings.timeout_seconds
        )
        _updater = LampStatusUpdater(registry, settings)
    return _updater


def reset_updater() -> None:
    """Drop the cached updater so the next invocation rebuilds it."""
    global _updater
    _updater = None


@logger.inject_lambda_context
def lambda_handler(event: Dict[str, Any], context: LambdaContext) -> Dict[str, Any]:
    """
    Lambda handler for Lamp Status Updater.

    Processes SQS records carrying IoT Central telemetry messages.

    Args:
        event: SQS event containing Records
        context: Lambda context

    Returns:
        Response with batch item failures for partial batch failure handling
    """
    records = event.get("Records", [])

    logger.info("Lamp Status Updater Lambda invoked", extra={
        "record_count": len(records)
    })

    batch_item_failures = process_sqs_batch_with_isolation(
        records=records,
        process_func=process_queue_record,
        logger_instance=logger
    )

    logger.info("Lamp Status Updater processing complete", extra={
        "total_records": len(records),
        "failed_records": len(batch_item_failures)
    })

    return {
        "batchItemFailures": batch_item_failures
    }


def process_queue_record(record: Dict[str, Any]) -> UpdateOutcome:
    """
    Process a single SQS record.

    Args:
        record: SQS record

    Returns:
        Outcome of handling the record's body
    """
    logger.info("Processing queue record", extra={"message_id": record.get("messageId")})
    return get_updater().handle_message(record.get("body") or "")
