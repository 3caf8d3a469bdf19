"""
SQS batch processing utilities for Lambda functions.

Processes each queue record independently and reports failed records using
the partial batch response contract.
"""

from typing import Callable, Any, Optional, Dict, List
from aws_lambda_powertools import Logger

logger = Logger(child=True)


def process_sqs_batch_with_isolation(
    records: List[Dict[str, Any]],
    process_func: Callable[[Dict[str, Any]], Any],
    logger_instance: Optional[Logger] = None
) -> List[Dict[str, str]]:
    """
    Run process_func on every queue record, collecting the ones that raise.

    A telemetry message that stops early (bad JSON, debounced, no lamp) returns
    normally and is acknowledged. Only records whose processing raises, such as
    a rejected lamp update, are listed so SQS redelivers just those messages.

    Args:
        records: SQS records from the Lambda event
        process_func: Handler for a single record
        logger_instance: Logger to report failures on, defaults to the module logger

    Returns:
        Partial batch response entries, one {"itemIdentifier": messageId} per failed record
    """
    log = logger_instance or logger
    batch_item_failures = []

    for record in records:
        message_id = record.get("messageId")
        try:
            process_func(record)
        except Exception as e:
            log.error(
                "Failed to process queue record",
                extra={
                    "message_id": message_id,
                    "error": str(e),
                    "error_type": type(e).__name__
                }
            )

            if message_id:
                batch_item_failures.append({"itemIdentifier": message_id})

    return batch_item_failures
