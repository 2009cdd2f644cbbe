# =============================================================================
# SQS Compensation Client
# =============================================================================
# Deletes successfully processed messages from their source queue so that
# only the failed ones are redelivered when the batch is reported as failed.
# =============================================================================

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Sequence

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from event_router.runtime.errors import CompensationError

logger = logging.getLogger(__name__)

DELETE_BATCH_LIMIT = 10  # sqs:DeleteMessageBatch accepts at most 10 entries

ClientFactory = Callable[..., Any]


@dataclass(frozen=True)
class QueueAddress:
    region: str
    account_id: str
    name: str


def parse_queue_arn(queue_arn: str) -> QueueAddress:
    """Split ``arn:aws:sqs:<region>:<account>:<name>`` into its parts."""
    parts = (queue_arn or "").split(":")
    if len(parts) != 6 or parts[0] != "arn" or parts[2] != "sqs" or not all(parts[3:]):
        raise CompensationError(queue_arn, "not an SQS queue ARN")
    return QueueAddress(region=parts[3], account_id=parts[4], name=parts[5])


class SqsCompensator:
    """
    Removes fulfilled records from an SQS queue.

    Clients are created lazily, one per region. Queue URLs are resolved with
    GetQueueUrl once per ARN and cached for the life of the container.
    """

    def __init__(self, client_factory: Optional[ClientFactory] = None):
        self._client_factory = client_factory or boto3.client
        self._clients: Dict[str, Any] = {}
        self._queue_urls: Dict[str, str] = {}

    def _client(self, region: str):
        if region not in self._clients:
            self._clients[region] = self._client_factory("sqs", region_name=region)
        return self._clients[region]

    def queue_url(self, queue_arn: str) -> str:
        if queue_arn not in self._queue_urls:
            address = parse_queue_arn(queue_arn)
            try:
                result = self._client(address.region).get_queue_url(
                    QueueName=address.name,
                    QueueOwnerAWSAccountId=address.account_id,
                )
            except (ClientError, BotoCoreError) as e:
                raise CompensationError(queue_arn, f"could not resolve queue URL: {e}") from e
            self._queue_urls[queue_arn] = result["QueueUrl"]
        return self._queue_urls[queue_arn]

    def compensate(self, queue_arn: str, entries: Sequence[Dict[str, str]]) -> None:
        """
        Delete ``entries`` (``{"Id", "ReceiptHandle"}`` dicts) from the queue.

        Raises CompensationError if any entry could not be deleted.
        """
        if not entries:
            return

        address = parse_queue_arn(queue_arn)
        client = self._client(address.region)
        queue_url = self.queue_url(queue_arn)

        failed: List[Dict[str, Any]] = []
        for start in range(0, len(entries), DELETE_BATCH_LIMIT):
            chunk = list(entries[start:start + DELETE_BATCH_LIMIT])
            try:
                response = client.delete_message_batch(QueueUrl=queue_url, Entries=chunk)
            except (ClientError, BotoCoreError) as e:
                raise CompensationError(queue_arn, str(e)) from e
            failed.extend(response.get("Failed") or [])

        if failed:
            ids = ", ".join(str(f.get("Id")) for f in failed)
            raise CompensationError(queue_arn, f"{len(failed)} entries not deleted ({ids})", failed)

        logger.info(f"Deleted {len(entries)} messages from {address.name}")

    def for_queue(self, queue_arn: str) -> Callable[[List[Any]], None]:
        """Bind to one queue, taking fulfilled ``QueueRecord`` objects."""
        def compensate(records: List[Any]) -> None:
            self.compensate(queue_arn, [record.delete_entry() for record in records])
        return compensate
