# =============================================================================
# Event Classifier - Match Lambda Events Against Bindings
# =============================================================================
# Each classifier takes the raw event and a binding identifier and returns
# the records that belong to it, or None when the event is not for it.
# Malformed shapes are treated as "not for this binding", never as errors.
# =============================================================================

import logging
from typing import Any, Dict, List, Optional

from event_router.runtime.records import (
    EventSource,
    NotificationRecord,
    QueueRecord,
    RuleEvent,
    StreamRecord,
)

logger = logging.getLogger(__name__)


def detect_event_source(event: Any) -> str:
    """
    Detect the source of a Lambda event.

    Returns one of: sns, sqs, kafka, eventbridge, unknown
    """
    if not isinstance(event, dict) or not event:
        return EventSource.UNKNOWN

    records = event.get("Records")
    if isinstance(records, list) and records and isinstance(records[0], dict):
        if records[0].get("EventSource") == EventSource.SNS_ORIGIN:
            return EventSource.SNS
        if records[0].get("eventSource") == EventSource.SQS_ORIGIN:
            return EventSource.SQS

    if event.get("eventSource") == EventSource.KAFKA_ORIGIN:
        return EventSource.KAFKA

    if "detail-type" in event and "source" in event:
        return EventSource.EVENTBRIDGE

    return EventSource.UNKNOWN


def _first_record(event: Any) -> Optional[Dict[str, Any]]:
    if not isinstance(event, dict):
        return None
    records = event.get("Records")
    if not isinstance(records, list) or not records:
        return None
    first = records[0]
    return first if isinstance(first, dict) else None


def classify_notification(event: Any, topic_arn: str) -> Optional[List[NotificationRecord]]:
    """SNS invokes Lambda with exactly one record per event."""
    if not topic_arn:
        return None
    record = _first_record(event)
    if record is None or record.get("EventSource") != EventSource.SNS_ORIGIN:
        return None
    sns = record.get("Sns")
    if not isinstance(sns, dict) or sns.get("TopicArn") != topic_arn:
        return None
    return [NotificationRecord.from_sns(sns)]


def classify_queue(event: Any, queue_arn: str) -> Optional[List[QueueRecord]]:
    """
    Return every message of an SQS batch sourced from ``queue_arn``.

    Only the first record is checked: an event source mapping delivers
    batches from a single queue, so a batch is homogeneous.
    """
    if not queue_arn:
        return None
    first = _first_record(event)
    if first is None:
        return None
    if first.get("eventSource") != EventSource.SQS_ORIGIN or first.get("eventSourceARN") != queue_arn:
        return None
    records = event["Records"]
    if not all(isinstance(record, dict) for record in records):
        logger.warning(f"Ignoring malformed SQS batch from {queue_arn}")
        return None
    return [QueueRecord.from_sqs(record) for record in records]


def classify_stream(event: Any, source_arn: str, topic: str) -> Optional[List[StreamRecord]]:
    """
    Return the Kafka records of ``topic`` from an MSK event.

    Records keep their order within a partition. Partitions are walked in
    the mapping's iteration order, which the platform does not define.
    """
    if not source_arn or not isinstance(event, dict):
        return None
    if event.get("eventSource") != EventSource.KAFKA_ORIGIN:
        return None
    if event.get("eventSourceArn") != source_arn:
        return None
    partitions = event.get("records")
    if not isinstance(partitions, dict):
        return None

    matched = []
    for partition_key, records in partitions.items():
        if not isinstance(records, list):
            logger.warning(f"Skipping malformed Kafka partition {partition_key}")
            continue
        for record in records:
            if isinstance(record, dict) and record.get("topic") == topic:
                matched.append(StreamRecord.from_kafka(record))
    return matched


def classify_rule(event: Any, rule_arn: str) -> Optional[RuleEvent]:
    """Match an EventBridge event whose resources name ``rule_arn``."""
    if not rule_arn or not isinstance(event, dict):
        return None
    if event.get("source") != EventSource.RULE_ORIGIN:
        return None
    resources = event.get("resources")
    if not isinstance(resources, list) or rule_arn not in resources:
        return None
    return RuleEvent.from_eventbridge(event)
