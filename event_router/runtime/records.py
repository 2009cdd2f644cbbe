# =============================================================================
# Records - Typed Views Over Lambda Event Payloads
# =============================================================================
# Each supported trigger (SNS, SQS, Kafka, EventBridge) is unwrapped into a
# small record type that handlers receive instead of the raw platform dict.
# =============================================================================

import base64
import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class EventSource:
    """Origin tags carried by Lambda events, and the labels used in logs."""
    SNS_ORIGIN = "aws:sns"
    SQS_ORIGIN = "aws:sqs"
    KAFKA_ORIGIN = "aws:kafka"
    RULE_ORIGIN = "aws.events"

    SNS = "sns"
    SQS = "sqs"
    KAFKA = "kafka"
    EVENTBRIDGE = "eventbridge"
    UNKNOWN = "unknown"


class SourceKind(str, Enum):
    """Kinds of source a handler can be bound to."""
    NOTIFICATION = "notification"      # SNS topic
    QUEUE = "queue"                    # SQS standard queue
    ORDERED_QUEUE = "ordered_queue"    # SQS FIFO queue
    LOG_STREAM = "log_stream"          # MSK / Kafka topic
    SCHEDULED_RULE = "scheduled_rule"  # EventBridge schedule
    GENERIC_RULE = "generic_rule"      # EventBridge pattern rule


def _loads(text: Any) -> Any:
    if isinstance(text, (dict, list)):
        return text
    try:
        return json.loads(text)
    except (TypeError, json.JSONDecodeError):
        return {"rawBody": text}


@dataclass(frozen=True)
class NotificationRecord:
    """A single SNS notification delivered to the function."""
    message_id: str
    topic_arn: str
    message: str
    subject: Optional[str] = None
    timestamp: str = ""
    message_attributes: Dict[str, Any] = field(default_factory=dict)
    raw: Dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_sns(cls, sns: Dict[str, Any]) -> "NotificationRecord":
        return cls(
            message_id=sns.get("MessageId", ""),
            topic_arn=sns.get("TopicArn", ""),
            message=sns.get("Message", ""),
            subject=sns.get("Subject"),
            timestamp=sns.get("Timestamp", ""),
            message_attributes=sns.get("MessageAttributes") or {},
            raw=sns,
        )

    def json(self) -> Any:
        """Decode the message as JSON, falling back to ``{"rawBody": ...}``."""
        return _loads(self.message)


@dataclass(frozen=True)
class QueueRecord:
    """One SQS message from a standard or FIFO queue batch."""
    message_id: str
    receipt_handle: str
    body: str
    event_source_arn: str
    attributes: Dict[str, Any] = field(default_factory=dict)
    message_attributes: Dict[str, Any] = field(default_factory=dict)
    raw: Dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_sqs(cls, record: Dict[str, Any]) -> "QueueRecord":
        return cls(
            message_id=record.get("messageId", ""),
            receipt_handle=record.get("receiptHandle", ""),
            body=record.get("body", ""),
            event_source_arn=record.get("eventSourceARN", ""),
            attributes=record.get("attributes") or {},
            message_attributes=record.get("messageAttributes") or {},
            raw=record,
        )

    @property
    def message_group_id(self) -> Optional[str]:
        """FIFO message group, ``None`` on standard queues."""
        return self.attributes.get("MessageGroupId")

    def delete_entry(self) -> Dict[str, str]:
        """Entry for ``sqs.delete_message_batch``."""
        return {"Id": self.message_id, "ReceiptHandle": self.receipt_handle}

    def json(self) -> Any:
        """
        Decode the body as JSON.

        SNS notifications fanned out to SQS arrive wrapped in an envelope
        with ``Type == "Notification"``; the inner message is returned.
        """
        parsed = _loads(self.body)
        if isinstance(parsed, dict) and parsed.get("Type") == "Notification":
            return _loads(parsed.get("Message", ""))
        return parsed


@dataclass(frozen=True)
class StreamRecord:
    """A Kafka record taken from an MSK event's partition map."""
    topic: str
    partition: int
    offset: int
    timestamp: Optional[int] = None
    key: Optional[str] = None
    value: Optional[str] = None
    headers: List[Dict[str, Any]] = field(default_factory=list)
    raw: Dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_kafka(cls, record: Dict[str, Any]) -> "StreamRecord":
        return cls(
            topic=record.get("topic", ""),
            partition=record.get("partition", 0),
            offset=record.get("offset", 0),
            timestamp=record.get("timestamp"),
            key=record.get("key"),
            value=record.get("value"),
            headers=record.get("headers") or [],
            raw=record,
        )

    def decoded_key(self) -> Optional[bytes]:
        return base64.b64decode(self.key) if self.key else None

    def decoded_value(self) -> Optional[bytes]:
        """Lambda delivers Kafka values base64 encoded."""
        return base64.b64decode(self.value) if self.value else None

    def json(self) -> Any:
        value = self.decoded_value()
        return _loads(value.decode("utf-8")) if value is not None else None


@dataclass(frozen=True)
class RuleEvent:
    """EventBridge rule trigger (scheduled or pattern based)."""
    event_id: str
    detail_type: str
    source: str
    resources: List[str] = field(default_factory=list)
    detail: Dict[str, Any] = field(default_factory=dict)
    time: str = ""
    raw: Dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_eventbridge(cls, event: Dict[str, Any]) -> "RuleEvent":
        return cls(
            event_id=event.get("id", ""),
            detail_type=event.get("detail-type", ""),
            source=event.get("source", ""),
            resources=list(event.get("resources") or []),
            detail=event.get("detail") or {},
            time=event.get("time", ""),
            raw=event,
        )
