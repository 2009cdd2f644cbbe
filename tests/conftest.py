"""Shared fixtures: sample Lambda events and a fake SQS client."""
import base64
import os
from unittest.mock import MagicMock

import pytest

os.environ.setdefault("AWS_REGION", "us-east-1")
os.environ.setdefault("AWS_DEFAULT_REGION", "us-east-1")

from event_router.runtime.deps import Deps  # noqa: E402

RULE_ARN = "arn:aws:events:us-east-1:1234567890:rule/abcdefg"
TOPIC_ARN = "arn:aws:sns:us-east-1:1234567890:topic-1234"
SQS_ARN = "arn:aws:sqs:us-east-1:1234567890:sqs"
SQS_FIFO_ARN = "arn:aws:sqs:us-east-1:1234567890:sqs-fifo"
MSK_ARN = "arn:aws:kafka:us-east-1:1234567890:cluster/orders/abcd-1234"
QUEUE_URL = "https://sqs.us-east-1.amazonaws.com/1234567890/sqs"


def make_sqs_record(message_id: str, body: str, arn: str = SQS_ARN) -> dict:
    return {
        "messageId": message_id,
        "receiptHandle": f"receipt-{message_id}",
        "body": body,
        "attributes": {
            "ApproximateReceiveCount": "1",
            "SentTimestamp": "1234567890123",
            "SenderId": "abcdefghijklmnopqrstu",
            "ApproximateFirstReceiveTimestamp": "1234567891234",
        },
        "messageAttributes": {},
        "md5OfBody": "abcdefghijklmnopqrstuvwxyz012345",
        "eventSource": "aws:sqs",
        "eventSourceARN": arn,
        "awsRegion": "us-east-1",
    }


def make_sqs_event(bodies, arn: str = SQS_ARN) -> dict:
    return {"Records": [make_sqs_record(str(i), body, arn) for i, body in enumerate(bodies, start=1)]}


def make_kafka_record(topic: str, partition: int, offset: int, value: str) -> dict:
    return {
        "topic": topic,
        "partition": partition,
        "offset": offset,
        "timestamp": 1545084650987,
        "timestampType": "CREATE_TIME",
        "key": base64.b64encode(f"key-{offset}".encode()).decode(),
        "value": base64.b64encode(value.encode()).decode(),
        "headers": [],
    }


@pytest.fixture
def sns_event():
    return {
        "Records": [
            {
                "EventVersion": "1",
                "EventSubscriptionArn": f"{TOPIC_ARN}:abcdefg",
                "EventSource": "aws:sns",
                "Sns": {
                    "SignatureVersion": "1",
                    "Timestamp": "2021-12-02T20:21:00Z",
                    "Signature": "abcdefghijklmnopqrstuvwxyz",
                    "MessageId": "abcdefghijklmnopqrstuvwxyz",
                    "Message": "Hello from SNS!",
                    "MessageAttributes": {},
                    "Type": "Notification",
                    "TopicArn": TOPIC_ARN,
                    "Subject": "TestInvoke",
                },
            }
        ]
    }


@pytest.fixture
def eventbridge_event():
    return {
        "id": "1",
        "version": "0",
        "account": "1234567890",
        "time": "2021-12-02T20:21:00Z",
        "region": "us-east-1",
        "source": "aws.events",
        "resources": [RULE_ARN],
        "detail": {"job": "nightly"},
        "detail-type": "Scheduled Event",
    }


@pytest.fixture
def kafka_event():
    return {
        "eventSource": "aws:kafka",
        "eventSourceArn": MSK_ARN,
        "bootstrapServers": "b-1.orders.kafka.us-east-1.amazonaws.com:9092",
        "records": {
            "orders-0": [
                make_kafka_record("orders", 0, 10, '{"order": 1}'),
                make_kafka_record("audit", 0, 11, '{"audit": 1}'),
                make_kafka_record("orders", 0, 12, '{"order": 2}'),
            ],
        },
    }


@pytest.fixture
def sqs_client():
    client = MagicMock(name="sqs")
    client.get_queue_url.return_value = {"QueueUrl": QUEUE_URL}
    client.delete_message_batch.return_value = {"Successful": [], "Failed": []}
    return client


@pytest.fixture
def client_factory(sqs_client):
    return MagicMock(name="client_factory", return_value=sqs_client)


@pytest.fixture
def deps(client_factory):
    return Deps(max_workers=10, log_level="INFO", client_factory=client_factory)
