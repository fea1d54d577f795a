# photo_album/events.py
"""
Decoding of the envelopes the Lambdas receive.

S3 notifications reach the queues wrapped twice: the SQS record body is the
SNS notification JSON, and its "Message" field is the S3 event JSON. Stream
records carry DynamoDB-typed images that are unmarshalled with boto3's
TypeDeserializer.
"""
import json
import urllib.parse
from dataclasses import dataclass
from typing import Any

from boto3.dynamodb.types import TypeDeserializer

CREATED_PREFIX = "ObjectCreated:"
REMOVED_PREFIX = "ObjectRemoved:"


@dataclass(frozen=True)
class ObjectEvent:
    """One S3 record: which object changed, where, and how."""
    event_name: str
    bucket: str
    key: str
    event_time: str | None = None

    @property
    def is_creation(self) -> bool:
        return self.event_name.startswith(CREATED_PREFIX)

    @property
    def is_removal(self) -> bool:
        return self.event_name.startswith(REMOVED_PREFIX)


def decode_object_key(raw_key: str) -> str:
    """S3 keys arrive URL-encoded with spaces as '+'."""
    return urllib.parse.unquote_plus(raw_key)


def _load_json(value: Any) -> Any:
    return json.loads(value) if isinstance(value, (str, bytes)) else value


def unwrap_sqs_body(record: dict) -> dict:
    """
    Returns the S3 event carried by an SQS record. Handles both messages that
    came through the SNS topic and raw S3 events sent directly to the queue.
    """
    body = _load_json(record["body"])
    if isinstance(body, dict) and "Message" in body:
        return _load_json(body["Message"])
    return body


def parse_object_events(s3_event: dict) -> list[ObjectEvent]:
    events = []
    for s3_record in s3_event.get("Records") or []:
        s3e = s3_record["s3"]
        events.append(ObjectEvent(
            event_name=s3_record.get("eventName", ""),
            bucket=s3e["bucket"]["name"],
            key=decode_object_key(s3e["object"]["key"]),
            event_time=s3_record.get("eventTime"),
        ))
    return events


def object_events_from_sqs_record(record: dict) -> list[ObjectEvent]:
    return parse_object_events(unwrap_sqs_body(record))


# Custom Deserializer to handle DynamoDB Stream data format.
class DynamoDBDeserializer(TypeDeserializer):
    def _deserialize_n(self, value):
        return int(value) if value.lstrip("-").isdigit() else float(value)


DDB_DESERIALIZER = DynamoDBDeserializer()


def unmarshall_dynamodb_item(ddb_item: dict) -> dict:
    """Converts a DynamoDB-formatted item from a stream into a regular Python dictionary."""
    return {k: DDB_DESERIALIZER.deserialize(v) for k, v in ddb_item.items()}
