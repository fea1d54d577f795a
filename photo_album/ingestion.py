# photo_album/ingestion.py
"""
Ingestion of object events from the image processing queue.

Errors are never caught per record: one bad object fails the whole
invocation so SQS redelivers the batch and, after the queue's
maxReceiveCount, moves it to the dead-letter queue where the rejection
mailer picks it up.
"""
import json
import logging

from photo_album.batch import BatchResult
from photo_album.events import ObjectEvent, object_events_from_sqs_record
from photo_album.metadata_table import ImageTable
from photo_album.validation import validate_image_type

logger = logging.getLogger(__name__)


class ImageLogger:

    def __init__(self, table: ImageTable):
        self.table = table

    def process_object_event(self, event: ObjectEvent) -> bool:
        """Applies one S3 record to the table. Returns False when the event kind is ignored."""
        logger.info("Processing file: s3://%s/%s (%s)", event.bucket, event.key, event.event_name)

        if event.is_creation:
            validate_image_type(event.key)
            self.table.record_image(event)
            return True
        if event.is_removal:
            self.table.remove_image(event.key)
            return True

        logger.warning("Skipping unsupported event type '%s' for %s", event.event_name, event.key)
        return False

    def process_batch(self, event: dict) -> BatchResult:
        logger.info("Event %s", json.dumps(event))
        result = BatchResult()

        for record in event.get('Records', []):
            try:
                object_events = object_events_from_sqs_record(record)
                if not object_events:
                    logger.warning("No S3 records found in message %s. Skipping.", record.get('messageId'))
                    result.skipped += 1
                    continue

                for object_event in object_events:
                    if self.process_object_event(object_event):
                        result.processed += 1
                    else:
                        result.skipped += 1
            except Exception:
                logger.exception("Error processing message %s", record.get('messageId'))
                # Re-raise so the message is redelivered or sent to the DLQ.
                raise

        return result
