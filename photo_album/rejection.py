# photo_album/rejection.py
import json
import logging

from photo_album.batch import BatchResult
from photo_album.events import object_events_from_sqs_record
from photo_album.mailer import REJECTION_SUBJECT, SesMailer
from photo_album.validation import VALID_IMAGE_EXTENSIONS

logger = logging.getLogger(__name__)


def rejection_message(file_name: str, bucket_name: str) -> str:
    accepted = ", ".join(VALID_IMAGE_EXTENSIONS)
    return (
        f'Your image "{file_name}" uploaded to the bucket "{bucket_name}" could not be processed and was rejected. '
        f"Accepted file types are: {accepted}."
    )


class RejectionMailer:
    """
    Consumes the image processing dead-letter queue. Every message there has
    already failed ingestion the maximum number of times; each object it
    names gets one rejection email.
    """

    def __init__(self, mailer: SesMailer):
        self.mailer = mailer

    def process_record(self, record: dict) -> int:
        object_events = object_events_from_sqs_record(record)
        if not object_events:
            logger.warning("No S3 records found in dead-lettered message %s. Skipping.", record.get('messageId'))
            return 0

        for object_event in object_events:
            logger.info("Rejecting file: s3://%s/%s", object_event.bucket, object_event.key)
            self.mailer.send(REJECTION_SUBJECT, rejection_message(object_event.key, object_event.bucket))
        return len(object_events)

    def process_batch(self, event: dict) -> BatchResult:
        logger.info("Received DLQ event: %s", json.dumps(event))
        result = BatchResult()

        for record in event.get('Records', []):
            try:
                if self.process_record(record):
                    result.processed += 1
                else:
                    result.skipped += 1
            except Exception:
                logger.exception("Error sending rejection for message %s", record.get('messageId'))
                result.failed += 1

        return result
