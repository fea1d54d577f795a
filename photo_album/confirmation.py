# photo_album/confirmation.py
import json
import logging

from photo_album.batch import BatchResult
from photo_album.events import unmarshall_dynamodb_item
from photo_album.mailer import CONFIRMATION_SUBJECT, SesMailer

logger = logging.getLogger(__name__)


def confirmation_message(file_name: str, bucket_name: str) -> str:
    return f'Your image "{file_name}" has been successfully uploaded to the bucket "{bucket_name}".'


class ConfirmationMailer:
    """
    Triggered by the image table's stream. Sends one confirmation per newly
    inserted row; updates and removals are ignored. A failing record is
    logged and does not block the rest of the batch.
    """

    def __init__(self, mailer: SesMailer):
        self.mailer = mailer

    def process_record(self, record: dict) -> bool:
        if record.get('eventName') != 'INSERT':
            logger.info("Skipping non-INSERT event: %s", record.get('eventName'))
            return False

        new_image = record.get('dynamodb', {}).get('NewImage')
        if not new_image:
            logger.info("Skipping INSERT event without NewImage.")
            return False

        item = unmarshall_dynamodb_item(new_image)
        file_name = item.get('fileName')
        bucket_name = item.get('bucketName')
        if not file_name or not bucket_name:
            logger.warning("Missing required attributes in DynamoDB stream record.")
            return False

        logger.info("Processing new image: %s in bucket: %s", file_name, bucket_name)
        self.mailer.send(CONFIRMATION_SUBJECT, confirmation_message(file_name, bucket_name))
        logger.info("Email sent successfully for item: %s", file_name)
        return True

    def process_batch(self, event: dict) -> BatchResult:
        logger.info("Received DynamoDB Stream event: %s", json.dumps(event, default=str))
        result = BatchResult()

        for record in event.get('Records', []):
            try:
                if self.process_record(record):
                    result.processed += 1
                else:
                    result.skipped += 1
            except Exception:
                logger.exception("Error processing DynamoDB Stream record %s", record.get('eventID'))
                result.failed += 1

        return result
