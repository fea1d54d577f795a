# photo_album/metadata_table.py
from datetime import datetime, timezone
import logging

import boto3

from photo_album.config import TableSettings
from photo_album.events import ObjectEvent
from photo_album.models import ImageMetadata, VALID_STATUS

logger = logging.getLogger(__name__)


class ImageTable:
    """
    Data access for the image metadata table.

    All writes are single-key and idempotent, so a redelivered event converges
    on the same row instead of failing.
    """

    def __init__(self, table):
        self.table = table

    @classmethod
    def from_settings(cls, settings: TableSettings, dynamodb=None) -> "ImageTable":
        dynamodb = dynamodb or boto3.resource('dynamodb')
        return cls(dynamodb.Table(settings.image_table_name))

    def record_image(self, event: ObjectEvent) -> ImageMetadata:
        """
        Upserts the core attributes of a validated upload. Optional metadata
        already on the row (Caption, Date, Photographer) is left in place.
        """
        metadata = ImageMetadata(
            file_name=event.key,
            upload_time=event.event_time or datetime.now(timezone.utc).isoformat(),
            bucket_name=event.bucket,
            status=VALID_STATUS,
        )
        self.table.update_item(
            Key={'fileName': metadata.file_name},
            UpdateExpression='SET uploadTime = :upload_time, bucketName = :bucket_name, #status = :status',
            # "status" is a DynamoDB reserved word.
            ExpressionAttributeNames={'#status': 'status'},
            ExpressionAttributeValues={
                ':upload_time': metadata.upload_time,
                ':bucket_name': metadata.bucket_name,
                ':status': metadata.status,
            },
        )
        logger.info("Image metadata logged to DynamoDB for: %s", metadata.file_name)
        return metadata

    def remove_image(self, file_name: str) -> None:
        # DeleteItem on a missing key succeeds without changes.
        self.table.delete_item(Key={'fileName': file_name})
        logger.info("Image metadata removed from DynamoDB for: %s", file_name)

    def update_attribute(self, file_name: str, attribute: str, value: str) -> None:
        """
        Sets one metadata attribute on an existing row. Raises
        ConditionalCheckFailedException (a ClientError) when the row is absent.
        """
        self.table.update_item(
            Key={'fileName': file_name},
            UpdateExpression='SET #attr = :val',
            ConditionExpression='attribute_exists(fileName)',
            ExpressionAttributeNames={'#attr': attribute},
            ExpressionAttributeValues={':val': value},
        )
        logger.info("Metadata updated for %s: %s = %s", file_name, attribute, value)
