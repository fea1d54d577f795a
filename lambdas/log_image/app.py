# lambdas/log_image/app.py
import logging

from photo_album.config import load_table_settings
from photo_album.ingestion import ImageLogger
from photo_album.metadata_table import ImageTable

logging.getLogger().setLevel(logging.INFO)

# Built once per container so warm invocations reuse the DynamoDB client.
# A missing IMAGE_TABLE_NAME raises here and fails the Lambda init.
IMAGE_LOGGER = ImageLogger(ImageTable.from_settings(load_table_settings()))


def handler(event, context):
    """
    Triggered by the image processing queue. Any exception propagates so the
    whole batch is retried and eventually dead-lettered.
    """
    return IMAGE_LOGGER.process_batch(event).as_response()
