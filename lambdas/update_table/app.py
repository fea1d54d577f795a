# lambdas/update_table/app.py
import logging

from photo_album.config import load_table_settings
from photo_album.metadata_table import ImageTable
from photo_album.metadata_update import MetadataUpdater

logging.getLogger().setLevel(logging.INFO)

METADATA_UPDATER = MetadataUpdater(ImageTable.from_settings(load_table_settings()))


def handler(event, context):
    """Triggered by the NewImageTopic for messages carrying a metadata_type attribute."""
    return METADATA_UPDATER.process_batch(event).as_response()
