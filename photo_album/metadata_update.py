# photo_album/metadata_update.py
import json
import logging

from photo_album.batch import BatchResult
from photo_album.metadata_table import ImageTable
from photo_album.models import MetadataUpdate
from photo_album.routing import METADATA_TYPE_ATTRIBUTE, RoutingEnvelope
from photo_album.validation import validate_metadata_type

logger = logging.getLogger(__name__)


def parse_update(record: dict) -> MetadataUpdate:
    """
    Reads the `{id, value}` instruction and its metadata_type attribute from
    an SNS record.

    Raises:
        InvalidMetadataTypeError: If metadata_type is not an allowed attribute.
        pydantic.ValidationError: If the instruction is malformed.
    """
    envelope = RoutingEnvelope.from_sns_record(record)
    metadata_type = validate_metadata_type(envelope.message_attributes.get(METADATA_TYPE_ATTRIBUTE))
    return MetadataUpdate.model_validate({**json.loads(envelope.message), "metadata_type": metadata_type})


class MetadataUpdater:
    """
    Applies caption/date/photographer updates published to the topic. Each
    record succeeds or fails on its own; failures are logged and skipped.
    """

    def __init__(self, table: ImageTable):
        self.table = table

    def process_record(self, record: dict) -> None:
        update = parse_update(record)
        logger.info("Updating metadata for %s: %s = %s", update.id, update.metadata_type, update.value)
        self.table.update_attribute(update.id, update.metadata_type, update.value)

    def process_batch(self, event: dict) -> BatchResult:
        logger.info("Received event: %s", json.dumps(event))
        result = BatchResult()

        for record in event.get('Records', []):
            try:
                self.process_record(record)
                result.processed += 1
            except Exception:
                logger.exception("Error processing metadata update")
                result.failed += 1

        return result
