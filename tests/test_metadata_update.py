# tests/test_metadata_update.py
from unittest.mock import MagicMock

from event_factories import metadata_update_event, s3_record, sns_record
from photo_album.events import parse_object_events
from photo_album.metadata_table import ImageTable
from photo_album.metadata_update import MetadataUpdater


def seed(image_table, file_name="beach.jpg"):
    (event,) = parse_object_events({"Records": [s3_record(file_name)]})
    image_table.record_image(event)


def test_update_sets_only_the_named_attribute(image_table, dynamo_table):
    seed(image_table)
    before = dict(dynamo_table.items["beach.jpg"])

    result = MetadataUpdater(image_table).process_batch(
        metadata_update_event("beach.jpg", "Photographer", "A. Smith"))

    assert result.processed == 1
    assert dynamo_table.items["beach.jpg"] == {**before, "Photographer": "A. Smith"}


def test_disallowed_tag_leaves_record_untouched(image_table, dynamo_table):
    seed(image_table)
    before = dict(dynamo_table.items["beach.jpg"])

    result = MetadataUpdater(image_table).process_batch(metadata_update_event("beach.jpg", "Owner", "Mallory"))

    assert result.failed == 1
    assert dynamo_table.items["beach.jpg"] == before


def test_failing_record_does_not_stop_the_loop(image_table, dynamo_table):
    seed(image_table)
    event = {"Records": [
        sns_record({"id": "beach.jpg", "value": "x"}),  # no metadata_type attribute
        sns_record("not json", {"metadata_type": "Caption"}),
        sns_record({"value": "no id"}, {"metadata_type": "Caption"}),
        *metadata_update_event("beach.jpg", "Caption", "Golden hour")["Records"],
    ]}

    result = MetadataUpdater(image_table).process_batch(event)

    assert (result.processed, result.failed) == (1, 3)
    assert dynamo_table.items["beach.jpg"]["Caption"] == "Golden hour"


def test_update_of_unknown_image_does_not_create_a_row(image_table, dynamo_table):
    result = MetadataUpdater(image_table).process_batch(metadata_update_event("ghost.jpg", "Date", "2024-11-20"))

    assert result.failed == 1
    assert dynamo_table.items == {}


def test_update_request_shape():
    table = MagicMock()

    MetadataUpdater(ImageTable(table)).process_batch(metadata_update_event("beach.jpg", "Caption", "Sea"))

    table.update_item.assert_called_once_with(
        Key={"fileName": "beach.jpg"},
        UpdateExpression="SET #attr = :val",
        ConditionExpression="attribute_exists(fileName)",
        ExpressionAttributeNames={"#attr": "Caption"},
        ExpressionAttributeValues={":val": "Sea"},
    )
