# photo_album/models.py
from pydantic import BaseModel, ConfigDict, Field

VALID_STATUS = "valid"


class ImageMetadata(BaseModel):
    """
    A row of the image table, keyed by the object key. Field aliases are the
    attribute names stored in DynamoDB.
    """
    model_config = ConfigDict(populate_by_name=True)

    file_name: str = Field(..., alias="fileName")
    upload_time: str = Field(..., alias="uploadTime")
    bucket_name: str = Field(..., alias="bucketName")
    status: str = VALID_STATUS
    caption: str | None = Field(None, alias="Caption")
    date: str | None = Field(None, alias="Date")
    photographer: str | None = Field(None, alias="Photographer")


class MetadataUpdate(BaseModel):
    """The `{id, value}` instruction published to the topic, plus its metadata_type attribute."""
    id: str = Field(..., min_length=1)
    value: str
    metadata_type: str | None = None
