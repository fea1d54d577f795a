# photo_album/validation.py
from photo_album.routing import METADATA_TYPES

VALID_IMAGE_EXTENSIONS = (".jpeg", ".jpg", ".png")


class InvalidImageTypeError(ValueError):
    """Raised when an uploaded object is not one of the accepted image types."""
    pass


class InvalidMetadataTypeError(ValueError):
    """Raised when a metadata update names an attribute outside the allow-list."""
    pass


def is_valid_image_type(key: str) -> bool:
    return key.lower().endswith(VALID_IMAGE_EXTENSIONS)


def validate_image_type(key: str) -> str:
    if not is_valid_image_type(key):
        raise InvalidImageTypeError(f"Invalid file type for object: {key}")
    return key


def validate_metadata_type(metadata_type: str | None) -> str:
    # The topic filter already restricts metadata_type; this check guards direct invocations.
    if metadata_type not in METADATA_TYPES:
        raise InvalidMetadataTypeError(f"Invalid metadata type: {metadata_type}")
    return metadata_type
