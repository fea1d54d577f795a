# cli/album.py
"""
Small command line tool to drive a deployed photo album stack.

    python cli/album.py upload ./beach.jpg
    python cli/album.py annotate beach.jpg Photographer "A. Smith"
    python cli/album.py delete beach.jpg

Bucket and topic come from IMAGES_BUCKET and NEW_IMAGE_TOPIC_ARN (a .env file works).
"""
import argparse
import json
import os
import sys

import boto3
from botocore.exceptions import ClientError
from dotenv import load_dotenv

from photo_album.routing import METADATA_TYPE_ATTRIBUTE, METADATA_TYPES
from photo_album.validation import is_valid_image_type, validate_metadata_type

# Load environment variables from a .env file for local testing
load_dotenv()


def create_metadata_message(file_name: str, metadata_type: str, value: str) -> dict:
    """
    Builds the sns.publish arguments for a metadata update. The attribute is
    validated here too, since the topic silently drops messages no filter accepts.
    """
    validate_metadata_type(metadata_type)
    return {
        "Message": json.dumps({"id": file_name, "value": value}),
        "MessageAttributes": {
            METADATA_TYPE_ATTRIBUTE: {"DataType": "String", "StringValue": metadata_type},
        },
    }


def publish_metadata(sns, topic_arn: str, file_name: str, metadata_type: str, value: str) -> str:
    response = sns.publish(TopicArn=topic_arn, **create_metadata_message(file_name, metadata_type, value))
    return response["MessageId"]


def upload_image(s3, bucket: str, path: str, key: str | None = None) -> str:
    key = key or os.path.basename(path)
    if not is_valid_image_type(key):
        print(f"⚠️ '{key}' is not a .jpeg, .jpg or .png file; it will be rejected after processing retries.")
    s3.upload_file(path, bucket, key)
    return key


def delete_image(s3, bucket: str, key: str) -> None:
    s3.delete_object(Bucket=bucket, Key=key)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Photo album test CLI")
    commands = parser.add_subparsers(dest="command", required=True)

    upload = commands.add_parser("upload", help="Upload an image to the album bucket")
    upload.add_argument("path")
    upload.add_argument("--key", help="Object key, defaults to the file name")

    delete = commands.add_parser("delete", help="Delete an image from the album bucket")
    delete.add_argument("key")

    annotate = commands.add_parser("annotate", help="Publish a metadata update for an image")
    annotate.add_argument("key")
    annotate.add_argument("metadata_type", choices=METADATA_TYPES)
    annotate.add_argument("value")
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    region = os.environ.get("AWS_REGION")

    try:
        if args.command == "annotate":
            topic_arn = os.environ.get("NEW_IMAGE_TOPIC_ARN")
            if not topic_arn:
                print("❌ ERROR: NEW_IMAGE_TOPIC_ARN environment variable not set. Please create a .env file.")
                return 1
            message_id = publish_metadata(boto3.client("sns", region_name=region), topic_arn,
                                          args.key, args.metadata_type, args.value)
            print(f"✅ Published {args.metadata_type} update for '{args.key}'. MessageId: {message_id}")
            return 0

        bucket = os.environ.get("IMAGES_BUCKET")
        if not bucket:
            print("❌ ERROR: IMAGES_BUCKET environment variable not set. Please create a .env file.")
            return 1
        s3 = boto3.client("s3", region_name=region)
        if args.command == "upload":
            key = upload_image(s3, bucket, args.path, args.key)
            print(f"✅ Uploaded s3://{bucket}/{key}")
        else:
            delete_image(s3, bucket, args.key)
            print(f"✅ Deleted s3://{bucket}/{args.key}")
        return 0

    except ClientError as e:
        print(f"❌ AWS error: {e.response['Error']['Message']}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
