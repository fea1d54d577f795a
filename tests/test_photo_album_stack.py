# tests/test_photo_album_stack.py
import aws_cdk as cdk
import pytest
from aws_cdk import assertions

from infra_cdk.photo_album_stack import PhotoAlbumStack
from photo_album.routing import INGESTION_POLICY, METADATA_UPDATE_POLICY

Match = assertions.Match


@pytest.fixture(scope="module")
def template() -> assertions.Template:
    app = cdk.App()
    stack = PhotoAlbumStack(app, "TestPhotoAlbumStack")
    return assertions.Template.from_stack(stack)


def test_processing_queue_dead_letters_after_five_receives(template):
    template.has_resource_properties("AWS::SQS::Queue", {
        "QueueName": "image-processing-dlq",
        "MessageRetentionPeriod": 1209600,
    })
    template.has_resource_properties("AWS::SQS::Queue", {
        "ReceiveMessageWaitTimeSeconds": 10,
        "RedrivePolicy": {"deadLetterTargetArn": Match.any_value(), "maxReceiveCount": 5},
    })


def test_image_table_streams_new_images(template):
    template.has_resource_properties("AWS::DynamoDB::Table", {
        "KeySchema": [{"AttributeName": "fileName", "KeyType": "HASH"}],
        "StreamSpecification": {"StreamViewType": "NEW_IMAGE"},
    })


def test_queue_subscription_filters_on_message_body(template):
    template.has_resource_properties("AWS::SNS::Subscription", {
        "Protocol": "sqs",
        "FilterPolicyScope": "MessageBody",
        "FilterPolicy": INGESTION_POLICY.rules,
    })
    assert INGESTION_POLICY.rules == {"Records": {"eventName": ["ObjectCreated:Put", "ObjectRemoved:Delete"]}}


def test_update_function_subscription_filters_on_metadata_type(template):
    template.has_resource_properties("AWS::SNS::Subscription", {
        "Protocol": "lambda",
        "FilterPolicy": METADATA_UPDATE_POLICY.rules,
    })
    assert METADATA_UPDATE_POLICY.rules == {"metadata_type": ["Caption", "Date", "Photographer"]}


@pytest.mark.parametrize("handler, timeout", [
    ("lambdas.log_image.app.handler", 15),
    ("lambdas.update_table.app.handler", 15),
    ("lambdas.confirmation_mailer.app.handler", 3),
    ("lambdas.rejection_mailer.app.handler", 5),
])
def test_functions(template, handler, timeout):
    template.has_resource_properties("AWS::Lambda::Function", {
        "Handler": handler,
        "Runtime": "python3.12",
        "Timeout": timeout,
        "Layers": Match.any_value(),
    })


def test_mailers_get_ses_settings_from_parameters(template):
    template.has_parameter("VerifiedSenderEmail", {"Type": "String"})
    template.has_parameter("RecipientEmail", {"Type": "String"})
    template.has_resource_properties("AWS::Lambda::Function", {
        "Handler": "lambdas.confirmation_mailer.app.handler",
        "Environment": {"Variables": {
            "SES_EMAIL_FROM": {"Ref": "VerifiedSenderEmail"},
            "SES_EMAIL_TO": {"Ref": "RecipientEmail"},
            "SES_REGION": {"Ref": "AWS::Region"},
        }},
    })
    template.has_resource_properties("AWS::IAM::Policy", {
        "PolicyDocument": {"Statement": Match.array_with([Match.object_like({
            "Action": ["ses:SendEmail", "ses:SendRawEmail"],
            "Effect": "Allow",
            "Resource": "*",
        })])},
    })


def test_event_source_mappings(template):
    template.has_resource_properties("AWS::Lambda::EventSourceMapping", {
        "BatchSize": 5,
        "StartingPosition": "LATEST",
    })
    template.has_resource_properties("AWS::Lambda::EventSourceMapping", {
        "BatchSize": 10,
        "MaximumBatchingWindowInSeconds": 5,
    })


def test_bucket_publishes_create_and_delete_events_to_topic(template):
    template.has_resource_properties("Custom::S3BucketNotifications", {
        "NotificationConfiguration": {"TopicConfigurations": [
            Match.object_like({"Events": ["s3:ObjectCreated:*"]}),
            Match.object_like({"Events": ["s3:ObjectRemoved:Delete"]}),
        ]},
    })


def test_outputs(template):
    for name in ("BucketName", "TopicArn", "TableName"):
        template.has_output(name, {})


def test_ses_region_can_be_overridden_by_context():
    app = cdk.App(context={"ses_region": "us-east-1"})
    template = assertions.Template.from_stack(PhotoAlbumStack(app, "OtherRegionStack"))

    template.has_resource_properties("AWS::Lambda::Function", {
        "Handler": "lambdas.rejection_mailer.app.handler",
        "Environment": {"Variables": Match.object_like({"SES_REGION": "us-east-1"})},
    })
