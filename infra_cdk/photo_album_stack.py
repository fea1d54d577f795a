# infra_cdk/photo_album_stack.py
from pathlib import Path

from aws_cdk import (
    Stack,
    Duration,
    CfnParameter,
    IgnoreMode,
    RemovalPolicy,
    aws_dynamodb as dynamodb,
    aws_iam as iam,
    aws_lambda as _lambda,
    aws_lambda_event_sources as lambda_event_sources,
    aws_s3 as s3,
    aws_s3_notifications as s3_nots,
    aws_sns as sns,
    aws_sns_subscriptions as subs,
    aws_sqs as sqs,
    CfnOutput
)
from constructs import Construct

from photo_album.routing import (
    INGESTION_POLICY,
    METADATA_UPDATE_POLICY,
    PROCESSING_QUEUE,
    UPDATE_TABLE_FUNCTION,
)

PROJECT_ROOT = Path(__file__).resolve().parent.parent

# Function assets ship the project root minus everything that is not Lambda code.
# Gitignore semantics: a leading "/" anchors a pattern at the project root.
FUNCTION_ASSET_EXCLUDES = [
    "cdk.out", ".git", ".venv", "venv", "__pycache__", ".pytest_cache", "*.egg-info",
    "/tests", "/cli", "/infra_cdk", "/lambda_layer",
    "/app.py", "/cdk.json", "/*.md", "/*.toml", "/*.txt", "/.env*",
]


def subscription_filter(conditions: list) -> sns.SubscriptionFilter:
    return sns.SubscriptionFilter(conditions=list(conditions))


def message_body_filter(rules: dict) -> dict:
    """Renders nested body rules into FilterOrPolicy objects."""
    return {
        key: sns.FilterOrPolicy.policy(message_body_filter(rule)) if isinstance(rule, dict)
        else sns.FilterOrPolicy.filter(subscription_filter(rule))
        for key, rule in rules.items()
    }


def message_attribute_filter(rules: dict) -> dict:
    return {name: subscription_filter(conditions) for name, conditions in rules.items()}


class PhotoAlbumStack(Stack):

    def __init__(self, scope: Construct, construct_id: str, **kwargs) -> None:
        super().__init__(scope, construct_id, **kwargs)

        # === Parameters for Deployment ===
        sender_email_param = CfnParameter(self, "VerifiedSenderEmail", type="String",
            description="The email address verified with SES to send notifications from.")

        recipient_email_param = CfnParameter(self, "RecipientEmail", type="String",
            description="A comma-separated list of email addresses that will receive notifications.")

        # SES may live in another region than the stack.
        ses_region = self.node.try_get_context("ses_region") or self.region

        # === Shared Lambda code and dependencies ===
        function_code = _lambda.Code.from_asset(str(PROJECT_ROOT),
            exclude=FUNCTION_ASSET_EXCLUDES,
            ignore_mode=IgnoreMode.GIT,
        )

        # Build with: pip install -r lambda_layer/requirements.txt -t lambda_layer/python
        common_layer = _lambda.LayerVersion(self, "CommonLayer",
            code=_lambda.Code.from_asset(str(PROJECT_ROOT / "lambda_layer")),
            compatible_runtimes=[_lambda.Runtime.PYTHON_3_12],
            description="Third-party dependencies of the photo album lambdas"
        )

        # === Storage and messaging ===
        images_bucket = s3.Bucket(self, "images",
            block_public_access=s3.BlockPublicAccess.BLOCK_ALL,
            removal_policy=RemovalPolicy.DESTROY,
            auto_delete_objects=True,
        )

        new_image_topic = sns.Topic(self, "NewImageTopic", display_name="New Image topic")

        dlq = sqs.Queue(self, "DLQ",
            queue_name="image-processing-dlq",
            retention_period=Duration.days(14),
        )

        # Five failed receives move a message to the DLQ, where the rejection mailer handles it.
        image_process_queue = sqs.Queue(self, PROCESSING_QUEUE,
            receive_message_wait_time=Duration.seconds(10),
            dead_letter_queue=sqs.DeadLetterQueue(queue=dlq, max_receive_count=5),
        )

        image_table = dynamodb.Table(self, "ImageTable",
            partition_key=dynamodb.Attribute(name="fileName", type=dynamodb.AttributeType.STRING),
            billing_mode=dynamodb.BillingMode.PAY_PER_REQUEST,
            removal_policy=RemovalPolicy.DESTROY,
            stream=dynamodb.StreamViewType.NEW_IMAGE,
        )

        mail_environment = {
            "SES_EMAIL_FROM": sender_email_param.value_as_string,
            "SES_EMAIL_TO": recipient_email_param.value_as_string,
            "SES_REGION": ses_region,
        }
        ses_statement = iam.PolicyStatement(actions=["ses:SendEmail", "ses:SendRawEmail"], resources=["*"])

        # === Ingestion ===
        log_image_function = _lambda.Function(self, "LogImageFn",
            runtime=_lambda.Runtime.PYTHON_3_12,
            code=function_code,
            handler="lambdas.log_image.app.handler",
            timeout=Duration.seconds(15),
            memory_size=128,
            environment={"IMAGE_TABLE_NAME": image_table.table_name},
            layers=[common_layer]
        )
        image_table.grant_write_data(log_image_function)
        log_image_function.add_event_source(lambda_event_sources.SqsEventSource(image_process_queue))

        # === Confirmation ===
        confirmation_mailer_function = _lambda.Function(self, "ConfirmationMailerFn",
            runtime=_lambda.Runtime.PYTHON_3_12,
            code=function_code,
            handler="lambdas.confirmation_mailer.app.handler",
            timeout=Duration.seconds(3),
            memory_size=1024,
            environment=mail_environment,
            layers=[common_layer]
        )
        confirmation_mailer_function.add_to_role_policy(ses_statement)
        confirmation_mailer_function.add_event_source(lambda_event_sources.DynamoEventSource(
            image_table,
            starting_position=_lambda.StartingPosition.LATEST,
            batch_size=5,
        ))

        # === Rejection ===
        rejection_mailer_function = _lambda.Function(self, "RejectionMailerFn",
            runtime=_lambda.Runtime.PYTHON_3_12,
            code=function_code,
            handler="lambdas.rejection_mailer.app.handler",
            timeout=Duration.seconds(5),
            memory_size=1024,
            environment=mail_environment,
            layers=[common_layer]
        )
        rejection_mailer_function.add_to_role_policy(ses_statement)
        rejection_mailer_function.add_event_source(lambda_event_sources.SqsEventSource(
            dlq,
            batch_size=10,
            max_batching_window=Duration.seconds(5),
        ))

        # === Metadata updates ===
        update_table_function = _lambda.Function(self, UPDATE_TABLE_FUNCTION,
            runtime=_lambda.Runtime.PYTHON_3_12,
            code=function_code,
            handler="lambdas.update_table.app.handler",
            timeout=Duration.seconds(15),
            memory_size=128,
            environment={"IMAGE_TABLE_NAME": image_table.table_name},
            layers=[common_layer]
        )
        image_table.grant_write_data(update_table_function)

        # === Topic fan-out, filter policies come from photo_album.routing ===
        new_image_topic.add_subscription(subs.SqsSubscription(image_process_queue,
            filter_policy_with_message_body=message_body_filter(INGESTION_POLICY.rules),
        ))
        new_image_topic.add_subscription(subs.LambdaSubscription(update_table_function,
            filter_policy=message_attribute_filter(METADATA_UPDATE_POLICY.rules),
        ))

        images_bucket.add_event_notification(s3.EventType.OBJECT_CREATED, s3_nots.SnsDestination(new_image_topic))
        images_bucket.add_event_notification(s3.EventType.OBJECT_REMOVED_DELETE, s3_nots.SnsDestination(new_image_topic))

        self.images_bucket = images_bucket
        self.new_image_topic = new_image_topic
        self.image_table = image_table

        # === Outputs ===
        CfnOutput(self, "BucketName", value=images_bucket.bucket_name)
        CfnOutput(self, "TopicArn", value=new_image_topic.topic_arn)
        CfnOutput(self, "TableName", value=image_table.table_name)
