# lambdas/confirmation_mailer/app.py
import logging

from photo_album.config import load_mail_settings
from photo_album.confirmation import ConfirmationMailer
from photo_album.mailer import SesMailer

logging.getLogger().setLevel(logging.INFO)

# Fails the Lambda init when the SES settings are missing.
CONFIRMATION_MAILER = ConfirmationMailer(SesMailer(load_mail_settings()))


def handler(event, context):
    """Triggered by the image table's DynamoDB stream."""
    return CONFIRMATION_MAILER.process_batch(event).as_response()
