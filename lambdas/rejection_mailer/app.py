# lambdas/rejection_mailer/app.py
import logging

from photo_album.config import load_mail_settings
from photo_album.mailer import SesMailer
from photo_album.rejection import RejectionMailer

logging.getLogger().setLevel(logging.INFO)

# Fails the Lambda init when the SES settings are missing.
REJECTION_MAILER = RejectionMailer(SesMailer(load_mail_settings()))


def handler(event, context):
    """Triggered by the image processing dead-letter queue."""
    return REJECTION_MAILER.process_batch(event).as_response()
