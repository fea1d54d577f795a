# photo_album/mailer.py
import logging
from dataclasses import dataclass
from html import escape

import boto3

from photo_album.config import MailSettings

logger = logging.getLogger(__name__)

CONFIRMATION_SUBJECT = "Image Upload Confirmation"
REJECTION_SUBJECT = "New image Upload"
SENDER_NAME = "The Photo Album"


@dataclass
class ContactDetails:
    name: str
    email: str
    message: str


def format_html_body(details: ContactDetails) -> str:
    """Builds the HTML mail body. All user-controlled content is escaped."""
    return f"""
    <html>
      <body>
        <h2>Sent from: </h2>
        <ul>
          <li style="font-size:18px">👤 <b>{escape(details.name)}</b></li>
          <li style="font-size:18px">✉️ <b>{escape(details.email)}</b></li>
        </ul>
        <p style="font-size:18px">{escape(details.message)}</p>
      </body>
    </html>
    """


def format_text_body(details: ContactDetails) -> str:
    return f"Sent from: {details.name} <{details.email}>\n\n{details.message}"


class SesMailer:
    """Sends the album's notification emails through Amazon SES."""

    def __init__(self, settings: MailSettings, ses_client=None):
        self.settings = settings
        self.ses = ses_client or boto3.client('ses', region_name=settings.ses_region)

    def build_email(self, subject: str, message: str) -> dict:
        details = ContactDetails(name=SENDER_NAME, email=self.settings.ses_email_from, message=message)
        return {
            'Destination': {'ToAddresses': self.settings.recipients},
            'Message': {
                'Body': {
                    'Html': {'Charset': "UTF-8", 'Data': format_html_body(details)},
                    'Text': {'Charset': "UTF-8", 'Data': format_text_body(details)},
                },
                'Subject': {'Charset': "UTF-8", 'Data': subject},
            },
            'Source': self.settings.ses_email_from,
        }

    def send(self, subject: str, message: str) -> str:
        """Sends one email and returns the SES MessageId. ClientError propagates to the caller."""
        response = self.ses.send_email(**self.build_email(subject, message))
        message_id = response.get('MessageId')
        logger.info("Email '%s' sent to %s. MessageId: %s", subject, ", ".join(self.settings.recipients), message_id)
        return message_id
