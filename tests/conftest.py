# tests/conftest.py
from unittest.mock import MagicMock

import pytest

from event_factories import InMemoryTable
from photo_album.config import MailSettings
from photo_album.mailer import SesMailer
from photo_album.metadata_table import ImageTable


@pytest.fixture
def mail_settings() -> MailSettings:
    return MailSettings(
        ses_email_from="album@example.com",
        ses_email_to="owner@example.com, editor@example.com",
        ses_region="eu-west-1",
    )


@pytest.fixture
def ses_client() -> MagicMock:
    client = MagicMock()
    client.send_email.return_value = {"MessageId": "0100018c-test"}
    return client


@pytest.fixture
def mailer(mail_settings, ses_client) -> SesMailer:
    return SesMailer(mail_settings, ses_client=ses_client)


@pytest.fixture
def dynamo_table() -> InMemoryTable:
    return InMemoryTable()


@pytest.fixture
def image_table(dynamo_table) -> ImageTable:
    return ImageTable(dynamo_table)
