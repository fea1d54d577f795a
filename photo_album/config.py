# photo_album/config.py
"""
Settings for the photo album Lambdas.

Values are read from environment variables via Pydantic BaseSettings. Each
Lambda entrypoint loads the settings it needs once at cold start and hands
them to its handler object, so a missing variable fails the container
initialisation instead of the first event.
"""
from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict


class ConfigurationError(RuntimeError):
    """Raised when a required environment variable is missing or empty."""
    pass


class TableSettings(BaseSettings):
    model_config = SettingsConfigDict(extra='ignore', populate_by_name=True)

    image_table_name: str = Field(..., alias='IMAGE_TABLE_NAME', min_length=1)


class MailSettings(BaseSettings):
    """
    SES configuration shared by the confirmation and rejection mailers.
    SES_EMAIL_TO may hold a comma-separated list of recipients.
    """
    model_config = SettingsConfigDict(extra='ignore', populate_by_name=True)

    ses_email_from: str = Field(..., alias='SES_EMAIL_FROM', min_length=1)
    ses_email_to: str = Field(..., alias='SES_EMAIL_TO', min_length=1)
    ses_region: str = Field(..., alias='SES_REGION', min_length=1)

    @property
    def recipients(self) -> list[str]:
        return [email.strip() for email in self.ses_email_to.split(",") if email.strip()]


def load_table_settings() -> TableSettings:
    try:
        return TableSettings()
    except ValidationError as e:
        raise ConfigurationError("Please add the IMAGE_TABLE_NAME environment variable.") from e


def load_mail_settings() -> MailSettings:
    try:
        return MailSettings()
    except ValidationError as e:
        raise ConfigurationError(
            "Please add the SES_EMAIL_TO, SES_EMAIL_FROM, and SES_REGION environment variables."
        ) from e
