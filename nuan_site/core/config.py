from pydantic_settings import BaseSettings
from functools import lru_cache
from typing import Optional

class Settings(BaseSettings):
    # Operator mailbox, used as both sender and recipient of notifications
    mail_username: Optional[str] = None
    mail_sender_name: str = "Nu'an Colour"

    # Brevo transactional email
    brevo_api_key: Optional[str] = None

    # Google reCAPTCHA v3
    recaptcha_secret_key: Optional[str] = None
    recaptcha_site_key: Optional[str] = None
    recaptcha_min_score: float = 0.5

    # Mailchimp list
    mailchimp_api_key: Optional[str] = None
    mailchimp_list_id: Optional[str] = None
    mailchimp_server_prefix: str = "us6"

    # Shared timeout for every provider call, in seconds
    http_timeout_seconds: float = 10.0

    # Run the reCAPTCHA check even when field validation already failed,
    # so the visitor sees every problem in one round trip
    verify_when_invalid: bool = True

    # CORS settings
    allowed_origins: list[str] = ["*"]

    log_level: str = "INFO"

    class Config:
        env_file = ".env"

    @property
    def mailchimp_data_center(self) -> str:
        """Data centre from the API key suffix (``xxxx-us6``), else the configured prefix"""
        if self.mailchimp_api_key and "-" in self.mailchimp_api_key:
            return self.mailchimp_api_key.rsplit("-", 1)[-1]
        return self.mailchimp_server_prefix

@lru_cache
def get_settings():
    return Settings()
