from unittest.mock import AsyncMock

import pytest

from nuan_site.core.config import Settings
from nuan_site.core.contact_flow import ContactFlow
from nuan_site.models.contact import (
    EmailContact,
    SendResult,
    SubmissionInput,
    SubscriptionResult,
    VerificationOutcome,
)


@pytest.fixture
def settings():
    return Settings(
        _env_file=None,
        mail_username="hello@nuancolour.ca",
        brevo_api_key="brevo-key",
        recaptcha_secret_key="recaptcha-secret",
        recaptcha_site_key="recaptcha-site-key",
        mailchimp_api_key="abc123-us6",
        mailchimp_list_id="list42",
    )


@pytest.fixture
def valid_submission():
    return SubmissionInput(
        first_name="Jane",
        last_name="Doe",
        email="Jane.Doe@Nuancolour.ca",
        phone="(555) 123-4567",
        newsletter=False,
        service=["Colour", "Treatments"],
        referral="Instagram",
        message="I'd like to book a colour consultation.",
        recaptcha_token="token-123",
    )


@pytest.fixture
def verifier():
    mock = AsyncMock()
    mock.verify.return_value = VerificationOutcome(passed=True, score=0.9)
    return mock


@pytest.fixture
def mailer():
    mock = AsyncMock()
    mock.send.return_value = SendResult(ok=True)
    return mock


@pytest.fixture
def subscriber():
    mock = AsyncMock()
    mock.subscribe.return_value = SubscriptionResult(ok=True)
    return mock


@pytest.fixture
def operator():
    return EmailContact(email="hello@nuancolour.ca", name="Nu'an Colour")


@pytest.fixture
def flow(verifier, mailer, subscriber, operator):
    return ContactFlow(
        verifier=verifier,
        mailer=mailer,
        subscriber=subscriber,
        operator=operator,
    )
