"""Tests for the Brevo notification email sender."""

import json

import httpx
import pytest

from nuan_site.core.brevo import BREVO_SEND_URL, BrevoMailer, build_notification_email
from nuan_site.core.validation import validate_submission
from nuan_site.models.contact import EmailContact, SubmissionInput


@pytest.fixture
def operator():
    return EmailContact(email="hello@nuancolour.ca", name="Nu'an Colour")


class TestBuildNotificationEmail:
    def test_sender_and_recipient_are_the_operator(self, operator, valid_submission):
        sanitized, _ = validate_submission(valid_submission)
        message = build_notification_email(sanitized, operator)

        assert message.sender == operator
        assert message.recipient == operator
        assert message.subject == "You have a new message from Jane Doe"

    def test_body_lists_every_field(self, operator, valid_submission):
        sanitized, _ = validate_submission(valid_submission)
        html = build_notification_email(sanitized, operator).html_content

        assert "<h2>New Contact Form Submission</h2>" in html
        assert "<strong>Email:</strong> jane.doe@nuancolour.ca" in html
        assert "<strong>Newsletter Subscription:</strong> No" in html
        assert "<strong>Phone:</strong> (555) 123-4567" in html
        assert "<strong>Services Interested In:</strong> Colour, Treatments" in html
        assert "<strong>How They Found Us:</strong> Instagram" in html

    def test_defaults_for_missing_optional_fields(self, operator):
        submission = SubmissionInput(
            first_name="Jane", last_name="Doe", email="jane@nuancolour.ca", message="Hi", newsletter=True
        )
        html = build_notification_email(submission, operator).html_content

        assert "<strong>Phone:</strong> Not provided" in html
        assert "<strong>Services Interested In:</strong> None" in html
        assert "<strong>How They Found Us:</strong> Not specified" in html
        assert "<strong>Newsletter Subscription:</strong> Yes" in html

    def test_single_service_value(self, operator):
        submission = SubmissionInput(
            first_name="Jane", last_name="Doe", email="jane@nuancolour.ca", message="Hi", service="Bridal"
        )
        html = build_notification_email(submission, operator).html_content
        assert "<strong>Services Interested In:</strong> Bridal" in html

    def test_escaped_fields_are_not_escaped_twice(self, operator):
        submission = SubmissionInput(
            first_name="Jane", last_name="Doe", email="jane@nuancolour.ca", message="<b>hi</b>"
        )
        sanitized, _ = validate_submission(submission)
        html = build_notification_email(sanitized, operator).html_content

        assert "&lt;b&gt;hi&lt;&#x2F;b&gt;" in html
        assert "&amp;lt;" not in html

    def test_unvalidated_fields_are_escaped(self, operator):
        submission = SubmissionInput(
            first_name="Jane", last_name="Doe", email="jane@nuancolour.ca", message="Hi", referral="<i>ad</i>"
        )
        html = build_notification_email(submission, operator).html_content
        assert "<i>ad</i>" not in html


class TestBrevoMailer:
    @pytest.mark.asyncio
    async def test_posts_single_request_with_api_key(self, operator, valid_submission):
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(201, json={"messageId": "<abc@smtp-relay.brevo.com>"})

        client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        mailer = BrevoMailer(client, api_key="brevo-key")
        message = build_notification_email(valid_submission, operator)

        result = await mailer.send(message)
        await client.aclose()

        assert result.ok is True
        assert len(calls) == 1
        request = calls[0]
        assert str(request.url) == BREVO_SEND_URL
        assert request.headers["api-key"] == "brevo-key"
        body = json.loads(request.content)
        assert body["sender"] == {"email": "hello@nuancolour.ca", "name": "Nu'an Colour"}
        assert body["to"] == [{"email": "hello@nuancolour.ca", "name": "Nu'an Colour"}]
        assert body["subject"] == message.subject
        assert body["htmlContent"] == message.html_content

    @pytest.mark.asyncio
    async def test_provider_rejection_is_a_failed_send(self, operator, valid_submission):
        client = httpx.AsyncClient(
            transport=httpx.MockTransport(lambda request: httpx.Response(401, json={"code": "unauthorized"}))
        )
        mailer = BrevoMailer(client, api_key="wrong")

        result = await mailer.send(build_notification_email(valid_submission, operator))
        await client.aclose()

        assert result.ok is False
        assert result.error == "HTTP 401"

    @pytest.mark.asyncio
    async def test_timeout_is_a_failed_send(self, operator, valid_submission):
        def handler(request):
            raise httpx.ReadTimeout("timed out", request=request)

        client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        mailer = BrevoMailer(client, api_key="brevo-key")

        result = await mailer.send(build_notification_email(valid_submission, operator))
        await client.aclose()

        assert result.ok is False
        assert result.error
