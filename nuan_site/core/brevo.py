"""
Brevo transactional email.

The contact form only ever notifies the site operator: sender and recipient
are the same mailbox, and the visitor's address appears in the body.
"""

import httpx
import logging
from typing import Optional
from markupsafe import Markup
from nuan_site.core.templating import render_email
from nuan_site.models.contact import EmailContact, EmailMessage, SendResult, SubmissionInput

logger = logging.getLogger(__name__)

BREVO_SEND_URL = "https://api.brevo.com/v3/smtp/email"


def build_notification_email(submission: SubmissionInput, operator: EmailContact) -> EmailMessage:
    """
    Compose the operator notification for a validated submission.

    Name and message fields arrive HTML-escaped from the validator, so they
    are passed to the template as markup to avoid escaping them twice.
    """
    html = render_email(
        "contact_notification.html",
        first_name=Markup(submission.first_name),
        last_name=Markup(submission.last_name),
        email=submission.email,
        newsletter="Yes" if submission.newsletter else "No",
        phone=submission.phone or "Not provided",
        services=submission.services_display,
        referral=submission.referral or "Not specified",
        message=Markup(submission.message),
    )
    return EmailMessage(
        sender=operator,
        recipient=operator,
        subject=f"You have a new message from {submission.first_name} {submission.last_name}",
        html_content=html,
    )


class BrevoMailer:
    def __init__(self, http_client: httpx.AsyncClient, api_key: Optional[str]):
        self.http_client = http_client
        self.api_key = api_key

    async def send(self, message: EmailMessage) -> SendResult:
        """Make exactly one send attempt. No retry on failure."""
        payload = {
            "sender": message.sender.model_dump(exclude_none=True),
            "to": [message.recipient.model_dump(exclude_none=True)],
            "subject": message.subject,
            "htmlContent": message.html_content,
        }

        try:
            response = await self.http_client.post(
                BREVO_SEND_URL,
                json=payload,
                headers={
                    "api-key": self.api_key or "",
                    "Accept": "application/json",
                },
            )
        except httpx.HTTPError as e:
            logger.error(f"Brevo email error: {str(e)}")
            return SendResult(ok=False, error=str(e) or e.__class__.__name__)

        if not response.is_success:
            logger.error(f"Brevo email error ({response.status_code}): {response.text}")
            return SendResult(ok=False, error=f"HTTP {response.status_code}")

        logger.info(f"Notification email sent to {message.recipient.email}")
        return SendResult(ok=True)
