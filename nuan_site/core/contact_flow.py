"""
Contact form submission pipeline.

Validate -> verify -> notify -> subscribe (optional) -> success. Each step
runs to completion before the next one starts and the first failure ends the
request. The newsletter step is the exception: it is best-effort and its
result never changes the response.
"""

import logging
from typing import Optional
from nuan_site.core.brevo import BrevoMailer, build_notification_email
from nuan_site.core.mailchimp import MailchimpSubscriber
from nuan_site.core.recaptcha import RecaptchaVerifier
from nuan_site.core.validation import validate_submission
from nuan_site.models.contact import (
    EmailContact, SendResult, SubmissionInput, SubmissionResult,
    SubscriptionRequest, SubscriptionResult, VerificationOutcome
)

logger = logging.getLogger(__name__)

SUCCESS_MESSAGE = "Form submitted successfully!"
SEND_FAILED_MESSAGE = "Failed to send email. Try again later."
VERIFICATION_FAILED_MESSAGE = "reCAPTCHA verification failed"
SUSPICIOUS_MESSAGE = "Suspicious activity detected. Please try again."


def verification_error(outcome: VerificationOutcome) -> str:
    if outcome.reason in ("rejected", "low-score"):
        return SUSPICIOUS_MESSAGE
    return VERIFICATION_FAILED_MESSAGE


class ContactFlow:
    def __init__(
        self,
        verifier: RecaptchaVerifier,
        mailer: BrevoMailer,
        subscriber: MailchimpSubscriber,
        operator: Optional[EmailContact],
        verify_when_invalid: bool = True,
    ):
        self.verifier = verifier
        self.mailer = mailer
        self.subscriber = subscriber
        self.operator = operator
        self.verify_when_invalid = verify_when_invalid

    async def submit(self, submission: SubmissionInput) -> SubmissionResult:
        sanitized, errors = validate_submission(submission)
        # Echo what the visitor typed; only the email gets the escaped copy
        form_data = submission.form_data()

        if errors and not self.verify_when_invalid:
            logger.info(f"Contact form rejected before verification: {sorted(errors)}")
            return SubmissionResult(status_code=400, errors=errors, form_data=form_data)

        verification = await self.verifier.verify(submission.recaptcha_token)
        if not verification.passed:
            errors = {**errors, "recaptcha": verification_error(verification)}

        if errors:
            logger.info(f"Contact form rejected: {sorted(errors)}")
            return SubmissionResult(
                status_code=400,
                errors=errors,
                form_data=form_data,
                verification=verification,
            )

        sent = await self.notify(sanitized)
        if not sent.ok:
            return SubmissionResult(
                status_code=500,
                errors={"email": SEND_FAILED_MESSAGE},
                form_data=form_data,
                verification=verification,
                email=sent,
            )

        subscription = None
        if sanitized.newsletter:
            subscription = await self.subscribe(sanitized)
        else:
            logger.info("⏭️ Newsletter not requested - skipping Mailchimp")

        return SubmissionResult(
            status_code=200,
            errors={},
            form_data={},
            success_message=SUCCESS_MESSAGE,
            verification=verification,
            email=sent,
            subscription=subscription,
        )

    async def notify(self, submission: SubmissionInput) -> SendResult:
        if self.operator is None:
            logger.error("Cannot send notification: MAIL_USERNAME is not configured")
            return SendResult(ok=False, error="not-configured")
        message = build_notification_email(submission, self.operator)
        try:
            return await self.mailer.send(message)
        except Exception as e:
            logger.error(f"Brevo email error: {str(e)}")
            return SendResult(ok=False, error=str(e))

    async def subscribe(self, submission: SubmissionInput) -> SubscriptionResult:
        request = SubscriptionRequest(
            email=submission.email,
            first_name=submission.first_name,
            last_name=submission.last_name,
        )
        try:
            result = await self.subscriber.subscribe(request)
        except Exception as e:
            logger.error(f"Mailchimp subscription failed (non-critical): {str(e)}")
            return SubscriptionResult(ok=False, error=str(e))
        if not result.ok:
            logger.warning(f"⚠️ Newsletter subscription failed for {submission.email}: {result.error}")
        return result
