"""
Google reCAPTCHA v3 verification.

One siteverify call per submission. Any problem reaching Google, or any
answer we cannot read, counts as a failed check: the form is never sent on
the strength of a verification that did not happen.
"""

import httpx
import logging
from typing import Optional
from nuan_site.models.contact import VerificationOutcome

logger = logging.getLogger(__name__)

SITEVERIFY_URL = "https://www.google.com/recaptcha/api/siteverify"


class RecaptchaVerifier:
    def __init__(self, http_client: httpx.AsyncClient, secret_key: Optional[str], min_score: float = 0.5):
        self.http_client = http_client
        self.secret_key = secret_key
        self.min_score = min_score

    async def verify(self, token: Optional[str]) -> VerificationOutcome:
        """
        Check a client-side token against Google.

        Args:
            token: value of the ``recaptcha_token`` form field

        Returns:
            VerificationOutcome: passed only when Google reports success and
            the score is at least ``min_score``
        """
        if not token:
            logger.warning("reCAPTCHA token missing from submission")
            return VerificationOutcome(passed=False, reason="missing-token")

        try:
            response = await self.http_client.post(
                SITEVERIFY_URL,
                params={
                    "secret": self.secret_key or "",
                    "response": token,
                },
            )
            if not response.is_success:
                logger.error(f"reCAPTCHA verification error: HTTP {response.status_code}")
                return VerificationOutcome(passed=False, reason="provider-error")
            data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"reCAPTCHA verification error: {str(e)}")
            return VerificationOutcome(passed=False, reason="provider-error")

        if not isinstance(data, dict):
            logger.error(f"reCAPTCHA verification error: unexpected response {data!r}")
            return VerificationOutcome(passed=False, reason="provider-error")

        success = bool(data.get("success"))
        score = data.get("score")
        if isinstance(score, bool) or not isinstance(score, (int, float)):
            score = None
        logger.info(f"reCAPTCHA score: {score}")

        if not success:
            logger.warning(f"reCAPTCHA rejected token: {data.get('error-codes', [])}")
            return VerificationOutcome(passed=False, score=score, reason="rejected")

        if score is None or score < self.min_score:
            return VerificationOutcome(passed=False, score=score, reason="low-score")

        return VerificationOutcome(passed=True, score=float(score))
