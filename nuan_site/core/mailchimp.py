"""
Mailchimp newsletter subscription.

Best-effort: every failure is logged and reported in the returned
SubscriptionResult, never raised.
"""

import httpx
import logging
from typing import Optional
from nuan_site.models.contact import SubscriptionRequest, SubscriptionResult

logger = logging.getLogger(__name__)


class MailchimpSubscriber:
    def __init__(self, http_client: httpx.AsyncClient, api_key: Optional[str], list_id: Optional[str], data_center: str = "us6"):
        self.http_client = http_client
        self.api_key = api_key
        self.list_id = list_id
        self.data_center = data_center

    @property
    def list_url(self) -> str:
        return f"https://{self.data_center}.api.mailchimp.com/3.0/lists/{self.list_id}"

    async def subscribe(self, request: SubscriptionRequest) -> SubscriptionResult:
        if not self.api_key or not self.list_id:
            logger.warning("⏭️ Mailchimp subscription skipped - API key or list ID not configured")
            return SubscriptionResult(ok=False, error="not-configured")

        payload = {
            "members": [
                {
                    "email_address": request.email,
                    "status": request.status,
                    "merge_fields": {
                        "FNAME": request.first_name,
                        "LNAME": request.last_name,
                    },
                }
            ],
            "update_existing": True,
        }

        try:
            response = await self.http_client.post(
                self.list_url,
                json=payload,
                headers={"Authorization": f"apikey {self.api_key}"},
            )
        except httpx.HTTPError as e:
            logger.error(f"Mailchimp Request Failed: {str(e)}")
            return SubscriptionResult(ok=False, error=str(e) or e.__class__.__name__)

        try:
            data = response.json()
        except ValueError:
            data = {}

        if not response.is_success:
            logger.error(f"Mailchimp Error ({response.status_code}): {data or response.text}")
            return SubscriptionResult(ok=False, error=f"HTTP {response.status_code}")

        # Batch endpoint answers 200 even when individual members are rejected
        member_errors = data.get("errors") if isinstance(data, dict) else None
        if member_errors:
            logger.error(f"Mailchimp Error: {member_errors}")
            first = member_errors[0]
            reason = first.get("error", "member rejected") if isinstance(first, dict) else first
            return SubscriptionResult(ok=False, error=str(reason))

        logger.info(f"✅ Subscribed {request.email} to Mailchimp list {self.list_id}")
        return SubscriptionResult(ok=True)
