"""
AboApp Backend — Transactional Email Service
==============================================

What:  Sends one HTML email through the Resend HTTP API.
Who:   Called by ReminderService, once per due subscription.

A response from Resend, success or not, is returned as its HTTP status
code; the caller records it. Only transport failures (DNS, connection
refused, timeouts) raise EmailDeliveryError.
"""

import logging
from abc import ABC, abstractmethod
from typing import Optional

import httpx

from aboapp.config import settings
from aboapp.exceptions import EmailDeliveryError

logger = logging.getLogger(__name__)


class EmailProvider(ABC):
    """Single-call transactional email interface."""

    @abstractmethod
    async def send(self, sender: str, recipient: str, subject: str, html: str) -> int:
        """Send one email and return the provider's HTTP status code."""
        ...


class ResendEmailService(EmailProvider):

    def __init__(
        self,
        api_key: Optional[str] = None,
        api_url: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key if api_key is not None else settings.resend_api_key
        self.api_url = api_url or settings.resend_api_url
        self._transport = transport

    async def send(self, sender: str, recipient: str, subject: str, html: str) -> int:
        payload = {"from": sender, "to": recipient, "subject": subject, "html": html}
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }
        try:
            async with httpx.AsyncClient(transport=self._transport) as client:
                response = await client.post(self.api_url, json=payload, headers=headers)
        except httpx.HTTPError as e:
            logger.error("Email provider unreachable: %s", str(e))
            raise EmailDeliveryError(
                message=f"Email provider unreachable: {type(e).__name__}",
                context={"error": str(e)},
            )

        if response.is_success:
            logger.info("Email accepted by provider (HTTP %d)", response.status_code)
        else:
            logger.warning(
                "Email rejected by provider (HTTP %d): %s",
                response.status_code,
                response.text[:200],
            )
        return response.status_code


email_service = ResendEmailService()
