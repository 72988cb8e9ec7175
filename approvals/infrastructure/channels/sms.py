"""Send SMS notifications through Twilio."""

from __future__ import annotations

import logging

from twilio.base.exceptions import TwilioException
from twilio.rest import Client

logger = logging.getLogger(__name__)


def format_project_sms(sender_name: str, title: str, message: str) -> str:
    return f"{sender_name}:\n\n{title}\n\n{message}"


def normalize_phone_number(phone: str) -> str:
    phone = phone.strip()
    return phone if phone.startswith("+") else f"+{phone}"


class TwilioSmsSender:
    """SMS channel backed by the Twilio messages API."""

    def __init__(
        self,
        account_sid: str | None,
        auth_token: str | None,
        from_number: str | None,
    ) -> None:
        self.from_number = from_number
        self._client: Client | None = None
        if account_sid and auth_token and from_number:
            self._client = Client(account_sid, auth_token)
        else:
            logger.warning("Twilio credentials not configured; SMS delivery disabled")

    @property
    def is_configured(self) -> bool:
        return self._client is not None

    def send_sms(self, phone: str, text: str) -> bool:
        if self._client is None:
            logger.warning("SMS service not configured, skipping SMS to %s", phone)
            return False

        try:
            result = self._client.messages.create(
                body=text,
                from_=self.from_number,
                to=normalize_phone_number(phone),
            )
        except TwilioException as exc:
            logger.error("Failed to send SMS to %s: %s", phone, exc)
            return False

        logger.info("SMS sent to %s: %s", phone, result.sid)
        return True


__all__ = ["TwilioSmsSender", "format_project_sms", "normalize_phone_number"]
