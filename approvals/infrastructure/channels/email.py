"""Send project notification emails through SendGrid."""

from __future__ import annotations

import json
import logging
from datetime import date
from html import escape
from typing import Any

from sendgrid import SendGridAPIClient
from sendgrid.helpers.mail import Mail

logger = logging.getLogger(__name__)

PRODUCT_NAME = "CetaProjectsManager"


def _extract_sendgrid_error_details(body: Any) -> str | None:
    """Return a human readable description for a SendGrid error payload."""

    if body in (None, ""):
        return None

    if isinstance(body, bytes):
        try:
            body = body.decode("utf-8")
        except UnicodeDecodeError:
            return None

    if isinstance(body, str):
        body = body.strip()
        if not body:
            return None
        try:
            parsed = json.loads(body)
        except json.JSONDecodeError:
            return body
    else:
        parsed = body

    if isinstance(parsed, dict):
        errors = parsed.get("errors")
        if isinstance(errors, list):
            messages = [
                str(item["message"])
                for item in errors
                if isinstance(item, dict) and item.get("message")
            ]
            if messages:
                return "; ".join(messages)
        try:
            return json.dumps(parsed)
        except (TypeError, ValueError):
            return None

    if isinstance(parsed, list):
        return "; ".join(str(item) for item in parsed)

    return None


def _log_sendgrid_exception(exc: Exception) -> None:
    status_code = getattr(exc, "status_code", None)
    details = _extract_sendgrid_error_details(getattr(exc, "body", None))

    if status_code and details:
        logger.error("SendGrid API request failed with status %s: %s", status_code, details)
    elif status_code:
        logger.error("SendGrid API request failed with status %s", status_code)
    elif details:
        logger.error("SendGrid API request failed: %s", details)
    else:
        logger.exception("Error sending email via SendGrid: %s", exc)


class SendGridEmailSender:
    """Email channel backed by the SendGrid REST API.

    Without an API key and sender address the adapter stays disabled and every
    send returns ``False``.
    """

    def __init__(
        self,
        api_key: str | None,
        sender: str | None,
        *,
        sender_name: str = PRODUCT_NAME,
    ) -> None:
        self.api_key = api_key
        self.sender = sender
        self.sender_name = sender_name
        if not self.is_configured:
            logger.warning("SendGrid configuration incomplete; email delivery disabled")

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key and self.sender)

    def send_email(
        self,
        address: str,
        subject: str,
        html: str,
        text: str | None = None,
    ) -> bool:
        if not self.is_configured:
            logger.warning("Email service not configured, skipping email to %s", address)
            return False

        message = Mail(
            from_email=(self.sender, self.sender_name),
            to_emails=address,
            subject=subject,
            html_content=html,
            plain_text_content=text or subject,
        )

        try:
            client = SendGridAPIClient(self.api_key)
            response = client.send(message)
        except Exception as exc:  # pragma: no cover - network failures depend on environment
            _log_sendgrid_exception(exc)
            return False

        status_code = getattr(response, "status_code", None)
        if not isinstance(status_code, int) or not 200 <= status_code < 300:
            details = _extract_sendgrid_error_details(getattr(response, "body", None))
            if details:
                logger.error("SendGrid API responded with status %s: %s", status_code, details)
            else:
                logger.error("SendGrid API responded with status %s", status_code)
            return False

        logger.info("Email sent to %s", address)
        return True


def render_project_email(title: str, message: str, project_link: str | None) -> str:
    """Return the HTML body used for project notifications."""

    button = ""
    if project_link:
        button = (
            '<p style="text-align: center;">'
            f'<a href="{escape(project_link, quote=True)}" '
            'style="display: inline-block; background-color: #10B981; color: white; '
            'padding: 12px 30px; text-decoration: none; border-radius: 5px;">'
            "View Project</a></p>"
        )
    return "".join(
        (
            "<!DOCTYPE html><html><body "
            'style="font-family: Arial, sans-serif; line-height: 1.6; color: #333;">',
            '<div style="max-width: 600px; margin: 0 auto; padding: 20px;">',
            '<div style="background-color: #4F46E5; color: white; padding: 30px; '
            f'text-align: center;"><h1>{PRODUCT_NAME}</h1></div>',
            '<div style="background-color: #f9fafb; padding: 30px;">',
            f'<h2 style="color: #4F46E5;">{escape(title)}</h2>',
            f"<p>{escape(message)}</p>",
            button,
            "</div>",
            '<div style="text-align: center; color: #6b7280; font-size: 12px;">',
            f"<p>{PRODUCT_NAME} &copy; {date.today().year}</p>",
            "</div></div></body></html>",
        )
    )


__all__ = ["PRODUCT_NAME", "SendGridEmailSender", "render_project_email"]
