"""Outbound delivery channel adapters."""

from .base import EmailSender, PushSender, SmsSender
from .email import PRODUCT_NAME, SendGridEmailSender, render_project_email
from .push import FirebasePushSender
from .sms import TwilioSmsSender, format_project_sms

__all__ = [
    "EmailSender",
    "FirebasePushSender",
    "PRODUCT_NAME",
    "PushSender",
    "SendGridEmailSender",
    "SmsSender",
    "TwilioSmsSender",
    "format_project_sms",
    "render_project_email",
]
