"""Interfaces implemented by outbound delivery channels."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Protocol


class PushSender(Protocol):
    def send_push(
        self,
        token: str,
        title: str,
        body: str,
        data: Mapping[str, str] | None = None,
    ) -> bool: ...


class SmsSender(Protocol):
    def send_sms(self, phone: str, text: str) -> bool: ...


class EmailSender(Protocol):
    def send_email(
        self,
        address: str,
        subject: str,
        html: str,
        text: str | None = None,
    ) -> bool: ...


__all__ = ["EmailSender", "PushSender", "SmsSender"]
