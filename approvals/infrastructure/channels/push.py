"""Send push notifications through Firebase Cloud Messaging."""

from __future__ import annotations

import logging
from collections.abc import Mapping

import firebase_admin
from firebase_admin import credentials, exceptions, messaging

logger = logging.getLogger(__name__)

_APP_NAME = "approvals-push"
_INVALID_TOKEN_CODES = {"NOT_FOUND", "INVALID_ARGUMENT"}


class FirebasePushSender:
    """Push channel backed by the Firebase Admin SDK."""

    def __init__(self, credentials_file: str | None) -> None:
        self._app: firebase_admin.App | None = None
        if not credentials_file:
            logger.warning("Firebase credentials not configured; push delivery disabled")
            return
        try:
            self._app = firebase_admin.get_app(_APP_NAME)
        except ValueError:
            try:
                certificate = credentials.Certificate(credentials_file)
                self._app = firebase_admin.initialize_app(certificate, name=_APP_NAME)
            except (OSError, ValueError):
                logger.exception("Failed to initialise Firebase Admin SDK")
                return
        logger.info("Firebase Admin SDK initialised")

    @property
    def is_configured(self) -> bool:
        return self._app is not None

    def send_push(
        self,
        token: str,
        title: str,
        body: str,
        data: Mapping[str, str] | None = None,
    ) -> bool:
        if self._app is None:
            logger.warning("Push service not configured, skipping push notification")
            return False

        message = messaging.Message(
            notification=messaging.Notification(title=title, body=body),
            data={key: str(value) for key, value in (data or {}).items()},
            token=token,
            android=messaging.AndroidConfig(
                priority="high",
                notification=messaging.AndroidNotification(sound="default"),
            ),
            apns=messaging.APNSConfig(
                payload=messaging.APNSPayload(aps=messaging.Aps(sound="default", badge=1)),
            ),
        )

        try:
            response = messaging.send(message, app=self._app)
        except exceptions.FirebaseError as exc:
            logger.error("Failed to send push notification: %s", exc)
            if exc.code in _INVALID_TOKEN_CODES:
                logger.warning("Invalid FCM token: %s", token)
            return False

        logger.info("Push notification sent: %s", response)
        return True


__all__ = ["FirebasePushSender"]
