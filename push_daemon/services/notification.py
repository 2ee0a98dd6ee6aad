import logging
import uuid

import firebase_admin
from fastapi import HTTPException, status
from firebase_admin import credentials, messaging
from firebase_admin.exceptions import FirebaseError
from google.auth.exceptions import GoogleAuthError
from starlette.concurrency import run_in_threadpool

from push_daemon.schemas.notification import NotificationRequest

logger = logging.getLogger(__name__)


class MessagingClient:
    """
    FCM send handle bound to a single Firebase app.
    Requiring a project id mirrors the precondition firebase_admin.messaging
    enforces before it builds its own messaging service.
    """

    def __init__(self, app: firebase_admin.App):
        if not app.project_id:
            raise ValueError("Project ID is required to access Cloud Messaging service")
        self.app = app

    def send(self, message: messaging.Message) -> str:
        return messaging.send(message, app=self.app)


class NotificationService:
    def __init__(self, credentials_path: str):
        self.credentials_path = credentials_path

    # Each call gets its own named app so concurrent requests never share one
    def _initialize_app(self) -> firebase_admin.App:
        cred = credentials.Certificate(self.credentials_path)
        return firebase_admin.initialize_app(cred, name=f"push-{uuid.uuid4()}")

    def _send(self, notification_request: NotificationRequest) -> str:
        try:
            app = self._initialize_app()
        except (ValueError, OSError, FirebaseError) as e:
            logger.error(f"Error initializing Firebase app: {e}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Firebase initialization failed",
            ) from e

        try:
            try:
                client = MessagingClient(app)
            except ValueError as e:
                logger.error(f"Error creating FCM client: {e}")
                raise HTTPException(
                    status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                    detail="FCM Client init failed",
                ) from e

            if len(notification_request.device_tokens) > 1:
                logger.warning(
                    f"Ignoring {len(notification_request.device_tokens) - 1} extra device tokens"
                )

            message = messaging.Message(
                notification=messaging.Notification(
                    title=notification_request.title,
                    body=notification_request.body,
                ),
                token=notification_request.device_tokens[0],
            )

            # Token refresh failures surface as google-auth errors
            try:
                return client.send(message)
            except (ValueError, FirebaseError, GoogleAuthError) as e:
                logger.error(f"Error sending FCM message: {e}")
                raise HTTPException(
                    status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                    detail="Failed to send FCM message",
                ) from e
        finally:
            firebase_admin.delete_app(app)

    async def send_notification(self, notification_request: NotificationRequest) -> str:
        """
        Send one notification to the first device token.
        Returns the FCM message id.
        """
        return await run_in_threadpool(self._send, notification_request)
