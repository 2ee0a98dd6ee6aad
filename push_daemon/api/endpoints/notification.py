import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.responses import PlainTextResponse
from pydantic import ValidationError

from push_daemon.schemas.notification import NotificationRequest
from push_daemon.services.notification import NotificationService

logger = logging.getLogger(__name__)

router = APIRouter()


def get_notification_service(request: Request) -> NotificationService:
    return request.app.state.notification_service


# Decoded from the raw body so the Content-Type header is not consulted
async def parse_notification_request(request: Request) -> NotificationRequest:
    try:
        return NotificationRequest.model_validate_json(await request.body())
    except ValidationError as err:
        logger.debug(f"Rejected notification request: {err.errors()}")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid request",
        ) from err


@router.post("/send_notifications", response_class=PlainTextResponse)
async def send_notifications(
    notification_request: Annotated[NotificationRequest, Depends(parse_notification_request)],
    notification_service: Annotated[NotificationService, Depends(get_notification_service)],
):
    message_id = await notification_service.send_notification(notification_request)
    return f"Successfully sent message to device: {message_id}"
