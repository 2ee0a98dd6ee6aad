import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from push_daemon.api.endpoints import health, notification
from push_daemon.core.config import Settings, settings
from push_daemon.services.notification import NotificationService

logger = logging.getLogger(__name__)


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return PlainTextResponse(str(exc.detail), status_code=exc.status_code)


def create_app(app_settings: Settings = settings) -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(
            f"Serving push notifications with credentials from "
            f"{app_settings.FIREBASE_CREDENTIALS_PATH}"
        )
        yield
        logger.info("HTTP listener stopped")

    app = FastAPI(title=app_settings.PROJECT_NAME, lifespan=lifespan)
    app.state.notification_service = NotificationService(app_settings.FIREBASE_CREDENTIALS_PATH)

    app.add_exception_handler(StarletteHTTPException, http_exception_handler)

    app.include_router(health.router, prefix="", tags=["health"])

    app.include_router(notification.router, prefix="", tags=["notification"])

    return app


app = create_app()
