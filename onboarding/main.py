import logging
from concurrent.futures import ThreadPoolExecutor
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from onboarding.api.routes import add_user, find_user, health, verify_user
from onboarding.core.config import get_settings
from onboarding.core.exceptions import MethodNotAllowedError, UpstreamError, ValidationError
from onboarding.core.logging import setup_logging
from onboarding.db.base import Base
from onboarding.db.session import SessionLocal, engine
from onboarding.db.triggers import MemberCreatedTrigger
from onboarding.services.notifications import NotificationDispatcher
from onboarding.services.registration import make_new_member_handler

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan events for startup and shutdown"""
    settings = get_settings()
    setup_logging(settings.LOG_LEVEL, settings.LOG_FILE)
    logger.info("🚀 Starting member onboarding service...")

    logger.info("📦 Creating database tables...")
    Base.metadata.create_all(bind=engine)

    executor = ThreadPoolExecutor(
        max_workers=settings.BACKGROUND_WORKERS,
        thread_name_prefix="onboarding",
    )
    dispatcher = NotificationDispatcher(settings, executor=executor)
    trigger = MemberCreatedTrigger(
        SessionLocal,
        make_new_member_handler(SessionLocal, dispatcher),
        executor=executor,
    )
    trigger.install()

    yield

    logger.info("👋 Shutting down...")
    trigger.remove()
    executor.shutdown(wait=True)


app = FastAPI(
    title="Member Onboarding",
    description="Registers club members, emails verification codes and verifies them from Discord",
    version="1.0.0",
    lifespan=lifespan
)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Every error response is plain text"""
    detail = exc.detail
    if exc.status_code == 405:
        detail = MethodNotAllowedError().detail
    elif exc.status_code >= 500:
        detail = UpstreamError().detail
    return PlainTextResponse(str(detail), status_code=exc.status_code, headers=exc.headers)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    logger.info(f"Invalid request to {request.url.path}: {exc.errors()}")
    error = ValidationError()
    return PlainTextResponse(error.detail, status_code=error.status_code)


app.include_router(health.router, tags=["Health"])
app.include_router(add_user.router, tags=["Registration"])
app.include_router(verify_user.router, tags=["Verification"])
app.include_router(find_user.router, tags=["Query"])


@app.get("/")
def root():
    """Root endpoint with API information"""
    return {
        "service": "Member Onboarding",
        "version": "1.0.0",
        "status": "operational",
        "endpoints": {
            "health": "/health",
            "add_user": "/addUser",
            "verify_user": "/verifyUser",
            "find_user": "/findUser"
        }
    }


def run():
    uvicorn.run(app, host="0.0.0.0", port=8000, reload=False)


if __name__ == "__main__":
    run()
