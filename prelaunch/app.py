"""
FastAPI application entry point for the signup service.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from prelaunch import messages
from prelaunch.config import get_settings
from prelaunch.dependencies import get_subscription_store
from prelaunch.routes import router
from prelaunch.store import SubscriptionStore

logger = logging.getLogger(__name__)


async def _validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    fields = [".".join(str(part) for part in err["loc"]) for err in exc.errors()]
    logger.info("Rejected invalid request to %s: %s", request.url.path, fields)
    return JSONResponse(status_code=400, content={"message": messages.INVALID_EMAIL})


async def _unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s", request.url.path)
    return JSONResponse(status_code=500, content={"message": messages.INTERNAL_ERROR})


def create_app(store: SubscriptionStore | None = None) -> FastAPI:
    """
    Build the application. Passing a store pins every request to it instead
    of the process-wide instance from settings.
    """
    settings = get_settings()

    app = FastAPI(title="Sip & Bite Pre-launch API", version="0.1.0")
    app.include_router(router, prefix=settings.api_prefix)
    app.add_exception_handler(RequestValidationError, _validation_error_handler)
    app.add_exception_handler(Exception, _unhandled_error_handler)
    if store is not None:
        app.dependency_overrides[get_subscription_store] = lambda: store
    return app


logging.basicConfig(level=get_settings().log_level.upper())
app = create_app()
