"""
HTTP routes for the signup API.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from prelaunch import messages
from prelaunch.config import Settings, get_settings
from prelaunch.dependencies import get_subscription_store
from prelaunch.schemas import (
    MessageResponse,
    SubscribeRequest,
    SubscribeResponse,
    SubscriptionRecord,
    SubscriptionSummary,
)
from prelaunch.store import SubscriptionStore

logger = logging.getLogger(__name__)

router = APIRouter()

_ERROR_RESPONSES = {
    400: {"model": MessageResponse},
    500: {"model": MessageResponse},
}


def _message(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"message": message})


@router.post(
    "/subscribe", response_model=SubscribeResponse, responses=_ERROR_RESPONSES
)
def subscribe(
    payload: SubscribeRequest,
    store: SubscriptionStore = Depends(get_subscription_store),
    settings: Settings = Depends(get_settings),
):
    """
    Register an email for launch notifications.

    Body validation failures never reach this function; the app-level
    handler answers them with 400.
    """
    try:
        subscription, created = store.add_subscription(payload.email)
    except Exception:
        logger.exception("Failed to store subscription")
        return _message(500, messages.INTERNAL_ERROR)

    if not created:
        logger.info("Rejected duplicate subscription")
        return _message(400, messages.ALREADY_SUBSCRIBED)

    logger.info("New subscription %s", subscription.id)
    return SubscribeResponse(
        message=messages.subscribed(settings.launch_year),
        subscription=SubscriptionSummary(
            email=subscription.email, subscribed_at=subscription.subscribed_at
        ),
    )


@router.get(
    "/subscriptions",
    response_model=list[SubscriptionRecord],
    responses={500: {"model": MessageResponse}},
)
def list_subscriptions(store: SubscriptionStore = Depends(get_subscription_store)):
    try:
        subscriptions = store.list_subscriptions()
    except Exception:
        logger.exception("Failed to list subscriptions")
        return _message(500, messages.INTERNAL_ERROR)
    return [
        SubscriptionRecord(
            id=record.id, email=record.email, subscribed_at=record.subscribed_at
        )
        for record in subscriptions
    ]
