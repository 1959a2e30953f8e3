"""
Dependency wiring for the FastAPI app.
"""

from __future__ import annotations

import logging

from prelaunch.config import get_settings
from prelaunch.store import (
    InMemorySubscriptionStore,
    SqlSubscriptionStore,
    SubscriptionStore,
)

logger = logging.getLogger(__name__)

_subscription_store: SubscriptionStore | None = None


def build_subscription_store() -> SubscriptionStore:
    """Construct a new store according to the current settings."""
    settings = get_settings()
    if settings.use_in_memory_backends or not settings.database_url:
        return InMemorySubscriptionStore()
    logger.info("Using SQL subscription store")
    return SqlSubscriptionStore(settings.database_url)


def get_subscription_store() -> SubscriptionStore:
    """
    Return a process-wide store so subscriptions persist across requests.

    Apps built with an explicit store override this dependency instead.
    """
    global _subscription_store
    if _subscription_store:
        return _subscription_store
    _subscription_store = build_subscription_store()
    return _subscription_store
