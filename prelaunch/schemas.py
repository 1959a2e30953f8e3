"""
Pydantic schemas for the signup API.
"""

from __future__ import annotations

from datetime import datetime

from email_validator import EmailNotValidError, validate_email
from pydantic import BaseModel, ConfigDict, Field, field_validator


class SubscribeRequest(BaseModel):
    email: str = Field(..., max_length=254)

    @field_validator("email")
    @classmethod
    def _check_email(cls, value: str) -> str:
        # Lookups are exact-string, so keep the address as submitted.
        try:
            parsed = validate_email(
                value, check_deliverability=False, globally_deliverable=False
            )
        except EmailNotValidError as exc:
            raise ValueError(str(exc)) from exc
        if "." not in parsed.ascii_domain.strip("."):
            raise ValueError("The part after the @-sign must contain a period.")
        return value


class SubscriptionSummary(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    email: str
    subscribed_at: datetime = Field(..., alias="subscribedAt")


class SubscriptionRecord(SubscriptionSummary):
    id: str


class SubscribeResponse(BaseModel):
    message: str
    subscription: SubscriptionSummary


class MessageResponse(BaseModel):
    message: str
