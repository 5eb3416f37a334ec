"""
Pydantic schemas for webhook events.

NewWebhookEvent is what the pipeline hands to an event store;
StoredEvent is what the store hands back once the row exists.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class NewWebhookEvent(BaseModel):
    """An authenticated, parsed delivery ready to be written."""

    delivery_id: str = Field(..., description="X-GitHub-Delivery value")
    event_type: str = Field(..., description="X-GitHub-Event value")
    repository_name: str | None = None
    sender_login: str | None = None
    action: str | None = None
    payload: Any = Field(..., description="Decoded JSON body")


class StoredEvent(BaseModel):
    """A persisted delivery with its database id and creation time."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    delivery_id: str
    event_type: str
    repository_name: str | None = None
    sender_login: str | None = None
    action: str | None = None
    payload: Any
    created_at: datetime
