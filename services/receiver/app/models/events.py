from datetime import datetime
from typing import Any

from sqlalchemy import JSON, DateTime, Index, Integer, String, func
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from ..db import Base


class WebhookEvent(Base):
    """A stored GitHub delivery (push, issue_comment and pull_request only)."""

    __tablename__ = "webhook_events"
    __table_args__ = (
        # Unique index on delivery_id: a redelivery must fail, never overwrite
        Index("uix_webhook_events_delivery_id", "delivery_id", unique=True),
        Index("idx_webhook_events_event_type", "event_type"),
        Index("idx_webhook_events_repository", "repository_name"),
        Index("idx_webhook_events_sender", "sender_login"),
        Index("idx_webhook_events_created_at", "created_at"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    delivery_id: Mapped[str] = mapped_column(String(255), nullable=False)
    event_type: Mapped[str] = mapped_column(String(50), nullable=False)
    repository_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    sender_login: Mapped[str | None] = mapped_column(String(255), nullable=True)
    action: Mapped[str | None] = mapped_column(String(100), nullable=True)
    payload: Mapped[Any] = mapped_column(
        JSON().with_variant(JSONB(), "postgresql"), nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
