from __future__ import annotations

from datetime import datetime
from typing import Protocol

from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from ..core.errors import DuplicateDeliveryError, PersistenceError
from ..core.logging import get_logger
from ..models.events import WebhookEvent
from ..schemas.events import NewWebhookEvent, StoredEvent


class EventStore(Protocol):
    """Durable store for webhook deliveries, keyed by delivery id.

    ``store`` must raise ``DuplicateDeliveryError`` when the delivery id is
    already present and ``PersistenceError`` for any other failed write.
    """

    def store(self, event: NewWebhookEvent) -> StoredEvent: ...


class SqlAlchemyEventStore:
    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        self._session_factory = session_factory
        self._logger = get_logger(__name__)

    def store(self, event: NewWebhookEvent) -> StoredEvent:
        row = WebhookEvent(
            delivery_id=event.delivery_id,
            event_type=event.event_type,
            repository_name=event.repository_name,
            sender_login=event.sender_login,
            action=event.action,
            payload=event.payload,
        )
        with self._session_factory() as session:
            try:
                session.add(row)
                session.commit()
                session.refresh(row)
            except IntegrityError as exc:
                session.rollback()
                raise DuplicateDeliveryError(event.delivery_id) from exc
            except SQLAlchemyError as exc:
                session.rollback()
                raise PersistenceError(str(exc)) from exc
            return StoredEvent.model_validate(row)

    def get_by_delivery_id(self, delivery_id: str) -> StoredEvent | None:
        with self._session_factory() as session:
            row = session.execute(
                select(WebhookEvent).where(WebhookEvent.delivery_id == delivery_id)
            ).scalar_one_or_none()
            return StoredEvent.model_validate(row) if row is not None else None

    def list_by_event_type(
        self, event_type: str, limit: int = 50, offset: int = 0
    ) -> list[StoredEvent]:
        stmt = (
            select(WebhookEvent)
            .where(WebhookEvent.event_type == event_type)
            .order_by(WebhookEvent.created_at.desc(), WebhookEvent.id.desc())
            .limit(limit)
            .offset(offset)
        )
        with self._session_factory() as session:
            return [StoredEvent.model_validate(r) for r in session.execute(stmt).scalars()]

    def list_by_repository(
        self, repository_name: str, limit: int = 50, offset: int = 0
    ) -> list[StoredEvent]:
        stmt = (
            select(WebhookEvent)
            .where(WebhookEvent.repository_name == repository_name)
            .order_by(WebhookEvent.created_at.desc(), WebhookEvent.id.desc())
            .limit(limit)
            .offset(offset)
        )
        with self._session_factory() as session:
            return [StoredEvent.model_validate(r) for r in session.execute(stmt).scalars()]

    def count_by_event_type(self, event_type: str) -> int:
        with self._session_factory() as session:
            return session.execute(
                select(func.count())
                .select_from(WebhookEvent)
                .where(WebhookEvent.event_type == event_type)
            ).scalar_one()

    def delete_older_than(self, cutoff: datetime) -> int:
        """Delete events created before ``cutoff``; returns the row count."""
        with self._session_factory() as session:
            result = session.execute(
                delete(WebhookEvent).where(WebhookEvent.created_at < cutoff)
            )
            session.commit()
        self._logger.info(
            "event_store.purged", deleted=result.rowcount, cutoff=cutoff.isoformat()
        )
        return result.rowcount
