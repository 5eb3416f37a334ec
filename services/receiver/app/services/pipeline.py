"""
Webhook ingestion pipeline.

One ``ingest`` call per request:

    Received -> Authenticated -> Parsed -> PersistenceAttempted | PersistenceSkipped -> Acknowledged

with ``Rejected`` reachable before authentication (unreadable body) and after it
(bad signature, malformed JSON). The signature check always runs before the
body is parsed, so nothing extracted from an unauthenticated payload is logged
or stored.

Storage is best effort. The store call runs in a worker thread bounded by a
timeout; a failure or timeout is logged and the delivery is still acknowledged.
"""

from __future__ import annotations

import asyncio
import enum
from dataclasses import dataclass

from ..core.classifier import EventClassifier
from ..core.errors import (
    DuplicateDeliveryError,
    MalformedPayload,
    PersistenceError,
    SignatureRejected,
)
from ..core.logging import get_logger
from ..core.observability import record_ingestion, record_store_failure
from ..core.parser import ParsedFields, parse_payload
from ..core.signature import verify_signature
from ..schemas.events import NewWebhookEvent, StoredEvent
from .event_store import EventStore

UNKNOWN = "unknown"
# metric label for every event type outside the persisted set
OTHER_EVENT_TYPE = "other"


class PipelineState(str, enum.Enum):
    RECEIVED = "received"
    AUTHENTICATED = "authenticated"
    PARSED = "parsed"
    PERSISTENCE_ATTEMPTED = "persistence_attempted"
    PERSISTENCE_SKIPPED = "persistence_skipped"
    ACKNOWLEDGED = "acknowledged"
    REJECTED = "rejected"


@dataclass(frozen=True)
class IncomingEvent:
    event_type: str
    delivery_id: str
    signature_header: str | None
    raw_body: bytes


@dataclass(frozen=True)
class IngestionResult:
    fields: ParsedFields
    persistence: PipelineState
    stored: StoredEvent | None = None
    state: PipelineState = PipelineState.ACKNOWLEDGED


class IngestionPipeline:
    def __init__(
        self,
        secret: str | None = None,
        event_store: EventStore | None = None,
        classifier: EventClassifier | None = None,
        store_timeout: float = 5.0,
    ) -> None:
        self._secret = secret
        self._event_store = event_store
        self._classifier = classifier or EventClassifier()
        self._store_timeout = store_timeout
        self._logger = get_logger(__name__)

    @property
    def storage_enabled(self) -> bool:
        return self._event_store is not None

    def _event_label(self, event_type: str) -> str:
        if self._classifier.is_persistable(event_type):
            return event_type
        return OTHER_EVENT_TYPE

    async def ingest(self, event: IncomingEvent) -> IngestionResult:
        """Authenticate, parse, log and (maybe) store one delivery.

        Raises:
            SignatureRejected: the signature does not match the configured secret
            MalformedPayload: the body is not JSON
        """
        if not verify_signature(self._secret, event.raw_body, event.signature_header):
            self._logger.warning("webhook.signature_invalid", delivery_id=event.delivery_id)
            # unauthenticated input never becomes a label value
            record_ingestion("unverified", PipelineState.REJECTED.value)
            raise SignatureRejected(event.delivery_id)

        label = self._event_label(event.event_type)
        try:
            fields = parse_payload(event.raw_body)
        except MalformedPayload:
            self._logger.warning("webhook.payload_malformed", delivery_id=event.delivery_id)
            record_ingestion(label, PipelineState.REJECTED.value)
            raise

        self._logger.info(
            "webhook.received",
            event_type=event.event_type,
            repository=fields.repository_name or UNKNOWN,
            delivery_id=event.delivery_id,
            sender=fields.sender_login or UNKNOWN,
        )
        if fields.action:
            self._logger.info(
                "webhook.action", delivery_id=event.delivery_id, action=fields.action
            )

        if not self._classifier.is_persistable(event.event_type):
            self._logger.info(
                "webhook.not_persisted",
                event_type=event.event_type,
                delivery_id=event.delivery_id,
                persisted_types=sorted(self._classifier.persistable_event_types),
            )
            record_ingestion(label, PipelineState.PERSISTENCE_SKIPPED.value)
            return IngestionResult(fields=fields, persistence=PipelineState.PERSISTENCE_SKIPPED)

        if self._event_store is None:
            record_ingestion(label, PipelineState.PERSISTENCE_SKIPPED.value)
            return IngestionResult(fields=fields, persistence=PipelineState.PERSISTENCE_SKIPPED)

        stored = await self._store(event, fields)
        record_ingestion(label, PipelineState.PERSISTENCE_ATTEMPTED.value)
        return IngestionResult(
            fields=fields,
            persistence=PipelineState.PERSISTENCE_ATTEMPTED,
            stored=stored,
        )

    async def _store(self, event: IncomingEvent, fields: ParsedFields) -> StoredEvent | None:
        record = NewWebhookEvent(
            delivery_id=event.delivery_id,
            event_type=event.event_type,
            repository_name=fields.repository_name or None,
            sender_login=fields.sender_login or None,
            action=fields.action or None,
            payload=fields.document,
        )
        try:
            stored = await asyncio.wait_for(
                asyncio.to_thread(self._event_store.store, record),
                timeout=self._store_timeout,
            )
        except DuplicateDeliveryError:
            self._logger.warning(
                "webhook.store_failed",
                delivery_id=event.delivery_id,
                reason="duplicate_delivery",
            )
            record_store_failure("duplicate_delivery")
            return None
        except PersistenceError as exc:
            self._logger.error(
                "webhook.store_failed",
                delivery_id=event.delivery_id,
                reason="database_error",
                error=str(exc),
            )
            record_store_failure("database_error")
            return None
        except asyncio.TimeoutError:
            # the worker thread is abandoned; its write may still land
            self._logger.error(
                "webhook.store_timeout",
                delivery_id=event.delivery_id,
                timeout_seconds=self._store_timeout,
            )
            record_store_failure("timeout")
            return None

        self._logger.info(
            "webhook.stored",
            event_type=event.event_type,
            delivery_id=event.delivery_id,
            id=stored.id,
        )
        return stored
