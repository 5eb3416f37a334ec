"""Exception types raised along the ingestion path.

Ingestion errors reject a single request and map to a 4xx response.
Persistence errors are raised by the event store and never leave the
pipeline: a failed write is logged and the delivery is still acknowledged.
"""


class IngestionError(Exception):
    """Base class for errors that reject an incoming webhook."""

    status_code: int = 400
    detail: str = "Invalid webhook request"


class BodyReadError(IngestionError):
    status_code = 400
    detail = "Error reading request body"


class SignatureRejected(IngestionError):
    status_code = 401
    detail = "Invalid signature"

    def __init__(self, delivery_id: str) -> None:
        super().__init__(f"invalid signature for delivery {delivery_id or '<none>'}")
        self.delivery_id = delivery_id


class MalformedPayload(IngestionError):
    status_code = 400
    detail = "Invalid JSON payload"


class PersistenceError(Exception):
    """Raised by an event store when a write could not be completed."""


class DuplicateDeliveryError(PersistenceError):
    def __init__(self, delivery_id: str) -> None:
        super().__init__(f"delivery {delivery_id!r} already stored")
        self.delivery_id = delivery_id
