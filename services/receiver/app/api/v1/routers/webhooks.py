from fastapi import APIRouter, Depends, Header, HTTPException, Request
from starlette.requests import ClientDisconnect

from ....core.errors import BodyReadError, IngestionError
from ....core.logging import get_logger
from ....services.pipeline import IncomingEvent, IngestionPipeline
from ...deps import get_pipeline

router = APIRouter(tags=["webhooks"])
logger = get_logger(__name__)


async def _read_body(request: Request, delivery_id: str) -> bytes:
    try:
        return await request.body()
    except ClientDisconnect as exc:
        logger.warning("webhook.body_unreadable", delivery_id=delivery_id, error=str(exc))
        raise BodyReadError(str(exc)) from exc


@router.post("/webhook")
async def github_webhook(
    request: Request,
    pipeline: IngestionPipeline = Depends(get_pipeline),
    x_github_event: str | None = Header(None, alias="X-GitHub-Event"),
    x_hub_signature_256: str | None = Header(None, alias="X-Hub-Signature-256"),
    x_github_delivery: str | None = Header(None, alias="X-GitHub-Delivery"),
) -> dict:
    """
    GitHub webhook endpoint for all event types.

    Every delivery is authenticated (when a secret is configured), parsed and
    logged. Only push, issue_comment and pull_request deliveries are stored.
    A storage failure does not fail the request.

    See: https://docs.github.com/en/webhooks/webhook-events-and-payloads
    """
    delivery_id = x_github_delivery or ""
    try:
        body = await _read_body(request, delivery_id)
        await pipeline.ingest(
            IncomingEvent(
                event_type=x_github_event or "",
                delivery_id=delivery_id,
                signature_header=x_hub_signature_256,
                raw_body=body,
            )
        )
    except IngestionError as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.detail)

    return {"status": "success", "message": "Webhook received and processed"}
