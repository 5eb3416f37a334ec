from prometheus_client import Counter
from starlette_exporter import PrometheusMiddleware, handle_metrics

# Module level so that building several apps in one process (tests) does not
# register the same collectors twice.
WEBHOOK_EVENTS_RECEIVED = Counter(
    "webhook_events_received_total",
    "Webhook deliveries by event type and pipeline outcome",
    ["event_type", "outcome"],
)
WEBHOOK_STORE_FAILURES = Counter(
    "webhook_store_failures_total",
    "Failed attempts to persist a webhook delivery",
    ["reason"],
)


def add_prometheus(app, app_name: str = "webhook_receiver") -> None:
    app.add_middleware(
        PrometheusMiddleware,
        app_name=app_name,
        prefix=app_name.replace("-", "_"),
        group_paths=True,
    )
    app.add_route("/metrics", handle_metrics)
    app.state.metrics = {
        "webhook_events_received_total": WEBHOOK_EVENTS_RECEIVED,
        "webhook_store_failures_total": WEBHOOK_STORE_FAILURES,
    }


def record_ingestion(event_type: str, outcome: str) -> None:
    WEBHOOK_EVENTS_RECEIVED.labels(event_type=event_type or "none", outcome=outcome).inc()


def record_store_failure(reason: str) -> None:
    WEBHOOK_STORE_FAILURES.labels(reason=reason).inc()
