import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from .api.v1.routers.health import router as health_router
from .api.v1.routers.webhooks import router as webhooks_router
from .core.classifier import EventClassifier
from .core.config import Settings, get_settings, validate_settings
from .core.logging import configure_structlog, get_logger
from .core.observability import add_prometheus
from .db import check_database_health, create_db_engine, create_sessionmaker
from .middleware.logging import RequestLoggingMiddleware
from .services.event_store import EventStore, SqlAlchemyEventStore
from .services.pipeline import IngestionPipeline


def build_pipeline(settings: Settings, event_store: EventStore | None) -> IngestionPipeline:
    return IngestionPipeline(
        secret=settings.github_webhook_secret,
        event_store=event_store,
        classifier=EventClassifier(settings.persistable_event_types),
        store_timeout=settings.persistence_timeout_seconds,
    )


def create_app(
    settings: Settings | None = None, event_store: EventStore | None = None
) -> FastAPI:
    """Build the receiver app.

    Configuration is read once here and handed to the pipeline; nothing
    downstream looks at the environment. Passing ``event_store`` bypasses
    DATABASE_URL entirely.
    """
    settings = settings or get_settings()
    # Reliability: validate env/settings early
    try:
        validate_settings(settings)
    except Exception as exc:  # noqa: BLE001
        # Fail-fast with a clear error
        raise RuntimeError(f"Invalid configuration: {exc}")

    configure_structlog()
    logger = get_logger(__name__)

    app = FastAPI(title=settings.app_name, version=settings.app_version)
    app.state.settings = settings

    engine = None
    if event_store is None and settings.storage_enabled:
        engine = create_db_engine(settings.database_url)
        event_store = SqlAlchemyEventStore(create_sessionmaker(engine))
    elif event_store is None:
        logger.warning(
            "startup.storage_disabled",
            reason="DATABASE_URL not set; webhooks will be logged but not stored",
        )

    if not settings.signature_required:
        logger.warning(
            "startup.signature_verification_disabled",
            reason="GITHUB_WEBHOOK_SECRET not set",
        )

    app.state.pipeline = build_pipeline(settings, event_store)

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Handle all unhandled exceptions."""
        logger.error(
            "request.unhandled_exception",
            path=request.url.path,
            method=request.method,
            error=str(exc),
            error_type=type(exc).__name__,
            exc_info=True,
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": "Internal server error"},
        )

    app.add_middleware(RequestLoggingMiddleware)
    add_prometheus(app, app_name=settings.service_name)

    @app.on_event("startup")
    def on_startup() -> None:  # noqa: D401
        if engine is None:
            return
        db = check_database_health(engine)
        if db["ok"]:
            logger.info("startup.database_connected", url=engine.url.render_as_string())
        else:
            # Keep serving: deliveries are still verified, logged and acknowledged
            logger.warning("startup.database_unavailable", details=db["details"])
            app.state.pipeline = build_pipeline(settings, None)

    @app.on_event("shutdown")
    def on_shutdown() -> None:  # noqa: D401
        if engine is not None:
            engine.dispose()

    app.include_router(health_router)
    app.include_router(webhooks_router)

    logger.info(
        "startup.configured",
        port=settings.port,
        storage_enabled=event_store is not None,
        signature_required=settings.signature_required,
        persisted_types=sorted(settings.persistable_event_types),
    )
    return app


def main() -> None:
    settings = get_settings()
    uvicorn.run(create_app(settings), host="0.0.0.0", port=settings.port)


if __name__ == "__main__":
    main()
