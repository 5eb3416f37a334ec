from datetime import datetime, timedelta, timezone

from services.receiver.app.core.config import Settings
from services.receiver.app.core.logging import configure_structlog, get_logger
from services.receiver.app.db import create_db_engine, create_sessionmaker
from services.receiver.app.services.event_store import SqlAlchemyEventStore


def purge(store: SqlAlchemyEventStore, days: int, now: datetime | None = None) -> int:
    cutoff = (now or datetime.now(timezone.utc)) - timedelta(days=days)
    return store.delete_older_than(cutoff)


def main() -> None:
    configure_structlog()
    logger = get_logger(__name__)
    settings = Settings()
    if not settings.database_url:
        raise SystemExit("DATABASE_URL is required")

    engine = create_db_engine(settings.database_url)
    try:
        deleted = purge(SqlAlchemyEventStore(create_sessionmaker(engine)), settings.retention_days)
    finally:
        engine.dispose()

    logger.info("retention.purged", deleted=deleted, retention_days=settings.retention_days)


if __name__ == "__main__":
    main()
