from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker


def normalize_database_url(url: str) -> str:
    """Ensure SQLAlchemy uses psycopg driver explicitly.

    Hosting platforms usually hand out postgresql://...; prefer postgresql+psycopg://...
    """
    if url.startswith("postgres://"):
        url = url.replace("postgres://", "postgresql://", 1)
    if url.startswith("postgresql://") and "+" not in url.split("://", 1)[0]:
        return url.replace("postgresql://", "postgresql+psycopg://", 1)
    return url


def create_db_engine(database_url: str) -> Engine:
    database_url = normalize_database_url(database_url)
    if database_url.startswith("sqlite"):
        return create_engine(database_url, future=True)
    return create_engine(
        database_url,
        pool_pre_ping=True,
        pool_size=5,
        max_overflow=5,
        future=True,
    )


class Base(DeclarativeBase):
    pass


def create_sessionmaker(engine: Engine) -> sessionmaker[Session]:
    return sessionmaker(bind=engine, expire_on_commit=False, future=True)


def check_database_health(engine: Engine) -> dict:
    """Run a lightweight health check against the database."""
    try:
        with engine.connect() as connection:
            result = connection.execute(text("SELECT 1")).scalar()
            ok = bool(result == 1)
            return {"ok": ok, "details": "ok" if ok else "unexpected result"}
    except (
        Exception
    ) as exc:  # noqa: BLE001 - include error details for operator visibility
        return {"ok": False, "details": str(exc)}
