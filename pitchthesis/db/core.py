# pitchthesis/db/core.py

from urllib.parse import urlparse, parse_qsl, urlencode, urlunparse

from fastapi import Request
from sqlalchemy.engine import Engine
from sqlmodel import SQLModel, create_engine, Session

from pitchthesis.config import Settings
from pitchthesis.core.logging import get_logger

log = get_logger("db")


def normalize_url(raw: str, ssl: bool = False) -> str:
    """
    postgres:// -> postgresql+psycopg2://, plus sslmode=require when the TLS toggle is on.
    """
    url = raw.replace("postgres://", "postgresql://", 1)
    if url.startswith("postgresql://"):
        url = url.replace("postgresql://", "postgresql+psycopg2://", 1)

    if ssl and url.startswith("postgresql"):
        parsed = urlparse(url)
        query = dict(parse_qsl(parsed.query, keep_blank_values=True))
        query.setdefault("sslmode", "require")
        url = urlunparse(parsed._replace(query=urlencode(query)))
    return url


def build_engine(cfg: Settings) -> Engine:
    url = normalize_url(cfg.database_url, cfg.postgres_ssl)
    if url.startswith("sqlite"):
        # SQLite special handling
        return create_engine(url, connect_args={"check_same_thread": False})
    log.info("db_engine", extra={"dialect": url.split(":", 1)[0], "ssl": cfg.postgres_ssl})
    return create_engine(url, pool_pre_ping=True)


def init_db(engine: Engine) -> None:
    """
    Ensure tables exist. Called at startup.
    """
    from pitchthesis.db import models  # noqa: F401  registers table metadata
    SQLModel.metadata.create_all(engine)


def get_session(request: Request):
    """
    Dependency for FastAPI endpoints; bound to the engine the app was built with.
    """
    with Session(request.app.state.engine) as session:
        yield session
