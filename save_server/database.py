# save_server/database.py

from pathlib import Path

from fastapi import Request
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from save_server.models import Base


def create_db_engine(database_url: str) -> Engine:
    """
    SQLite URLs get a shared-thread connection, since FastAPI serves sync
    routes from a thread pool. In-memory SQLite keeps a single connection so
    every session sees the same database.
    """
    url = make_url(database_url)
    if url.get_backend_name() != "sqlite":
        return create_engine(database_url, pool_pre_ping=True)

    if not url.database or url.database == ":memory:":
        return create_engine(
            database_url,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )

    Path(url.database).parent.mkdir(parents=True, exist_ok=True)
    return create_engine(
        database_url,
        connect_args={"check_same_thread": False}
    )


def create_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(
        autocommit=False,
        autoflush=False,
        bind=engine
    )


def init_db(engine: Engine):
    Base.metadata.create_all(bind=engine)


def get_db(request: Request):
    db = request.app.state.session_factory()
    try:
        yield db
    finally:
        db.close()
