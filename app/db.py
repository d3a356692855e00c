# app/db.py

import logging

from sqlmodel import SQLModel, create_engine, Session

from app.config import DATABASE_URL, STORE_TIMEOUT_SECONDS

logger = logging.getLogger(__name__)


def make_engine(url: str = DATABASE_URL, **kwargs):
    connect_args = {}
    if url.startswith("sqlite"):
        # required for SQLite + FastAPI; timeout bounds how long a write waits on a lock
        connect_args = {"check_same_thread": False, "timeout": STORE_TIMEOUT_SECONDS}
    return create_engine(url, echo=False, connect_args=connect_args, **kwargs)


engine = make_engine()


def init_db(bind=None) -> None:
    from app.data import seed_defaults  # app.data -> app.auth -> app.db

    bind = bind or engine
    SQLModel.metadata.create_all(bind)
    with Session(bind) as session:
        seed_defaults(session)
    logger.info("Database ready at %s", bind.url)


# Dependency: one session per request
def get_session():
    with Session(engine) as session:
        yield session
