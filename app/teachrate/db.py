"""Engine and session plumbing shared by the app, the seed script and tests."""
from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager

from flask import Flask, current_app, g
from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import Session, sessionmaker

ENGINE_KEY = "teachrate.engine"
SESSIONS_KEY = "teachrate.sessions"


def build_engine(db_url: str) -> Engine:
    return create_engine(db_url, pool_pre_ping=True)


def build_sessionmaker(engine: Engine) -> sessionmaker[Session]:
    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


def init_db(app: Flask) -> None:
    engine = build_engine(app.config["DATABASE_URL"])
    app.extensions[ENGINE_KEY] = engine
    app.extensions[SESSIONS_KEY] = build_sessionmaker(engine)


def db_session() -> Session:
    """One session per request, opened lazily and closed at teardown."""
    s: Session | None = g.get("db")
    if s is None:
        s = g.db = current_app.extensions[SESSIONS_KEY]()
    return s


def teardown_db_session(_exc: BaseException | None) -> None:
    s: Session | None = g.pop("db", None)
    if s is not None:
        s.close()


@contextmanager
def session_scope(app: Flask) -> Iterator[Session]:
    """Session outside a request; commits on success, rolls back on error."""
    with app.extensions[SESSIONS_KEY].begin() as s:
        yield s
