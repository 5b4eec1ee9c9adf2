from collections.abc import Callable
from functools import wraps
from typing import Any

from flask import current_app, g, session

from app.teachrate.db import db_session
from app.teachrate.errors import AdminRequired, LoginRequired
from app.teachrate.models import User


def load_current_user() -> None:
    """
    Loads g.current_user from the signed session cookie.
    Stale ids (user row gone) are dropped from the session.
    """
    user_id = session.get("user_id")
    if not user_id:
        g.current_user = None
        return

    try:
        user = db_session().get(User, int(user_id))
    except (TypeError, ValueError):
        user = None
    if user is None:
        current_app.logger.info("Dropping session for unknown user_id=%s", user_id)
        session.pop("user_id", None)
    g.current_user = user


def current_user() -> User | None:
    return getattr(g, "current_user", None)


def login_user(user: User) -> None:
    session.clear()
    session["user_id"] = user.id
    g.current_user = user


def logout_user() -> None:
    session.clear()
    g.current_user = None


def require_login(fn: Callable[..., Any]) -> Callable[..., Any]:
    @wraps(fn)
    def wrapped(*args: Any, **kwargs: Any):
        if current_user() is None:
            raise LoginRequired()
        return fn(*args, **kwargs)

    return wrapped


def require_admin(fn: Callable[..., Any]) -> Callable[..., Any]:
    @wraps(fn)
    def wrapped(*args: Any, **kwargs: Any):
        user = current_user()
        if user is None or not user.is_admin:
            raise AdminRequired()
        return fn(*args, **kwargs)

    return wrapped
