from __future__ import annotations

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from werkzeug.security import check_password_hash, generate_password_hash

from app.teachrate.errors import DuplicateUsername
from app.teachrate.models import User

logger = logging.getLogger(__name__)


def find_user(s: Session, username: str) -> User | None:
    return s.query(User).filter(User.username == username).one_or_none()


def register_user(s: Session, username: str, password: str) -> User:
    """Create a non-admin user. Raises DuplicateUsername if the name is taken."""
    if find_user(s, username) is not None:
        raise DuplicateUsername(username)

    user = User(username=username, password_hash=generate_password_hash(password), is_admin=False)
    s.add(user)
    try:
        s.flush()
    except IntegrityError as e:
        # Lost a race against a concurrent registration; the caller's session is rolled back on the way out.
        raise DuplicateUsername(username) from e

    logger.info("User registered id=%s username=%s", user.id, username)
    return user


def authenticate(s: Session, username: str, password: str) -> User | None:
    user = find_user(s, username)
    if user is None or not check_password_hash(user.password_hash, password):
        logger.info("Login failed username=%s", username)
        return None
    return user


def bootstrap_admin(s: Session, username: str = "admin", password: str = "admin") -> User | None:
    """
    Seed the admin account on first run.
    Idempotent: returns None and does NOT overwrite an existing user's password.
    """
    if find_user(s, username) is not None:
        return None
    user = User(username=username, password_hash=generate_password_hash(password), is_admin=True)
    s.add(user)
    s.flush()
    logger.info("Seeded admin user id=%s username=%s", user.id, username)
    return user
