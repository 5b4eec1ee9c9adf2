"""
Seed the admin account (idempotent; never overwrites an existing password).

Usage:
  python scripts/init_db.py
"""
import os
import sys
from pathlib import Path

# Ensure repo root is on sys.path when running as a script.
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from app.teachrate.accounts import bootstrap_admin
from app.teachrate.db import build_engine, build_sessionmaker


def seed_admin(database_url: str | None = None) -> bool:
    """Returns True when the admin row was created, False when it already existed."""
    db_url = (database_url or os.environ.get("DATABASE_URL") or "sqlite:///teachrate.db").strip()
    username = (os.environ.get("ADMIN_USERNAME") or "admin").strip()
    password = os.environ.get("ADMIN_PASSWORD") or "admin"

    # No Flask app here: start.py seeds before gunicorn imports it.
    engine = build_engine(db_url)
    try:
        with build_sessionmaker(engine).begin() as s:
            created = bootstrap_admin(s, username, password) is not None
    finally:
        engine.dispose()

    print(f"Admin {username!r}: {'created' if created else 'already present'}", flush=True)
    return created


if __name__ == "__main__":
    seed_admin()
