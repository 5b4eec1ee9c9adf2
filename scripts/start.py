#!/usr/bin/env python3
"""
Production entry point: migrate, seed the admin, then hand the process to gunicorn.

Usage:
    DATABASE_URL=... PORT=3000 python scripts/start.py
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from app.teachrate.config import load_settings


def migrate(db_url: str) -> None:
    from alembic import command
    from alembic.config import Config

    cfg = Config(str(ROOT / "alembic.ini"))
    cfg.set_main_option("sqlalchemy.url", db_url)
    command.upgrade(cfg, "head")


def main() -> None:
    try:
        settings = load_settings()
    except ValueError:
        sys.exit(f"PORT must be an integer, got {os.environ.get('PORT')!r}")
    if not 1 <= settings.port <= 65535:
        sys.exit(f"PORT out of range: {settings.port}")

    from scripts.init_db import seed_admin

    print(f"Migrating {settings.database_url.split('://', 1)[0]} database...", flush=True)
    migrate(settings.database_url)
    seed_admin(settings.database_url)

    bind = f"0.0.0.0:{settings.port}"
    print(f"Starting gunicorn on {bind}", flush=True)
    # exec so gunicorn becomes PID 1 and receives signals directly
    os.execvp(
        "gunicorn",
        ["gunicorn", "app.wsgi:app", "--bind", bind, "--workers", "2", "--access-logfile", "-", "--error-logfile", "-"],
    )


if __name__ == "__main__":
    main()
