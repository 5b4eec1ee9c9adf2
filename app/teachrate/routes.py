import mimetypes

from flask import Blueprint, abort, current_app, redirect, send_file, url_for

from app.teachrate.gate import current_user
from app.teachrate.storage import storage_from_config

bp = Blueprint("routes", __name__)


@bp.get("/")
def index():
    if current_user() is not None:
        return redirect(url_for("teachers.teachers_list"))
    return redirect(url_for("auth.login_get"))


@bp.get("/uploads/<path:key>")
def upload(key: str):
    storage = storage_from_config(current_app.config)
    if not storage.exists(key):
        abort(404)
    mimetype = mimetypes.guess_type(key)[0] or "application/octet-stream"
    return send_file(storage.open(key), mimetype=mimetype)


@bp.get("/health")
def health():
    """Health check endpoint. Returns JSON."""
    return {"ok": True}


@bp.get("/healthz")
def healthz():
    """
    Fast health check for container probes. No DB access, minimal overhead.
    """
    return "ok", 200
