import logging
import os
from datetime import timedelta

from flask import Flask, g, render_template, request, session
from dotenv import load_dotenv

from app.teachrate.config import load_config
from app.teachrate.db import ENGINE_KEY, init_db, session_scope, teardown_db_session
from app.teachrate.models import Base
from app.teachrate.accounts import bootstrap_admin
from app.teachrate.errors import register_error_handlers
from app.teachrate.gate import load_current_user
from app.teachrate.routes import bp as routes_bp
from app.teachrate.auth import bp as auth_bp
from app.teachrate.modules.teachers.views import bp as teachers_bp
from app.teachrate.modules.teachers.admin import bp as admin_bp


def create_app() -> Flask:
    load_dotenv()
    app = Flask(__name__, template_folder="templates", static_folder="static")
    app.config.from_mapping(load_config())
    app.config["PERMANENT_SESSION_LIFETIME"] = timedelta(hours=8)
    app.config["SESSION_REFRESH_EACH_REQUEST"] = True
    app.logger.setLevel(app.config["LOG_LEVEL"])

    from app.teachrate.csrf import csrf_token, csrf_valid

    @app.context_processor
    def _inject_csrf() -> dict:
        return {"csrf_token": csrf_token()}

    @app.context_processor
    def _inject_user() -> dict:
        return {"current_user": getattr(g, "current_user", None)}

    @app.template_filter("stars")
    def _stars_filter(value) -> str:
        if value is None:
            return "—"
        return f"{value:.1f}"

    @app.template_filter("dateformat")
    def _dateformat_filter(value, format: str = "%Y-%m-%d") -> str:
        if value is None:
            return "—"
        if hasattr(value, "strftime"):
            return value.strftime(format)
        return str(value)

    @app.before_request
    def _csrf_guard():
        if request.path.startswith(("/static/", "/uploads/", "/health", "/healthz")):
            return None
        csrf_token()
        session.permanent = True
        if request.method in ("POST", "PUT", "PATCH", "DELETE"):
            # Register/login are open; anonymous writes fall through to the login gate.
            if (request.endpoint or "").startswith("auth.") or "user_id" not in session:
                return None
            if not csrf_valid(request):
                return render_template("errors/400.html", message="CSRF token missing or invalid."), 400

    # Production guardrails (fail fast with clear logs)
    env = (app.config.get("ENV") or "").strip().lower()
    if env in ("prod", "production"):
        if not app.config.get("SECRET_KEY") or str(app.config["SECRET_KEY"]) in ("", "change-me"):
            raise RuntimeError("SECRET_KEY must be set to a strong value in production (not default).")
        if app.config.get("ADMIN_PASSWORD") == "admin":
            app.logger.warning("ADMIN_PASSWORD is the default; change it for the seeded admin account.")

    init_db(app)

    def _dispose_engine_on_fork() -> None:
        if hasattr(os, "register_at_fork"):
            def _after_fork_child():
                engine = app.extensions.get(ENGINE_KEY)
                if engine:
                    engine.dispose()
                    app.logger.info("Disposed DB engine after fork (pid=%s)", os.getpid())

            os.register_at_fork(after_in_child=_after_fork_child)

    _dispose_engine_on_fork()

    if app.config.get("BOOTSTRAP_ON_START"):
        Base.metadata.create_all(bind=app.extensions[ENGINE_KEY])
        with session_scope(app) as s:
            bootstrap_admin(s, app.config["ADMIN_USERNAME"], app.config["ADMIN_PASSWORD"])

    # Storage health check (fail loudly on misconfiguration)
    if app.config.get("STORAGE_BACKEND") == "s3":
        missing_s3 = [
            key
            for key in ("S3_ENDPOINT", "S3_BUCKET", "S3_ACCESS_KEY_ID", "S3_SECRET_ACCESS_KEY")
            if not app.config.get(key)
        ]
        if missing_s3:
            app.logger.error("STORAGE CONFIG ERROR: Missing required S3 env vars: %s", ", ".join(missing_s3))

    app.register_blueprint(routes_bp)
    app.register_blueprint(auth_bp)
    app.register_blueprint(teachers_bp, url_prefix="/teachers")
    app.register_blueprint(admin_bp, url_prefix="/admin")

    def _load_user_wrapper():
        if request.path.startswith(("/static/", "/uploads/", "/health", "/healthz")):
            g.current_user = None
            return None
        return load_current_user()

    app.before_request(_load_user_wrapper)
    app.teardown_appcontext(teardown_db_session)

    register_error_handlers(app)

    @app.errorhandler(400)
    def _err_400(e):  # type: ignore[no-redef]
        return render_template("errors/400.html", message=getattr(e, "description", None)), 400

    @app.errorhandler(500)
    def _err_500(e):  # type: ignore[no-redef]
        app.logger.exception("Unhandled 500 (path=%s)", request.path)
        return render_template("errors/500.html"), 500

    @app.errorhandler(413)
    def _err_413(e):  # type: ignore[no-redef]
        from flask import flash, redirect, url_for

        flash("File too large. Maximum size is 10MB.", "danger")
        referrer = request.referrer
        if referrer and referrer.startswith(request.host_url):
            return redirect(referrer), 302
        return redirect(url_for("admin.index")), 302

    logging.getLogger(__name__).info("create_app() complete; app ready to serve")

    return app
