"""
Domain errors and the HTTP boundary that turns them into responses.

Services and guards raise; views let the errors propagate and the handlers
registered here decide between a plain-text body, a 404, or a redirect.
"""
from __future__ import annotations

from flask import Flask, Response, redirect, url_for


class TeachRateError(Exception):
    message = "Request failed"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.message)
        self.message = message or self.message


class DuplicateUsername(TeachRateError):
    message = "Registration failed"

    def __init__(self, username: str) -> None:
        super().__init__()
        self.username = username


class AuthenticationFailure(TeachRateError):
    message = "Login failed"


class TeacherNotFound(TeachRateError):
    message = "Teacher not found"

    def __init__(self, teacher_id: int) -> None:
        super().__init__()
        self.teacher_id = teacher_id


class AccessDenied(TeachRateError):
    message = "Access denied"
    endpoint = "routes.index"


class LoginRequired(AccessDenied):
    endpoint = "auth.login_get"


class AdminRequired(AccessDenied):
    endpoint = "routes.index"


def _plain(message: str, status: int) -> Response:
    return Response(message, status=status, mimetype="text/plain")


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DuplicateUsername)
    def _duplicate_username(e: DuplicateUsername):
        return _plain(e.message, 200)

    @app.errorhandler(AuthenticationFailure)
    def _auth_failure(e: AuthenticationFailure):
        return _plain(e.message, 200)

    @app.errorhandler(TeacherNotFound)
    def _teacher_not_found(e: TeacherNotFound):
        return _plain(e.message, 404)

    @app.errorhandler(AccessDenied)
    def _access_denied(e: AccessDenied):
        return redirect(url_for(e.endpoint))
