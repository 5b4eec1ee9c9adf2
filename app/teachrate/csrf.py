import secrets

from flask import Request, session

SESSION_KEY = "csrf_token"


def csrf_token() -> str:
    """Token for the hidden form field; minted once per session."""
    if SESSION_KEY not in session:
        session[SESSION_KEY] = secrets.token_urlsafe(32)
    return session[SESSION_KEY]


def csrf_valid(req: Request) -> bool:
    sent = req.form.get(SESSION_KEY) or req.headers.get("X-CSRF-Token") or ""
    expected = session.get(SESSION_KEY) or ""
    if not sent or not expected:
        return False
    return secrets.compare_digest(sent.encode(), expected.encode())
