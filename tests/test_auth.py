"""Tests for registration, login and the session gate."""
from urllib.parse import urlparse

import pytest

from app.teachrate import create_app
from app.teachrate.db import session_scope
from app.teachrate.models import User
from app.teachrate.modules.ratings.models import Rating
from app.teachrate.modules.teachers.service import create_teacher


@pytest.fixture()
def app(tmp_path, monkeypatch):
    monkeypatch.setenv("SECRET_KEY", "test-secret")
    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{tmp_path/'test.db'}")
    monkeypatch.setenv("ENV", "test")
    monkeypatch.setenv("STORAGE_ROOT", str(tmp_path / "storage"))
    monkeypatch.delenv("ADMIN_USERNAME", raising=False)
    monkeypatch.delenv("ADMIN_PASSWORD", raising=False)

    app = create_app()
    with session_scope(app) as s:
        create_teacher(s, "Frau Schmidt", "Teaches secret-chemistry")
    return app


@pytest.fixture()
def client(app):
    return app.test_client()


def _path(r):
    return urlparse(r.headers["Location"]).path


def _register_and_login(client, username="alice", password="pw"):
    client.post("/register", data={"username": username, "password": password})
    return client.post("/login", data={"username": username, "password": password})


def test_register_redirects_to_login(client, app):
    r = client.post("/register", data={"username": "alice", "password": "pw"})
    assert r.status_code == 302
    assert _path(r) == "/login"

    with session_scope(app) as s:
        assert s.query(User).filter(User.username == "alice").count() == 1


def test_register_duplicate_shows_message(client, app):
    client.post("/register", data={"username": "alice", "password": "pw"})
    r = client.post("/register", data={"username": "alice", "password": "pw2"})
    assert r.status_code == 200
    assert r.mimetype == "text/plain"
    assert r.data == b"Registration failed"

    with session_scope(app) as s:
        assert s.query(User).filter(User.username == "alice").count() == 1


def test_login_failure_shows_message(client):
    r = client.post("/login", data={"username": "admin", "password": "nope"})
    assert r.status_code == 200
    assert r.data == b"Login failed"


def test_login_success_redirects_to_teachers(client):
    r = _register_and_login(client)
    assert r.status_code == 302
    assert _path(r) == "/teachers"
    assert client.get("/teachers").status_code == 200


def test_logout_destroys_session(client):
    _register_and_login(client)
    r = client.get("/logout")
    assert _path(r) == "/login"

    r = client.get("/teachers")
    assert r.status_code == 302
    assert _path(r) == "/login"


def test_anonymous_teacher_detail_redirects_without_data(client):
    r = client.get("/teachers/1")
    assert r.status_code == 302
    assert _path(r) == "/login"
    assert b"Schmidt" not in r.data
    assert b"secret-chemistry" not in r.data


def test_anonymous_rate_redirects_to_login(client, app):
    with client.session_transaction() as sess:
        sess["csrf_token"] = "test-token"
    r = client.post("/teachers/1/rate", data={"stars": "5", "comment": "x", "csrf_token": "test-token"})
    assert r.status_code == 302
    assert _path(r) == "/login"

    with session_scope(app) as s:
        assert s.query(Rating).count() == 0


def test_non_admin_is_redirected_home_from_admin(client):
    _register_and_login(client)
    r = client.get("/admin")
    assert r.status_code == 302
    assert _path(r) == "/"

    r = client.get("/admin/teachers/new")
    assert _path(r) == "/"


def test_anonymous_is_redirected_home_from_admin(client):
    r = client.get("/admin")
    assert r.status_code == 302
    assert _path(r) == "/"


def test_admin_overview_lists_teachers_and_users(client):
    _register_and_login(client, "bob", "pw")
    client.get("/logout")
    client.post("/login", data={"username": "admin", "password": "admin"})

    r = client.get("/admin")
    assert r.status_code == 200
    assert b"Frau Schmidt" in r.data
    assert b"bob" in r.data
    assert b"admin" in r.data


def test_stale_session_user_is_dropped(client, app):
    _register_and_login(client)
    with client.session_transaction() as sess:
        sess["user_id"] = 9999

    r = client.get("/teachers")
    assert _path(r) == "/login"


def test_anonymous_rate_without_token_redirects_to_login(client, app):
    r = client.post("/teachers/1/rate", data={"stars": "5", "comment": "x"})
    assert r.status_code == 302
    assert _path(r) == "/login"

    with session_scope(app) as s:
        assert s.query(Rating).count() == 0


def test_anonymous_admin_post_without_token_redirects_home(client):
    r = client.post("/admin/teachers/1/delete")
    assert r.status_code == 302
    assert _path(r) == "/"
