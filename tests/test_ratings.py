"""Tests for the rating ledger."""
from urllib.parse import urlparse

import pytest

from app.teachrate import create_app
from app.teachrate.accounts import register_user
from app.teachrate.db import session_scope
from app.teachrate.modules.ratings.models import Rating
from app.teachrate.modules.ratings.service import add_rating, average_for, list_for_teacher
from app.teachrate.modules.teachers.service import create_teacher


@pytest.fixture()
def app(tmp_path, monkeypatch):
    monkeypatch.setenv("SECRET_KEY", "test-secret")
    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{tmp_path/'test.db'}")
    monkeypatch.setenv("ENV", "test")
    monkeypatch.setenv("STORAGE_ROOT", str(tmp_path / "storage"))
    monkeypatch.delenv("ADMIN_USERNAME", raising=False)
    monkeypatch.delenv("ADMIN_PASSWORD", raising=False)
    return create_app()


@pytest.fixture()
def seeded(app):
    with session_scope(app) as s:
        alice = register_user(s, "alice", "pw")
        bob = register_user(s, "bob", "pw")
        teacher = create_teacher(s, "Frau Weber", "History")
        return {"alice": alice.id, "bob": bob.id, "teacher": teacher.id}


@pytest.fixture()
def client(app, seeded):
    client = app.test_client()
    client.post("/login", data={"username": "alice", "password": "pw"})
    with client.session_transaction() as sess:
        sess["csrf_token"] = "test-token"
    return client


def test_average_absent_without_ratings(app, seeded):
    with session_scope(app) as s:
        assert average_for(s, seeded["teacher"]) is None


def test_average_of_five_three_four_is_four(app, seeded):
    with session_scope(app) as s:
        for stars in (5, 3, 4):
            add_rating(s, seeded["teacher"], seeded["alice"], stars, "")

    with session_scope(app) as s:
        avg = average_for(s, seeded["teacher"])
        assert isinstance(avg, float)
        assert avg == 4.0


def test_stars_and_comment_are_stored_verbatim(app, seeded):
    with session_scope(app) as s:
        add_rating(s, seeded["teacher"], seeded["alice"], 42, "")
        add_rating(s, seeded["teacher"], seeded["alice"], -3, "x" * 5000)

    with session_scope(app) as s:
        rows = s.query(Rating).order_by(Rating.id).all()
        assert [(r.stars, len(r.comment)) for r in rows] == [(42, 0), (-3, 5000)]


def test_same_user_may_rate_a_teacher_more_than_once(app, seeded):
    with session_scope(app) as s:
        add_rating(s, seeded["teacher"], seeded["alice"], 1, "first")
        add_rating(s, seeded["teacher"], seeded["alice"], 5, "changed my mind")

    with session_scope(app) as s:
        assert s.query(Rating).filter(Rating.user_id == seeded["alice"]).count() == 2
        assert average_for(s, seeded["teacher"]) == 3.0


def test_list_for_teacher_joins_username_in_order(app, seeded):
    with session_scope(app) as s:
        other = create_teacher(s, "Herr Braun", "Sports")
        add_rating(s, seeded["teacher"], seeded["bob"], 4, "solid")
        add_rating(s, other.id, seeded["bob"], 1, "elsewhere")
        add_rating(s, seeded["teacher"], seeded["alice"], 2, "strict")

    with session_scope(app) as s:
        entries = list_for_teacher(s, seeded["teacher"])
        assert [(e.username, e.rating.stars, e.rating.comment) for e in entries] == [
            ("bob", 4, "solid"),
            ("alice", 2, "strict"),
        ]


def test_rate_route_adds_rating_for_current_user(app, seeded, client):
    teacher_id = seeded["teacher"]
    r = client.post(
        f"/teachers/{teacher_id}/rate",
        data={"stars": "4", "comment": "Clear explanations", "csrf_token": "test-token"},
    )
    assert r.status_code == 302
    assert urlparse(r.headers["Location"]).path == f"/teachers/{teacher_id}"

    with session_scope(app) as s:
        (rating,) = s.query(Rating).all()
        assert rating.user_id == seeded["alice"]
        assert rating.teacher_id == teacher_id
        assert rating.stars == 4
        assert rating.comment == "Clear explanations"

    r = client.get(f"/teachers/{teacher_id}")
    assert r.status_code == 200
    assert b"Clear explanations" in r.data
    assert b"alice" in r.data
    assert b"4.0" in r.data


def test_rate_route_accepts_out_of_range_stars(app, seeded, client):
    client.post(
        f"/teachers/{seeded['teacher']}/rate",
        data={"stars": "11", "comment": "", "csrf_token": "test-token"},
    )
    with session_scope(app) as s:
        assert s.query(Rating).one().stars == 11


def test_rate_route_rejects_non_numeric_stars(app, seeded, client):
    r = client.post(
        f"/teachers/{seeded['teacher']}/rate",
        data={"stars": "lots", "comment": "", "csrf_token": "test-token"},
    )
    assert r.status_code == 400

    with session_scope(app) as s:
        assert s.query(Rating).count() == 0


def test_unrated_teacher_renders_without_average(seeded, client):
    r = client.get("/teachers")
    assert r.status_code == 200
    assert b"Frau Weber" in r.data
    assert b"No ratings yet" in r.data
    assert b"0.0" not in r.data

    r = client.get(f"/teachers/{seeded['teacher']}")
    assert b"No ratings yet" in r.data


def test_rate_route_rejects_missing_stars(app, seeded, client):
    r = client.post(
        f"/teachers/{seeded['teacher']}/rate",
        data={"comment": "forgot the stars", "csrf_token": "test-token"},
    )
    assert r.status_code == 400

    with session_scope(app) as s:
        assert s.query(Rating).count() == 0
