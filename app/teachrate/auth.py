from __future__ import annotations

from flask import Blueprint, redirect, render_template, request, url_for

from app.teachrate.accounts import authenticate, register_user
from app.teachrate.db import db_session
from app.teachrate.errors import AuthenticationFailure
from app.teachrate.gate import login_user, logout_user

bp = Blueprint("auth", __name__)


@bp.get("/register")
def register_get():
    return render_template("auth/register.html", title="Register")


@bp.post("/register")
def register_post():
    username = request.form.get("username") or ""
    password = request.form.get("password") or ""

    s = db_session()
    register_user(s, username, password)
    s.commit()
    return redirect(url_for("auth.login_get"))


@bp.get("/login")
def login_get():
    return render_template("auth/login.html", title="Login")


@bp.post("/login")
def login_post():
    username = request.form.get("username") or ""
    password = request.form.get("password") or ""

    user = authenticate(db_session(), username, password)
    if user is None:
        raise AuthenticationFailure()

    login_user(user)
    return redirect(url_for("teachers.teachers_list"))


@bp.get("/logout")
def logout():
    logout_user()
    return redirect(url_for("auth.login_get"))
