from __future__ import annotations

from flask import Blueprint, current_app, redirect, render_template, request, url_for

from app.teachrate.db import db_session
from app.teachrate.errors import TeacherNotFound
from app.teachrate.gate import require_admin
from app.teachrate.modules.teachers.service import (
    create_teacher,
    delete_teacher,
    get_teacher,
    list_teachers,
    list_users,
    update_teacher,
)
from app.teachrate.storage import save_upload, storage_from_config

bp = Blueprint("admin", __name__)


def _form_fields() -> tuple[str, str]:
    return request.form.get("name") or "", request.form.get("description") or ""


def _uploaded_image() -> str | None:
    storage = storage_from_config(current_app.config)
    return save_upload(storage, request.files.get("image"))


# ---------- Overview ----------
@bp.get("")
@require_admin
def index():
    s = db_session()
    return render_template(
        "admin/index.html",
        title="Admin",
        listings=list_teachers(s),
        users=list_users(s),
    )


# ---------- New ----------
@bp.get("/teachers/new")
@require_admin
def teacher_new_get():
    return render_template(
        "admin/teacher_form.html",
        title="New teacher",
        action=url_for("admin.teacher_new_post"),
        teacher=None,
    )


@bp.post("/teachers")
@require_admin
def teacher_new_post():
    s = db_session()
    name, description = _form_fields()
    create_teacher(s, name, description, image=_uploaded_image())
    s.commit()
    return redirect(url_for("admin.index"))


# ---------- Edit ----------
@bp.get("/teachers/<int:teacher_id>/edit")
@require_admin
def teacher_edit_get(teacher_id: int):
    teacher = get_teacher(db_session(), teacher_id)
    if teacher is None:
        raise TeacherNotFound(teacher_id)
    return render_template(
        "admin/teacher_form.html",
        title="Edit teacher",
        action=url_for("admin.teacher_update_post", teacher_id=teacher_id),
        teacher=teacher,
    )


@bp.post("/teachers/<int:teacher_id>/update")
@require_admin
def teacher_update_post(teacher_id: int):
    s = db_session()
    if get_teacher(s, teacher_id) is None:
        raise TeacherNotFound(teacher_id)
    name, description = _form_fields()
    update_teacher(s, teacher_id, name, description, image=_uploaded_image())
    s.commit()
    return redirect(url_for("admin.index"))


# ---------- Delete ----------
@bp.post("/teachers/<int:teacher_id>/delete")
@require_admin
def teacher_delete_post(teacher_id: int):
    s = db_session()
    delete_teacher(s, teacher_id)
    s.commit()
    return redirect(url_for("admin.index"))
