from __future__ import annotations

from flask import Blueprint, abort, redirect, render_template, request, url_for

from app.teachrate.db import db_session
from app.teachrate.errors import TeacherNotFound
from app.teachrate.gate import current_user, require_login
from app.teachrate.modules.ratings.service import add_rating, average_for, list_for_teacher
from app.teachrate.modules.teachers.service import get_teacher, list_teachers

bp = Blueprint("teachers", __name__)


def _parse_stars(raw: str | None) -> int:
    # Whole numbers only; the range is deliberately left open.
    try:
        return int((raw or "").strip())
    except ValueError:
        abort(400, description="Stars must be a whole number.")


@bp.get("")
@require_login
def teachers_list():
    listings = list_teachers(db_session())
    return render_template("teachers/list.html", title="Teachers", listings=listings)


@bp.get("/<int:teacher_id>")
@require_login
def teacher_detail(teacher_id: int):
    s = db_session()
    teacher = get_teacher(s, teacher_id)
    if teacher is None:
        raise TeacherNotFound(teacher_id)

    return render_template(
        "teachers/detail.html",
        title=teacher.name,
        teacher=teacher,
        ratings=list_for_teacher(s, teacher_id),
        average_stars=average_for(s, teacher_id),
    )


@bp.post("/<int:teacher_id>/rate")
@require_login
def teacher_rate(teacher_id: int):
    s = db_session()
    stars = _parse_stars(request.form.get("stars"))
    comment = request.form.get("comment") or ""

    add_rating(s, teacher_id, current_user().id, stars, comment)
    s.commit()
    return redirect(url_for("teachers.teacher_detail", teacher_id=teacher_id))
