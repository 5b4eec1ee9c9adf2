from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from sqlalchemy import func

from app.teachrate.errors import TeacherNotFound
from app.teachrate.models import User
from app.teachrate.modules.ratings.models import Rating
from app.teachrate.modules.teachers.models import Teacher

if TYPE_CHECKING:
    from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TeacherListing:
    teacher: Teacher
    average_stars: float | None


def list_teachers(s: "Session") -> list[TeacherListing]:
    """All teachers in id order, each with its average stars (None when unrated)."""
    rows = (
        s.query(Teacher, func.avg(Rating.stars))
        .outerjoin(Rating, Rating.teacher_id == Teacher.id)
        .group_by(Teacher.id)
        .order_by(Teacher.id.asc())
        .all()
    )
    return [
        TeacherListing(teacher=t, average_stars=float(avg) if avg is not None else None)
        for t, avg in rows
    ]


def get_teacher(s: "Session", teacher_id: int) -> Teacher | None:
    return s.get(Teacher, teacher_id)


def _require_teacher(s: "Session", teacher_id: int) -> Teacher:
    teacher = get_teacher(s, teacher_id)
    if teacher is None:
        raise TeacherNotFound(teacher_id)
    return teacher


def create_teacher(s: "Session", name: str, description: str, image: str | None = None) -> Teacher:
    teacher = Teacher(name=name, description=description, image=image)
    s.add(teacher)
    s.flush()
    logger.info("Teacher created id=%s name=%s", teacher.id, teacher.name)
    return teacher


def update_teacher(
    s: "Session",
    teacher_id: int,
    name: str,
    description: str,
    image: str | None = None,
) -> Teacher:
    """Update name and description; the image is replaced only when a new one is given."""
    teacher = _require_teacher(s, teacher_id)
    teacher.name = name
    teacher.description = description
    if image is not None:
        teacher.image = image
    s.flush()
    logger.info("Teacher updated id=%s image_replaced=%s", teacher.id, image is not None)
    return teacher


def delete_teacher(s: "Session", teacher_id: int) -> None:
    """Delete a teacher. Its ratings stay behind with a dangling teacher_id."""
    teacher = _require_teacher(s, teacher_id)
    s.delete(teacher)
    s.flush()
    logger.info("Teacher deleted id=%s", teacher_id)


def list_users(s: "Session") -> list[User]:
    return s.query(User).order_by(User.id.asc()).all()
