from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from sqlalchemy import func

from app.teachrate.models import User
from app.teachrate.modules.ratings.models import Rating

if TYPE_CHECKING:
    from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RatingEntry:
    rating: Rating
    username: str


def add_rating(s: "Session", teacher_id: int, user_id: int, stars: int, comment: str) -> Rating:
    """Record a rating. Stars and comment are stored exactly as given."""
    rating = Rating(teacher_id=teacher_id, user_id=user_id, stars=stars, comment=comment)
    s.add(rating)
    s.flush()
    logger.info("Rating added id=%s teacher_id=%s user_id=%s stars=%s", rating.id, teacher_id, user_id, stars)
    return rating


def list_for_teacher(s: "Session", teacher_id: int) -> list[RatingEntry]:
    rows = (
        s.query(Rating, User.username)
        .join(User, User.id == Rating.user_id)
        .filter(Rating.teacher_id == teacher_id)
        .order_by(Rating.id.asc())
        .all()
    )
    return [RatingEntry(rating=r, username=username) for r, username in rows]


def average_for(s: "Session", teacher_id: int) -> float | None:
    """Mean of all stars for a teacher, or None when nobody has rated them yet."""
    avg = s.query(func.avg(Rating.stars)).filter(Rating.teacher_id == teacher_id).scalar()
    return float(avg) if avg is not None else None
