# coursehub/services/review_service.py
import logging
from typing import Any, Dict, List, Optional

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from coursehub.core.exceptions import NotFoundError, ValidationFailed, field_error
from coursehub.models.review import Review
from coursehub.models.training import Training
from coursehub.schemas.review import ReviewCreate, ReviewUpdate

logger = logging.getLogger(__name__)

STARS_CONSTRAINT = "ck_reviews_stars_range"

_REQUIRED = (
    ("training_id", "Training ID is required"),
    ("user_email", "User email is required"),
    ("user_phone", "User phone is required"),
)


def validate_review(payload: Dict[str, Any], partial: bool = False) -> List[Dict[str, str]]:
    """
    Field errors for a review payload.

    With ``partial`` only the keys present are checked (updates); ``stars`` is
    range-checked whenever it is given.
    """
    errors = []
    for field, message in _REQUIRED:
        if partial and field not in payload:
            continue
        value = payload.get(field)
        if value is None or (isinstance(value, str) and not value.strip()):
            errors.append(field_error(field, message))

    if not partial or "stars" in payload:
        stars = payload.get("stars")
        if not isinstance(stars, int) or isinstance(stars, bool) or not 1 <= stars <= 5:
            errors.append(field_error("stars", "Stars must be between 1 and 5"))
    return errors


def _raise_if_invalid(errors: List[Dict[str, str]]) -> None:
    if errors:
        raise ValidationFailed("Validation failed", errors=errors)


def _commit(db: Session) -> None:
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        if STARS_CONSTRAINT not in str(e.orig):
            raise
        raise ValidationFailed(
            "Validation failed",
            errors=[field_error("stars", "Stars must be between 1 and 5")],
        )


def create_review(db: Session, *, obj_in: ReviewCreate) -> Review:
    data = obj_in.model_dump()
    _raise_if_invalid(validate_review(data))
    if db.get(Training, obj_in.training_id) is None:
        raise NotFoundError("Training not found")

    db_obj = Review(**data)
    db.add(db_obj)
    _commit(db)
    db.refresh(db_obj)
    logger.info(f"Review {db_obj.id} added for training {db_obj.training_id}")
    return db_obj


def get_review(db: Session, review_id: int) -> Optional[Review]:
    return db.get(Review, review_id)


def list_reviews(db: Session) -> List[Review]:
    return db.query(Review).order_by(Review.created_at.desc(), Review.id.desc()).all()


def list_reviews_for_training(db: Session, training_id: int) -> List[Review]:
    return (
        db.query(Review)
        .filter(Review.training_id == training_id)
        .order_by(Review.created_at.desc(), Review.id.desc())
        .all()
    )


def get_training_rating(db: Session, training_id: int) -> Dict[str, Any]:
    average, count = (
        db.query(func.avg(Review.stars), func.count(Review.id))
        .filter(Review.training_id == training_id)
        .one()
    )
    return {
        "average_rating": round(float(average), 2) if average is not None else 0,
        "review_count": count or 0,
    }


def update_review(db: Session, *, db_obj: Review, obj_in: ReviewUpdate) -> Review:
    update_data = obj_in.model_dump(exclude_unset=True)
    _raise_if_invalid(validate_review(update_data, partial=True))
    for field, value in update_data.items():
        setattr(db_obj, field, value)
    db.add(db_obj)
    _commit(db)
    db.refresh(db_obj)
    return db_obj


def delete_review(db: Session, *, db_obj: Review) -> None:
    db.delete(db_obj)
    db.commit()
