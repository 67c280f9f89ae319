# coursehub/services/training_service.py
import json
import logging
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, List, Optional, Tuple

from sqlalchemy import or_
from sqlalchemy.orm import Session, joinedload, selectinload

from coursehub.core.exceptions import ConflictError, NotFoundError, ValidationFailed, field_error
from coursehub.models.category import Category
from coursehub.models.enrollment import Enrollment
from coursehub.models.review import Review
from coursehub.models.training import Training
from coursehub.models.training_schedule import TrainingSchedule
from coursehub.schemas.training import ScheduleInput, TrainingCreate, TrainingUpdate

logger = logging.getLogger(__name__)

_CENTS = Decimal("0.01")

# fields never patched directly onto the row
_UPDATE_EXCLUDED = {"id", "category_id", "schedules", "fee", "discount_percentage", "what_you_will_learn"}


def compute_pricing(
    fee: Optional[Decimal], discount: Optional[Decimal]
) -> Tuple[Optional[Decimal], Optional[Decimal], Optional[Decimal]]:
    """
    Returns ``(fee, original_fee, discount_percentage)``.

    ``fee`` is what the customer pays; with a discount it is
    ``original * (100 - discount) / 100`` rounded half-up to cents.
    """
    if fee is None:
        return None, None, discount
    original = Decimal(fee)
    if not discount:
        return original, original, discount
    discounted = (original * (Decimal(100) - Decimal(discount)) / Decimal(100)).quantize(
        _CENTS, rounding=ROUND_HALF_UP
    )
    return discounted, original, Decimal(discount)


def serialize_learning_points(value: Any) -> str:
    if value is None:
        items = []
    elif isinstance(value, (list, tuple)):
        items = list(value)
    else:
        items = [value]
    return json.dumps(items)


def _training_query(db: Session):
    return db.query(Training).options(
        joinedload(Training.category),
        selectinload(Training.schedules),
    )


def _add_schedules(db: Session, training: Training, schedules: List[ScheduleInput]) -> None:
    for item in schedules:
        db.add(
            TrainingSchedule(
                training=training,
                start_date=item.start_date,
                end_date=item.end_date,
                capacity=item.capacity,
            )
        )


def create_training(db: Session, *, obj_in: TrainingCreate) -> Training:
    if obj_in.category_id is None:
        raise ValidationFailed(
            "Category ID is required",
            errors=[field_error("category_id", "Category ID is required")],
        )
    category = db.get(Category, obj_in.category_id)
    if category is None:
        raise NotFoundError("Category not found")

    fee, original_fee, discount = compute_pricing(obj_in.fee, obj_in.discount_percentage)
    data = obj_in.model_dump(
        exclude={"category_id", "schedules", "fee", "discount_percentage", "what_you_will_learn"}
    )
    db_obj = Training(
        **data,
        fee=fee,
        original_fee=original_fee,
        discount_percentage=discount,
        what_you_will_learn=serialize_learning_points(obj_in.what_you_will_learn),
        category=category,
    )
    db.add(db_obj)
    if obj_in.schedules:
        _add_schedules(db, db_obj, obj_in.schedules)
    db.commit()
    logger.info(f"Created training {db_obj.id} in category {category.id}")
    return get_training(db, db_obj.id)


def get_training(db: Session, training_id: int) -> Optional[Training]:
    return _training_query(db).filter(Training.id == training_id).first()


def list_trainings(
    db: Session,
    *,
    search: Optional[str] = None,
    category_id: Optional[int] = None,
    level: Optional[str] = None,
) -> List[Training]:
    query = _training_query(db)
    if search:
        pattern = f"%{search.strip()}%"
        query = query.filter(
            or_(Training.title.ilike(pattern), Training.description.ilike(pattern))
        )
    if category_id is not None:
        query = query.filter(Training.category_id == category_id)
    if level:
        query = query.filter(Training.level.ilike(level))
    return query.order_by(Training.created_at.desc(), Training.id.desc()).all()


def list_trainings_by_category(db: Session, category_id: int) -> List[Training]:
    return list_trainings(db, category_id=category_id)


def update_training(db: Session, *, db_obj: Training, obj_in: TrainingUpdate) -> Training:
    update_data = obj_in.model_dump(exclude_unset=True)

    # validate before touching db_obj
    category = None
    if update_data.get("category_id") is not None:
        category = db.get(Category, update_data["category_id"])
        if category is None:
            raise NotFoundError("Category not found")
    if obj_in.schedules is not None:
        _ensure_no_enrollments(db, db_obj.id)

    for field, value in update_data.items():
        if field in _UPDATE_EXCLUDED:
            continue
        setattr(db_obj, field, value)

    if category is not None:
        db_obj.category = category

    if "fee" in update_data or "discount_percentage" in update_data:
        base_fee = update_data.get("fee", db_obj.original_fee)
        discount = update_data.get("discount_percentage", db_obj.discount_percentage)
        db_obj.fee, db_obj.original_fee, db_obj.discount_percentage = compute_pricing(
            base_fee, discount
        )

    if "what_you_will_learn" in update_data:
        db_obj.what_you_will_learn = serialize_learning_points(update_data["what_you_will_learn"])

    if obj_in.schedules is not None:
        # full replacement
        db.query(TrainingSchedule).filter(TrainingSchedule.training_id == db_obj.id).delete(
            synchronize_session="fetch"
        )
        db.expire(db_obj, ["schedules"])
        _add_schedules(db, db_obj, obj_in.schedules)

    db.add(db_obj)
    db.commit()
    return get_training(db, db_obj.id)


def _ensure_no_enrollments(db: Session, training_id: int) -> None:
    enrolled = (
        db.query(Enrollment.id)
        .join(TrainingSchedule, Enrollment.training_schedule_id == TrainingSchedule.id)
        .filter(TrainingSchedule.training_id == training_id)
        .first()
    )
    if enrolled:
        raise ConflictError("Training has enrollments on its schedules")


def delete_training(db: Session, *, db_obj: Training) -> None:
    """Remove schedules and reviews first, then the training itself."""
    training_id = db_obj.id
    _ensure_no_enrollments(db, training_id)
    db.query(TrainingSchedule).filter(TrainingSchedule.training_id == training_id).delete(
        synchronize_session="fetch"
    )
    db.query(Review).filter(Review.training_id == training_id).delete(synchronize_session="fetch")
    db.expire(db_obj, ["schedules", "reviews"])
    db.delete(db_obj)
    db.commit()
    logger.info(f"Deleted training {training_id} with its schedules and reviews")
