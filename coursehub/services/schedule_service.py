# coursehub/services/schedule_service.py
from typing import List, Optional

from sqlalchemy.orm import Session, joinedload

from coursehub.core.dates import as_utc
from coursehub.core.exceptions import ConflictError, NotFoundError, ValidationFailed, field_error
from coursehub.models.enrollment import Enrollment
from coursehub.models.training import Training
from coursehub.models.training_schedule import TrainingSchedule
from coursehub.schemas.training_schedule import TrainingScheduleCreate, TrainingScheduleUpdate


def _schedule_query(db: Session):
    return db.query(TrainingSchedule).options(
        joinedload(TrainingSchedule.training).joinedload(Training.category)
    )


def _require_training(db: Session, training_id: int) -> Training:
    training = db.get(Training, training_id)
    if training is None:
        raise NotFoundError("Training not found")
    return training


def create_schedule(db: Session, *, obj_in: TrainingScheduleCreate) -> TrainingSchedule:
    if obj_in.training_id is None:
        raise ValidationFailed(
            "Training ID is missing",
            errors=[field_error("training_id", "Training ID is missing")],
        )
    _require_training(db, obj_in.training_id)

    db_obj = TrainingSchedule(
        training_id=obj_in.training_id,
        start_date=obj_in.start_date,
        end_date=obj_in.end_date,
        capacity=obj_in.capacity,
    )
    db.add(db_obj)
    db.commit()
    return get_schedule(db, db_obj.id)


def get_schedule(db: Session, schedule_id: int) -> Optional[TrainingSchedule]:
    return _schedule_query(db).filter(TrainingSchedule.id == schedule_id).first()


def list_schedules(db: Session) -> List[TrainingSchedule]:
    return _schedule_query(db).order_by(TrainingSchedule.start_date).all()


def list_schedules_for_training(db: Session, training_id: int) -> List[TrainingSchedule]:
    schedules = (
        _schedule_query(db)
        .filter(TrainingSchedule.training_id == training_id)
        .order_by(TrainingSchedule.start_date)
        .all()
    )
    if not schedules:
        raise NotFoundError("No schedules found for this training")
    return schedules


def update_schedule(
    db: Session,
    *,
    db_obj: TrainingSchedule,
    obj_in: TrainingScheduleUpdate,
) -> TrainingSchedule:
    update_data = obj_in.model_dump(exclude_unset=True)
    if update_data.get("training_id") is not None:
        _require_training(db, update_data["training_id"])
    else:
        update_data.pop("training_id", None)

    for field, value in update_data.items():
        setattr(db_obj, field, value)

    if as_utc(db_obj.end_date) < as_utc(db_obj.start_date):
        db.rollback()
        raise ValidationFailed(
            "Validation failed",
            errors=[field_error("end_date", "End date must not be before start date")],
        )

    db.add(db_obj)
    db.commit()
    return get_schedule(db, db_obj.id)


def delete_schedule(db: Session, *, db_obj: TrainingSchedule) -> None:
    enrolled = (
        db.query(Enrollment.id).filter(Enrollment.training_schedule_id == db_obj.id).first()
    )
    if enrolled:
        raise ConflictError("Cannot delete a schedule that has enrollments")
    db.delete(db_obj)
    db.commit()
