# coursehub/services/enrollment_service.py
import logging
from typing import List, Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session, joinedload

from coursehub.core.exceptions import NotFoundError
from coursehub.models.enrollment import Enrollment
from coursehub.models.training import Training
from coursehub.models.training_schedule import TrainingSchedule
from coursehub.schemas.enrollment import EnrollmentCreate

logger = logging.getLogger(__name__)


def _enrollment_query(db: Session):
    return db.query(Enrollment).options(
        joinedload(Enrollment.training_schedule)
        .joinedload(TrainingSchedule.training)
        .joinedload(Training.category)
    )


def create_enrollment(db: Session, *, obj_in: EnrollmentCreate) -> Enrollment:
    schedule = db.get(TrainingSchedule, obj_in.training_schedule_id)
    if schedule is None:
        raise NotFoundError("Training schedule not found")

    db_obj = Enrollment(
        fullname=obj_in.fullname,
        email=obj_in.email,
        phone=obj_in.phone,
        address=obj_in.address,
        training_schedule_id=schedule.id,
    )
    db.add(db_obj)
    db.commit()
    db.refresh(db_obj)
    logger.info(f"Enrollment {db_obj.id} created for schedule {schedule.id}")
    return db_obj


def get_enrollment(db: Session, enrollment_id: int) -> Optional[Enrollment]:
    """Enrollment with its schedule and training loaded."""
    return _enrollment_query(db).filter(Enrollment.id == enrollment_id).first()


def list_enrollments(
    db: Session,
    *,
    search: Optional[str] = None,
    status: Optional[str] = None,
) -> List[Enrollment]:
    query = _enrollment_query(db)
    if search:
        pattern = f"%{search.strip()}%"
        query = query.filter(
            or_(Enrollment.fullname.ilike(pattern), Enrollment.email.ilike(pattern))
        )
    if status:
        query = query.filter(Enrollment.status == status.lower())
    return query.order_by(Enrollment.enrollment_date.desc(), Enrollment.id.desc()).all()


def list_enrollments_for_schedule(db: Session, schedule_id: int) -> List[Enrollment]:
    return (
        _enrollment_query(db)
        .filter(Enrollment.training_schedule_id == schedule_id)
        .order_by(Enrollment.enrollment_date.desc(), Enrollment.id.desc())
        .all()
    )


def update_status(db: Session, *, db_obj: Enrollment, status: str) -> Enrollment:
    old_status = db_obj.status
    db_obj.status = status
    db.add(db_obj)
    db.commit()
    logger.info(f"Enrollment {db_obj.id} status {old_status} -> {status}")
    return get_enrollment(db, db_obj.id)


def delete_enrollment(db: Session, *, db_obj: Enrollment) -> None:
    db.delete(db_obj)
    db.commit()
