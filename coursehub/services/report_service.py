# coursehub/services/report_service.py
from decimal import Decimal
from typing import Any, Dict

from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload

from coursehub.core.dates import utcnow
from coursehub.models.category import Category
from coursehub.models.enrollment import Enrollment
from coursehub.models.training import Training
from coursehub.models.training_schedule import TrainingSchedule
from coursehub.models.user import User, UserRole

TOP_TRAININGS_LIMIT = 5
RECENT_ENROLLMENTS_LIMIT = 10


def build_summary(db: Session) -> Dict[str, Any]:
    """Figures behind the admin dashboard and reports pages."""
    total_enrollments = db.query(func.count(Enrollment.id)).scalar() or 0

    by_status = dict(
        db.query(Enrollment.status, func.count(Enrollment.id))
        .group_by(Enrollment.status)
        .all()
    )
    completed = by_status.get("completed", 0)
    completion_rate = (
        round(completed / total_enrollments * 100, 1) if total_enrollments else 0.0
    )

    revenue = (
        db.query(func.coalesce(func.sum(Training.fee), 0))
        .select_from(Enrollment)
        .join(TrainingSchedule, Enrollment.training_schedule_id == TrainingSchedule.id)
        .join(Training, TrainingSchedule.training_id == Training.id)
        .scalar()
    )

    enrollment_count = func.count(Enrollment.id).label("enrollment_count")
    top_rows = (
        db.query(Training.id, Training.title, enrollment_count)
        .join(TrainingSchedule, TrainingSchedule.training_id == Training.id)
        .join(Enrollment, Enrollment.training_schedule_id == TrainingSchedule.id)
        .group_by(Training.id, Training.title)
        .order_by(enrollment_count.desc(), Training.id)
        .limit(TOP_TRAININGS_LIMIT)
        .all()
    )

    recent = (
        db.query(Enrollment)
        .options(joinedload(Enrollment.training_schedule).joinedload(TrainingSchedule.training))
        .order_by(Enrollment.enrollment_date.desc(), Enrollment.id.desc())
        .limit(RECENT_ENROLLMENTS_LIMIT)
        .all()
    )

    return {
        "total_trainings": db.query(func.count(Training.id)).scalar() or 0,
        "total_categories": db.query(func.count(Category.id)).scalar() or 0,
        "total_users": db.query(func.count(User.id)).filter(User.role == UserRole.USER).scalar()
        or 0,
        "total_enrollments": total_enrollments,
        "enrollments_by_status": by_status,
        "active_enrollments": by_status.get("active", 0),
        "completed_enrollments": completed,
        "completion_rate": completion_rate,
        "total_revenue": Decimal(str(revenue or 0)).quantize(Decimal("0.01")),
        "top_trainings": [
            {"training_id": row.id, "title": row.title, "enrollment_count": row.enrollment_count}
            for row in top_rows
        ],
        "recent_enrollments": [
            {
                "id": e.id,
                "fullname": e.fullname,
                "email": e.email,
                "status": e.status,
                "training_title": e.training_schedule.training.title
                if e.training_schedule and e.training_schedule.training
                else None,
                "enrollment_date": e.enrollment_date,
            }
            for e in recent
        ],
        "generated_at": utcnow(),
    }
