# coursehub/api/endpoints/training_schedules.py
from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from coursehub.core.exceptions import NotFoundError
from coursehub.core.security import get_current_admin
from coursehub.db.session import get_db
from coursehub.models.user import User
from coursehub.schemas.auth import MessageResponse
from coursehub.schemas.training_schedule import (
    TrainingScheduleCreate,
    TrainingScheduleDetail,
    TrainingScheduleUpdate,
    TrainingScheduleUpdated,
)
from coursehub.services import schedule_service

router = APIRouter(prefix="/training-schedules", tags=["training-schedules"])


def _get_or_404(db: Session, schedule_id: int):
    schedule = schedule_service.get_schedule(db, schedule_id)
    if not schedule:
        raise NotFoundError("Training schedule not found")
    return schedule


@router.post("/", response_model=TrainingScheduleDetail, status_code=status.HTTP_201_CREATED)
def create_schedule(
    obj_in: TrainingScheduleCreate,
    db: Session = Depends(get_db),
    current_admin: User = Depends(get_current_admin),
):
    return schedule_service.create_schedule(db, obj_in=obj_in)


@router.get("/", response_model=List[TrainingScheduleDetail])
def list_schedules(db: Session = Depends(get_db)):
    return schedule_service.list_schedules(db)


@router.get("/training/{training_id}", response_model=List[TrainingScheduleDetail])
def list_schedules_for_training(training_id: int, db: Session = Depends(get_db)):
    return schedule_service.list_schedules_for_training(db, training_id)


@router.get("/{schedule_id}", response_model=TrainingScheduleDetail)
def get_schedule(schedule_id: int, db: Session = Depends(get_db)):
    return _get_or_404(db, schedule_id)


@router.put("/{schedule_id}", response_model=TrainingScheduleUpdated)
def update_schedule(
    schedule_id: int,
    obj_in: TrainingScheduleUpdate,
    db: Session = Depends(get_db),
    current_admin: User = Depends(get_current_admin),
):
    schedule = _get_or_404(db, schedule_id)
    schedule = schedule_service.update_schedule(db, db_obj=schedule, obj_in=obj_in)
    return TrainingScheduleUpdated(
        message="Training schedule updated successfully",
        training_schedule=TrainingScheduleDetail.model_validate(schedule),
    )


@router.delete("/{schedule_id}", response_model=MessageResponse)
def delete_schedule(
    schedule_id: int,
    db: Session = Depends(get_db),
    current_admin: User = Depends(get_current_admin),
):
    schedule = _get_or_404(db, schedule_id)
    schedule_service.delete_schedule(db, db_obj=schedule)
    return MessageResponse(message="Training schedule deleted successfully")
