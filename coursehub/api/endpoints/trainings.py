# coursehub/api/endpoints/trainings.py
from typing import List, Optional

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from coursehub.core.exceptions import NotFoundError
from coursehub.core.security import get_current_admin
from coursehub.db.session import get_db
from coursehub.models.user import User
from coursehub.schemas.auth import MessageResponse
from coursehub.schemas.training import (
    TrainingCreate,
    TrainingCreated,
    TrainingDetail,
    TrainingPublic,
    TrainingUpdate,
    TrainingUpdated,
)
from coursehub.services import training_service

router = APIRouter(prefix="/training", tags=["trainings"])


def _get_or_404(db: Session, training_id: int):
    training = training_service.get_training(db, training_id)
    if not training:
        raise NotFoundError("Training not found")
    return training


@router.post("/", response_model=TrainingCreated, status_code=status.HTTP_201_CREATED)
def create_training(
    obj_in: TrainingCreate,
    db: Session = Depends(get_db),
    current_admin: User = Depends(get_current_admin),
):
    training = training_service.create_training(db, obj_in=obj_in)
    return TrainingCreated(
        message="Training created successfully",
        training=TrainingDetail.model_validate(training),
    )


@router.get("/", response_model=List[TrainingPublic])
def list_trainings(
    db: Session = Depends(get_db),
    search: Optional[str] = None,
    category_id: Optional[int] = None,
    level: Optional[str] = None,
):
    """
    公开课程目录，可按关键字 / 分类 / 难度过滤。
    """
    return training_service.list_trainings(
        db, search=search, category_id=category_id, level=level
    )


@router.get("/category/{category_id}", response_model=List[TrainingPublic])
def list_trainings_by_category(category_id: int, db: Session = Depends(get_db)):
    return training_service.list_trainings_by_category(db, category_id)


@router.get("/{training_id}", response_model=TrainingDetail)
def get_training(training_id: int, db: Session = Depends(get_db)):
    return _get_or_404(db, training_id)


@router.put("/{training_id}", response_model=TrainingUpdated)
def update_training(
    training_id: int,
    obj_in: TrainingUpdate,
    db: Session = Depends(get_db),
    current_admin: User = Depends(get_current_admin),
):
    training = _get_or_404(db, training_id)
    training = training_service.update_training(db, db_obj=training, obj_in=obj_in)
    return TrainingUpdated(
        message="Training updated successfully",
        training=TrainingDetail.model_validate(training),
    )


@router.delete("/{training_id}", response_model=MessageResponse)
def delete_training(
    training_id: int,
    db: Session = Depends(get_db),
    current_admin: User = Depends(get_current_admin),
):
    training = _get_or_404(db, training_id)
    training_service.delete_training(db, db_obj=training)
    return MessageResponse(message="Training deleted successfully")
