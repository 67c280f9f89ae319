# coursehub/api/endpoints/reviews.py
from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from coursehub.core.exceptions import NotFoundError
from coursehub.core.security import get_current_admin
from coursehub.db.session import get_db
from coursehub.models.user import User
from coursehub.schemas.auth import MessageResponse
from coursehub.schemas.review import (
    ReviewCreate,
    ReviewCreated,
    ReviewPublic,
    ReviewUpdate,
    ReviewUpdated,
    TrainingRating,
)
from coursehub.services import review_service

router = APIRouter(prefix="/reviews", tags=["reviews"])


def _get_or_404(db: Session, review_id: int):
    review = review_service.get_review(db, review_id)
    if not review:
        raise NotFoundError("Review not found")
    return review


@router.post("/", response_model=ReviewCreated, status_code=status.HTTP_201_CREATED)
def create_review(obj_in: ReviewCreate, db: Session = Depends(get_db)):
    review = review_service.create_review(db, obj_in=obj_in)
    return ReviewCreated(message="Review created successfully", review_id=review.id)


@router.get("/", response_model=List[ReviewPublic])
def list_reviews(db: Session = Depends(get_db)):
    return review_service.list_reviews(db)


@router.get("/training/{training_id}", response_model=List[ReviewPublic])
def list_reviews_for_training(training_id: int, db: Session = Depends(get_db)):
    return review_service.list_reviews_for_training(db, training_id)


@router.get("/training/{training_id}/rating", response_model=TrainingRating)
def get_training_rating(training_id: int, db: Session = Depends(get_db)):
    return review_service.get_training_rating(db, training_id)


@router.get("/{review_id}", response_model=ReviewPublic)
def get_review(review_id: int, db: Session = Depends(get_db)):
    return _get_or_404(db, review_id)


@router.put("/{review_id}", response_model=ReviewUpdated)
def update_review(
    review_id: int,
    obj_in: ReviewUpdate,
    db: Session = Depends(get_db),
    current_admin: User = Depends(get_current_admin),
):
    review = _get_or_404(db, review_id)
    review = review_service.update_review(db, db_obj=review, obj_in=obj_in)
    return ReviewUpdated(
        message="Review updated successfully",
        review=ReviewPublic.model_validate(review),
    )


@router.delete("/{review_id}", response_model=MessageResponse)
def delete_review(
    review_id: int,
    db: Session = Depends(get_db),
    current_admin: User = Depends(get_current_admin),
):
    review = _get_or_404(db, review_id)
    review_service.delete_review(db, db_obj=review)
    return MessageResponse(message="Review deleted successfully")
