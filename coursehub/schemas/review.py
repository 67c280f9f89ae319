# coursehub/schemas/review.py
from datetime import datetime

from pydantic import BaseModel


# 字段全部可选：范围/必填由 review_service.validate_review 统一检查，
# 这样错误能以字段列表的形式返回。
class ReviewCreate(BaseModel):
    training_id: int | None = None
    user_email: str | None = None
    user_phone: str | None = None
    stars: int | None = None
    description: str | None = None


class ReviewUpdate(BaseModel):
    user_email: str | None = None
    user_phone: str | None = None
    stars: int | None = None
    description: str | None = None


class ReviewPublic(BaseModel):
    id: int
    training_id: int
    user_email: str
    user_phone: str
    stars: int
    description: str | None = None
    created_at: datetime | None = None

    model_config = {"from_attributes": True}


class ReviewCreated(BaseModel):
    message: str
    review_id: int


class TrainingRating(BaseModel):
    average_rating: float
    review_count: int


class ReviewUpdated(BaseModel):
    message: str
    review: ReviewPublic
