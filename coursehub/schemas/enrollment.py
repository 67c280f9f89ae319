# coursehub/schemas/enrollment.py
from datetime import datetime

from pydantic import BaseModel, field_validator

from coursehub.schemas.training_schedule import TrainingScheduleDetail


class EnrollmentBase(BaseModel):
    fullname: str
    email: str
    phone: str | None = None
    address: str | None = None


class EnrollmentCreate(EnrollmentBase):
    training_schedule_id: int

    @field_validator("fullname", "email")
    @classmethod
    def not_blank(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("Field is required")
        return v.strip()


class EnrollmentStatusUpdate(BaseModel):
    status: str

    @field_validator("status")
    @classmethod
    def status_not_blank(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("Status is required")
        return v.strip().lower()


class EnrollmentPublic(EnrollmentBase):
    id: int
    training_schedule_id: int
    enrollment_date: datetime | None = None
    status: str

    model_config = {"from_attributes": True}


class EnrollmentDetail(EnrollmentPublic):
    training_schedule: TrainingScheduleDetail | None = None


class EnrollmentCreated(BaseModel):
    message: str
    enrollment: EnrollmentDetail


class EnrollmentStatusUpdated(BaseModel):
    message: str
    enrollment: EnrollmentDetail
