# coursehub/schemas/training_schedule.py
from datetime import datetime

from pydantic import BaseModel, field_validator

from coursehub.schemas.training import ScheduleInput, TrainingPublic


class TrainingScheduleBase(BaseModel):
    start_date: datetime
    end_date: datetime
    capacity: int | None = None


class TrainingScheduleCreate(ScheduleInput):
    training_id: int | None = None


class TrainingScheduleUpdate(BaseModel):
    training_id: int | None = None
    start_date: datetime | None = None
    end_date: datetime | None = None
    capacity: int | None = None

    # capacity may be cleared; the dates may not
    @field_validator("start_date", "end_date")
    @classmethod
    def date_not_null(cls, v: datetime | None, info) -> datetime:
        if v is None:
            label = "Start date" if info.field_name == "start_date" else "End date"
            raise ValueError(f"{label} is required")
        return v


class TrainingSchedulePublic(TrainingScheduleBase):
    id: int
    training_id: int

    model_config = {"from_attributes": True}


class TrainingScheduleDetail(TrainingSchedulePublic):
    training: TrainingPublic | None = None


class TrainingScheduleUpdated(BaseModel):
    message: str
    training_schedule: TrainingScheduleDetail
