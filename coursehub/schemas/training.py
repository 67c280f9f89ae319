# coursehub/schemas/training.py
import json
import logging
import re
from datetime import datetime
from decimal import Decimal
from typing import Any

from pydantic import BaseModel, field_validator, model_validator

from coursehub.core.dates import as_utc
from coursehub.schemas.category import CategoryPublic

logger = logging.getLogger(__name__)

_NON_NUMERIC = re.compile(r"[^0-9.\-]+")


def parse_learning_points(raw: Any) -> list:
    """Stored JSON text -> list; unparsable text is kept as a single item."""
    if raw is None or raw == "":
        return []
    if isinstance(raw, list):
        return raw
    try:
        parsed = json.loads(raw)
    except (TypeError, ValueError):
        logger.warning(f"Failed to parse what_you_will_learn value {raw!r}")
        return [raw]
    return parsed if isinstance(parsed, list) else [parsed]


class ScheduleInput(BaseModel):
    start_date: datetime
    end_date: datetime
    capacity: int | None = None

    @model_validator(mode="after")
    def end_after_start(self):
        if as_utc(self.end_date) < as_utc(self.start_date):
            raise ValueError("End date must not be before start date")
        return self


def _clean_title(v: str | None) -> str:
    if v is None or not v.strip():
        raise ValueError("Title is required")
    return v.strip()


class TrainingBase(BaseModel):
    title: str
    description: str | None = None
    details: str | None = None
    duration: int | None = None
    instructor: str | None = None
    level: str | None = None
    is_certified: bool = False
    address: str | None = None
    start_date: datetime | None = None
    end_date: datetime | None = None


class _FeeInput(BaseModel):
    fee: Decimal | None = None
    discount_percentage: Decimal | None = None
    what_you_will_learn: list[str] | str | None = None

    @field_validator("fee", mode="before")
    @classmethod
    def strip_currency(cls, v: Any) -> Any:
        # "$1,200" -> "1200"
        if isinstance(v, str):
            v = _NON_NUMERIC.sub("", v)
            return v or None
        return v

    @field_validator("discount_percentage")
    @classmethod
    def discount_range(cls, v: Decimal | None) -> Decimal | None:
        if v is not None and not (0 <= v <= 100):
            raise ValueError("Discount percentage must be between 0 and 100")
        return v


class TrainingCreate(TrainingBase, _FeeInput):
    category_id: int | None = None
    schedules: list[ScheduleInput] | None = None

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, v: str) -> str:
        return _clean_title(v)


class TrainingUpdate(_FeeInput):
    title: str | None = None
    description: str | None = None
    details: str | None = None
    duration: int | None = None
    instructor: str | None = None
    level: str | None = None
    is_certified: bool | None = None
    address: str | None = None
    start_date: datetime | None = None
    end_date: datetime | None = None
    category_id: int | None = None
    schedules: list[ScheduleInput] | None = None

    # sent fields only; these columns are NOT NULL
    @field_validator("title")
    @classmethod
    def title_not_blank(cls, v: str | None) -> str:
        return _clean_title(v)

    @field_validator("is_certified")
    @classmethod
    def is_certified_not_null(cls, v: bool | None) -> bool:
        if v is None:
            raise ValueError("is_certified must be true or false")
        return v


class TrainingPublic(TrainingBase):
    id: int
    fee: Decimal | None = None
    original_fee: Decimal | None = None
    discount_percentage: Decimal | None = None
    what_you_will_learn: list = []
    category_id: int | None = None
    category: CategoryPublic | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    model_config = {"from_attributes": True}

    @field_validator("what_you_will_learn", mode="before")
    @classmethod
    def parse_json_text(cls, v: Any) -> list:
        return parse_learning_points(v)


class TrainingScheduleSummary(BaseModel):
    id: int
    start_date: datetime
    end_date: datetime
    capacity: int | None = None

    model_config = {"from_attributes": True}


class TrainingDetail(TrainingPublic):
    schedules: list[TrainingScheduleSummary] = []


class TrainingCreated(BaseModel):
    message: str
    training: TrainingDetail


class TrainingUpdated(BaseModel):
    message: str
    training: TrainingDetail
