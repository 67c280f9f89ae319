# coursehub/schemas/report.py
from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel


class TrainingEnrollmentCount(BaseModel):
    training_id: int
    title: str
    enrollment_count: int


class RecentEnrollment(BaseModel):
    id: int
    fullname: str
    email: str
    status: str
    training_title: str | None = None
    enrollment_date: datetime | None = None


class ReportSummary(BaseModel):
    total_trainings: int
    total_categories: int
    total_users: int
    total_enrollments: int
    enrollments_by_status: dict[str, int]
    active_enrollments: int
    completed_enrollments: int
    completion_rate: float
    total_revenue: Decimal
    top_trainings: list[TrainingEnrollmentCount]
    recent_enrollments: list[RecentEnrollment]
    generated_at: datetime
