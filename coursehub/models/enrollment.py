# coursehub/models/enrollment.py
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from coursehub.db.base import Base


class Enrollment(Base):
    __tablename__ = "enrollments"

    id = Column(Integer, primary_key=True, index=True)

    fullname = Column(String(200), nullable=False)
    email = Column(String(255), nullable=False, index=True)
    phone = Column(String(50), nullable=True)
    address = Column(String(255), nullable=True)

    training_schedule_id = Column(
        Integer, ForeignKey("training_schedules.id"), nullable=False, index=True
    )

    enrollment_date = Column(DateTime(timezone=True), server_default=func.now())
    # 状态：active / pending / completed / cancelled（管理员修改）
    status = Column(String(20), nullable=False, default="active", index=True)

    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
    )

    training_schedule = relationship("TrainingSchedule", back_populates="enrollments")
