# coursehub/models/training.py
from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from coursehub.db.base import Base


class Training(Base):
    __tablename__ = "trainings"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    details = Column(Text, nullable=True)
    duration = Column(Integer, nullable=True)
    instructor = Column(String(150), nullable=True)

    # fee 是折后价；original_fee 是折前价
    fee = Column(Numeric(10, 2), nullable=True)
    original_fee = Column(Numeric(10, 2), nullable=True)
    discount_percentage = Column(Numeric(5, 2), nullable=True)

    level = Column(String(50), nullable=True, index=True)
    is_certified = Column(Boolean, nullable=False, default=False)
    what_you_will_learn = Column(Text, nullable=True)  # JSON array
    address = Column(String(255), nullable=True)

    category_id = Column(Integer, ForeignKey("categories.id"), nullable=True, index=True)

    start_date = Column(DateTime(timezone=True), nullable=True)
    end_date = Column(DateTime(timezone=True), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
    )

    category = relationship("Category", back_populates="trainings")
    schedules = relationship(
        "TrainingSchedule",
        back_populates="training",
        order_by="TrainingSchedule.start_date",
    )
    reviews = relationship("Review", back_populates="training")
