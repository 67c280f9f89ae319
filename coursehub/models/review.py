# coursehub/models/review.py
from sqlalchemy import CheckConstraint, Column, Integer, String, Text, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from coursehub.db.base import Base


class Review(Base):
    __tablename__ = "reviews"
    __table_args__ = (
        CheckConstraint("stars >= 1 AND stars <= 5", name="ck_reviews_stars_range"),
    )

    id = Column(Integer, primary_key=True, index=True)
    training_id = Column(Integer, ForeignKey("trainings.id"), nullable=False, index=True)

    user_email = Column(String(255), nullable=False)
    user_phone = Column(String(50), nullable=False)
    stars = Column(Integer, nullable=False)
    description = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    training = relationship("Training", back_populates="reviews")
