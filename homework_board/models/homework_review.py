"""Homework Review 도메인의 SQLAlchemy 모델 정의입니다."""

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.sql import func
from homework_board.database import Base


class HomeworkReview(Base):
    __tablename__ = "homework_reviews"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String(64), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    week = Column(String(30), nullable=False)
    status = Column(String(20), nullable=False)  # passed/failed
    reviewer_id = Column(String(64), ForeignKey("users.id"), nullable=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    __table_args__ = (
        UniqueConstraint("user_id", "week", name="uq_homework_review_user_week"),
    )
