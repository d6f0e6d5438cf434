"""Approved User 도메인의 SQLAlchemy 모델 정의입니다."""

from sqlalchemy import Column, Integer, String, Boolean, DateTime, ForeignKey, Index
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from homework_board.database import Base


class ApprovedUser(Base):
    __tablename__ = "approved_users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), nullable=False)
    phone = Column(String(11), nullable=False)  # 숫자만 저장 (10~11자리)
    is_verified = Column(Boolean, default=False, nullable=False)
    user_id = Column(String(64), ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    user = relationship("User", back_populates="approved_entry")

    # (name, phone) 중복은 쓰기 시점의 존재 확인으로 막는다.
    __table_args__ = (
        Index("idx_approved_user_name_phone", "name", "phone"),
        Index("idx_approved_user_user", "user_id"),
    )
