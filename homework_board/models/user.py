"""User 도메인의 SQLAlchemy 모델 정의입니다."""

from sqlalchemy import Column, String, DateTime
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from homework_board.database import Base


class User(Base):
    __tablename__ = "users"

    # 외부 인증 제공자의 subject id를 그대로 기본 키로 쓴다.
    id = Column(String(64), primary_key=True)
    email = Column(String(255), nullable=False)
    name = Column(String(100), nullable=False)
    profile_image = Column(String(500))
    google_id = Column(String(100))
    role = Column(String(20), nullable=False, default="user")  # user/admin
    created_at = Column(DateTime, server_default=func.now())

    posts = relationship("Post", back_populates="author")
    comments = relationship("Comment", back_populates="author")
    approved_entry = relationship("ApprovedUser", back_populates="user", uselist=False)
