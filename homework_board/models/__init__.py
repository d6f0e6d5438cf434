"""SQLAlchemy 모델 패키지 초기화 모듈입니다."""

from homework_board.models.user import User
from homework_board.models.approved_user import ApprovedUser
from homework_board.models.post import Post, Comment, Heart
from homework_board.models.homework_review import HomeworkReview

__all__ = [
    "User",
    "ApprovedUser",
    "Post", "Comment", "Heart",
    "HomeworkReview",
]
