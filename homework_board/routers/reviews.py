"""Homework Reviews 기능 API 라우터입니다. 관리자 전용 과제 평가를 제공합니다."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List

from homework_board.database import get_db
from homework_board.middleware.auth_middleware import get_current_user, require_roles
from homework_board.models.user import User
from homework_board.schemas.homework_review import (
    HomeworkReviewOut,
    HomeworkReviewStatusOut,
    HomeworkReviewSubmit,
    UserWeeklyReviewRow,
)
from homework_board.services import review_service
from homework_board.utils.weeks import Week

router = APIRouter(prefix="/api/reviews", tags=["reviews"])


@router.put("", response_model=HomeworkReviewOut)
def submit_review(
    data: HomeworkReviewSubmit,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return review_service.submit_review(db, data.user_id, data.week, data.status, current_user)


@router.delete("/{user_id}/{week}")
def delete_review(
    user_id: str,
    week: Week,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    deleted = review_service.delete_review(db, user_id, week, current_user)
    return {"deleted": deleted}


@router.get("/matrix", response_model=List[UserWeeklyReviewRow])
def review_matrix(
    db: Session = Depends(get_db),
    _current_user: User = Depends(require_roles("admin")),
):
    return review_service.get_review_matrix(db)


@router.get("/{user_id}/{week}", response_model=HomeworkReviewStatusOut)
def get_review_status(
    user_id: str,
    week: Week,
    db: Session = Depends(get_db),
    _current_user: User = Depends(require_roles("admin")),
):
    return {"user_id": user_id, "week": week.value, "status": review_service.get_status(db, user_id, week)}
