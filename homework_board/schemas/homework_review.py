"""Homework Review 요청/응답 계약을 위한 Pydantic 스키마입니다."""

from pydantic import BaseModel
from typing import Literal, Optional
from datetime import datetime

from homework_board.utils.weeks import Week


ReviewStatus = Literal["passed", "failed"]
EffectiveReviewStatus = Literal["passed", "failed", "not_reviewed"]


class HomeworkReviewSubmit(BaseModel):
    user_id: str
    week: Week
    status: ReviewStatus


class HomeworkReviewOut(BaseModel):
    id: int
    user_id: str
    week: str
    status: str
    reviewer_id: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class HomeworkReviewStatusOut(BaseModel):
    user_id: str
    week: str
    status: EffectiveReviewStatus


class UserWeeklyReviewRow(BaseModel):
    user_id: str
    user_name: str
    user_email: str
    user_profile_image: Optional[str] = None
    weekly_reviews: dict[str, EffectiveReviewStatus]
