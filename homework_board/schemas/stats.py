"""관리자 통계/리포트 응답 스키마입니다."""

from pydantic import BaseModel
from typing import Optional


class OverviewStats(BaseModel):
    users: int
    posts: int
    comments: int
    hearts: int


class LabelCount(BaseModel):
    label: str
    count: int


class UserWeeklyPostStatus(BaseModel):
    id: str
    name: str
    email: str
    profile_image: Optional[str] = None
    approved_name: Optional[str] = None
    approved_phone: Optional[str] = None
    weekly_posts: dict[str, list[int]]
