"""Post/Comment/Heart 요청/응답 계약을 위한 Pydantic 스키마입니다."""

from pydantic import BaseModel, Field
from typing import Literal, Optional
from datetime import datetime

from homework_board.schemas.user import UserSummary
from homework_board.utils.weeks import Week


PostSort = Literal["latest", "popular"]


class PostCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    content: str = ""
    week: Week
    image_url: str = Field(..., min_length=1, max_length=500)


class PostUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    content: Optional[str] = None
    week: Optional[Week] = None
    image_url: Optional[str] = Field(None, min_length=1, max_length=500)


class PostOut(BaseModel):
    id: int
    user_id: str
    title: str
    content: str
    week: str
    image_url: str
    heart_count: int
    comment_count: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    author: Optional[UserSummary] = None
    is_liked: bool = False
    is_own: bool = False

    model_config = {"from_attributes": True}


class PostPage(BaseModel):
    items: list[PostOut]
    total: int


class CommentCreate(BaseModel):
    content: str = Field(..., min_length=1)


class CommentUpdate(BaseModel):
    content: str = Field(..., min_length=1)


class CommentOut(BaseModel):
    id: int
    post_id: int
    user_id: str
    content: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    author: Optional[UserSummary] = None
    is_own: bool = False

    model_config = {"from_attributes": True}


class PostDetailOut(PostOut):
    comments: list[CommentOut] = []


class HeartToggleOut(BaseModel):
    post_id: int
    liked: bool
    heart_count: int
