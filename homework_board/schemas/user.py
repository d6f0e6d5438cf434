"""User 요청/응답 계약을 위한 Pydantic 스키마입니다."""

from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime


class ExternalIdentity(BaseModel):
    """외부 인증 제공자가 넘겨주는 로그인 사용자 정보"""

    subject_id: str = Field(..., min_length=1, max_length=64)
    email: str = Field(..., min_length=3, max_length=255)
    name: str = Field(..., min_length=1, max_length=100)
    profile_image: Optional[str] = None
    google_id: Optional[str] = None


class UserOut(BaseModel):
    id: str
    email: str
    name: str
    profile_image: Optional[str] = None
    role: str
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class UserSummary(BaseModel):
    id: str
    name: str
    profile_image: Optional[str] = None

    model_config = {"from_attributes": True}


class UserProfileUpdate(BaseModel):
    name: Optional[str] = Field(None, max_length=100)
    profile_image: Optional[str] = Field(None, max_length=500)


class LoginResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    registered: bool
    user: Optional[UserOut] = None


class VerificationRequest(BaseModel):
    name: str
    phone: str


class VerificationStatusOut(BaseModel):
    user_id: str
    registered: bool
    is_verified: bool
    is_admin: bool
