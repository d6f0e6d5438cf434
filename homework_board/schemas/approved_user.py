"""Approved User 요청/응답 계약을 위한 Pydantic 스키마입니다."""

from pydantic import BaseModel, Field
from typing import Literal, Optional
from datetime import datetime


VerifiedFilter = Literal["all", "true", "false"]


class ApprovedUserCreate(BaseModel):
    name: str = Field(..., max_length=100)
    phone: str = Field(..., max_length=30)


class ApprovedUserUpdate(BaseModel):
    name: Optional[str] = Field(None, max_length=100)
    phone: Optional[str] = Field(None, max_length=30)


class ApprovedUserOut(BaseModel):
    id: int
    name: str
    phone: str
    is_verified: bool
    user_id: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class ApprovedUserListItem(ApprovedUserOut):
    phone_display: str


class ApprovedUserPage(BaseModel):
    items: list[ApprovedUserListItem]
    total: int
    page: int
    page_size: int


class ApprovedUserStats(BaseModel):
    total: int
    verified: int
    unverified: int


class ApprovedUserDeleteResult(BaseModel):
    id: int
    was_verified: bool
    unlinked_user_id: Optional[str] = None


class BulkApprovedUserRow(BaseModel):
    name: str = ""
    phone: str = ""


class BulkApprovedUserRequest(BaseModel):
    rows: list[BulkApprovedUserRow]


class BulkPasteRequest(BaseModel):
    text: str


class BulkValidationRow(BaseModel):
    row: int
    name: str
    phone: str
    normalized_phone: Optional[str] = None
    error: Optional[str] = None


class BulkValidationResult(BaseModel):
    rows: list[BulkValidationRow]
    valid: int
    invalid: int


class BulkInsertResult(BaseModel):
    success: int
    failed: int
    errors: list[str]
