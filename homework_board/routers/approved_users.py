"""Approved Users 기능 API 라우터입니다. 관리자 전용 사전 승인 명단 관리를 제공합니다."""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from homework_board.database import get_db
from homework_board.middleware.auth_middleware import require_roles
from homework_board.models.user import User
from homework_board.schemas.approved_user import (
    ApprovedUserCreate,
    ApprovedUserDeleteResult,
    ApprovedUserListItem,
    ApprovedUserPage,
    ApprovedUserStats,
    ApprovedUserUpdate,
    BulkApprovedUserRequest,
    BulkInsertResult,
    BulkPasteRequest,
    BulkValidationResult,
    VerifiedFilter,
)
from homework_board.services import approved_user_service

router = APIRouter(prefix="/api/approved-users", tags=["approved-users"])


@router.get("", response_model=ApprovedUserPage)
def list_approved_users(
    search: str | None = Query(None, max_length=100),
    is_verified: VerifiedFilter = "all",
    page: int = Query(0, ge=0),
    db: Session = Depends(get_db),
    _current_user: User = Depends(require_roles("admin")),
):
    return approved_user_service.list_approved_users(db, search=search, is_verified=is_verified, page=page)


@router.get("/stats", response_model=ApprovedUserStats)
def get_stats(
    db: Session = Depends(get_db),
    _current_user: User = Depends(require_roles("admin")),
):
    return approved_user_service.get_stats(db)


@router.post("", response_model=ApprovedUserListItem)
def create_approved_user(
    data: ApprovedUserCreate,
    db: Session = Depends(get_db),
    _current_user: User = Depends(require_roles("admin")),
):
    row = approved_user_service.create_approved_user(db, data)
    return approved_user_service.to_list_item(row)


@router.put("/{approved_user_id}", response_model=ApprovedUserListItem)
def update_approved_user(
    approved_user_id: int,
    data: ApprovedUserUpdate,
    db: Session = Depends(get_db),
    _current_user: User = Depends(require_roles("admin")),
):
    row = approved_user_service.update_approved_user(db, approved_user_id, data)
    return approved_user_service.to_list_item(row)


@router.delete("/{approved_user_id}", response_model=ApprovedUserDeleteResult)
def delete_approved_user(
    approved_user_id: int,
    db: Session = Depends(get_db),
    _current_user: User = Depends(require_roles("admin")),
):
    return approved_user_service.delete_approved_user(db, approved_user_id)


@router.post("/bulk/validate", response_model=BulkValidationResult)
def validate_bulk(
    data: BulkApprovedUserRequest,
    db: Session = Depends(get_db),
    _current_user: User = Depends(require_roles("admin")),
):
    results = approved_user_service.validate_bulk_rows(db, data.rows)
    return approved_user_service.summarize_validation(results)


@router.post("/bulk", response_model=BulkInsertResult)
def bulk_insert(
    data: BulkApprovedUserRequest,
    db: Session = Depends(get_db),
    _current_user: User = Depends(require_roles("admin")),
):
    return approved_user_service.bulk_insert_approved_users(db, data.rows)


@router.post("/bulk/paste", response_model=BulkInsertResult)
def bulk_paste(
    data: BulkPasteRequest,
    db: Session = Depends(get_db),
    _current_user: User = Depends(require_roles("admin")),
):
    rows = approved_user_service.parse_pasted_rows(data.text)
    return approved_user_service.bulk_insert_approved_users(db, rows)
