"""Users 기능 API 라우터입니다. 요청을 검증하고 서비스 레이어로 비즈니스 로직을 위임합니다."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List

from homework_board.database import get_db
from homework_board.middleware.auth_middleware import get_current_user, require_roles
from homework_board.models.user import User
from homework_board.schemas.user import UserOut, UserProfileUpdate
from homework_board.services import user_service

router = APIRouter(prefix="/api/users", tags=["users"])


@router.get("", response_model=List[UserOut])
def list_users(
    role: str | None = None,
    db: Session = Depends(get_db),
    _current_user: User = Depends(require_roles("admin")),
):
    return user_service.list_users(db, role=role)


@router.get("/me", response_model=UserOut)
def get_profile(current_user: User = Depends(get_current_user)):
    return current_user


@router.patch("/me", response_model=UserOut)
def update_profile(
    data: UserProfileUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return user_service.update_profile(db, current_user, data)


@router.get("/{user_id}", response_model=UserOut)
def get_user(
    user_id: str,
    db: Session = Depends(get_db),
    _current_user: User = Depends(require_roles("admin")),
):
    return user_service.get_user(db, user_id)
