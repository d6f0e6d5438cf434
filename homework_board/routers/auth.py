"""Auth 기능 API 라우터입니다. 외부 로그인, 사전 승인 인증, 인증 상태 조회를 제공합니다."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from homework_board.database import get_db
from homework_board.schemas.user import (
    ExternalIdentity,
    LoginResponse,
    UserOut,
    VerificationRequest,
    VerificationStatusOut,
)
from homework_board.services.auth_service import mock_oauth_login
from homework_board.services import verification_service
from homework_board.middleware.auth_middleware import get_current_identity, get_current_user
from homework_board.models.user import User

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post("/login", response_model=LoginResponse)
def login(identity: ExternalIdentity, db: Session = Depends(get_db)):
    token, user = mock_oauth_login(db, identity)
    return LoginResponse(
        access_token=token,
        registered=user is not None,
        user=UserOut.model_validate(user) if user else None,
    )


@router.post("/logout")
def logout(_identity: ExternalIdentity = Depends(get_current_identity)):
    return {"message": "로그아웃 되었습니다."}


@router.get("/me", response_model=UserOut)
def me(current_user: User = Depends(get_current_user)):
    return current_user


@router.post("/verify", response_model=UserOut)
def verify(
    data: VerificationRequest,
    identity: ExternalIdentity = Depends(get_current_identity),
    db: Session = Depends(get_db),
):
    return verification_service.verify_approved_user(db, data.name, data.phone, identity)


@router.get("/verification-status", response_model=VerificationStatusOut)
def verification_status(
    identity: ExternalIdentity = Depends(get_current_identity),
    db: Session = Depends(get_db),
):
    return verification_service.get_verification_status(db, identity)
