"""Verification Service 도메인 서비스 레이어입니다.

외부 인증을 마친 계정을 사전 승인 명단의 한 행에 한 번만 연결합니다. 사용자 생성과 명단 갱신은
서로 다른 커밋으로 처리되므로, 명단 갱신이 실패하면 방금 만든 사용자를 삭제하는 보상 단계를 거칩니다.
승인 명단에서 삭제되어 연결이 끊긴 기존 계정은 새 사용자를 만들지 않고 그대로 다시 연결하며, 보상 삭제 대상도 아닙니다.

    PendingVerification --(verify)--> Verified
    Verified --(verify)--> AlreadyVerified
"""

import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from homework_board.exceptions import (
    AlreadyVerified,
    InvalidFormat,
    NotFound,
    RegistrationFailed,
    UserCreationFailed,
)
from homework_board.models.approved_user import ApprovedUser
from homework_board.models.user import User
from homework_board.schemas.user import ExternalIdentity
from homework_board.utils.permissions import USER, is_admin
from homework_board.utils.phone import normalize_name, normalize_phone

logger = logging.getLogger(__name__)

NOT_REGISTERED = "등록되지 않은 사용자입니다. 이름과 전화번호를 확인해주세요."


def _find_approved_user(db: Session, name: str, phone: str) -> ApprovedUser:
    rows = (
        db.query(ApprovedUser)
        .filter(ApprovedUser.name == name, ApprovedUser.phone == phone)
        .limit(2)
        .all()
    )
    if len(rows) != 1:
        raise NotFound(NOT_REGISTERED)
    return rows[0]


def _create_user(db: Session, identity: ExternalIdentity) -> User:
    user = User(
        id=identity.subject_id,
        email=identity.email,
        name=identity.name,
        profile_image=identity.profile_image,
        google_id=identity.google_id,
        role=USER,
    )
    db.add(user)
    try:
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.warning("[verification] user creation failed for %s: %s", identity.subject_id, exc)
        raise UserCreationFailed("사용자 생성에 실패했습니다. 이미 가입된 계정인지 확인해주세요.") from exc
    db.refresh(user)
    return user


def _bind_approved_user(db: Session, approved_user_id: int, user_id: str) -> bool:
    # 아직 미인증인 행만 갱신한다. 동시에 들어온 다른 인증이 먼저 커밋했다면 0건이 갱신된다.
    updated = (
        db.query(ApprovedUser)
        .filter(ApprovedUser.id == approved_user_id, ApprovedUser.is_verified == False)  # noqa: E712
        .update({"is_verified": True, "user_id": user_id}, synchronize_session=False)
    )
    db.commit()
    return updated == 1


def _rollback_user(db: Session, user_id: str):
    db.query(User).filter(User.id == user_id).delete(synchronize_session=False)
    db.commit()


def _compensate(db: Session, user_id: str) -> str | None:
    """생성한 사용자를 삭제한다. 실패하면 원인 메시지를 돌려준다."""
    try:
        _rollback_user(db, user_id)
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error("[verification] compensation failed for user %s: %s", user_id, exc)
        return str(exc)
    logger.info("[verification] compensated: removed user %s", user_id)
    return None


def _find_user(db: Session, user_id: str) -> User | None:
    return db.query(User).filter(User.id == user_id).first()


def verify_approved_user(db: Session, name: str, phone: str, identity: ExternalIdentity) -> User:
    claimed_name = normalize_name(name)
    if not claimed_name:
        raise InvalidFormat("이름을 입력해주세요.")
    if not str(phone or "").strip():
        raise InvalidFormat("전화번호를 입력해주세요.")
    claimed_phone = normalize_phone(phone)

    approved = _find_approved_user(db, claimed_name, claimed_phone)
    if approved.is_verified:
        raise AlreadyVerified()
    approved_user_id = int(approved.id)

    # 승인 명단에서 삭제되어 연결이 끊긴 기존 계정은 새로 만들지 않고 다시 연결한다.
    existing = _find_user(db, identity.subject_id)
    if existing is not None and is_verified(db, existing.id):
        raise AlreadyVerified("이미 다른 승인 정보로 인증된 계정입니다.")
    created = existing is None
    user = _create_user(db, identity) if created else existing
    user_id = user.id

    try:
        bound = _bind_approved_user(db, approved_user_id, user_id)
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error("[verification] binding approved user %s failed: %s", approved_user_id, exc)
        compensation_error = _compensate(db, user_id) if created else None
        raise RegistrationFailed(compensation_error=compensation_error) from exc

    if not bound:
        logger.warning("[verification] approved user %s was verified concurrently", approved_user_id)
        compensation_error = _compensate(db, user_id) if created else None
        if compensation_error:
            raise RegistrationFailed(AlreadyVerified.default_detail, compensation_error=compensation_error)
        raise AlreadyVerified()

    logger.info("[verification] approved user %s bound to user %s", approved_user_id, user_id)
    db.refresh(user)
    return user


def is_verified(db: Session, user_id: str) -> bool:
    return (
        db.query(ApprovedUser.id)
        .filter(ApprovedUser.user_id == user_id, ApprovedUser.is_verified == True)  # noqa: E712
        .first()
        is not None
    )


def get_verification_status(db: Session, identity: ExternalIdentity) -> dict:
    user = db.query(User).filter(User.id == identity.subject_id).first()
    return {
        "user_id": identity.subject_id,
        "registered": user is not None,
        "is_verified": user is not None and is_verified(db, user.id),
        "is_admin": user is not None and is_admin(user),
    }


def has_access(db: Session, user: User) -> bool:
    return is_admin(user) or is_verified(db, user.id)
