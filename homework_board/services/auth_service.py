"""Auth Service 도메인 서비스 레이어입니다. 외부 인증 결과를 토큰으로 바꾸고 관리자 계정을 준비합니다."""

import logging
from datetime import datetime, timedelta, timezone
from jose import jwt
from sqlalchemy.orm import Session
from homework_board.models.user import User
from homework_board.schemas.user import ExternalIdentity
from homework_board.config import settings
from homework_board.utils.permissions import ADMIN

ALGORITHM = "HS256"

logger = logging.getLogger(__name__)


def create_access_token(identity: ExternalIdentity) -> str:
    expire = datetime.now(timezone.utc) + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    payload = {
        "sub": identity.subject_id,
        "email": identity.email,
        "name": identity.name,
        "picture": identity.profile_image,
        "google_id": identity.google_id,
        "exp": expire,
    }
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=ALGORITHM)


def identity_from_claims(payload: dict) -> ExternalIdentity:
    return ExternalIdentity(
        subject_id=str(payload["sub"]),
        email=payload.get("email") or "",
        name=payload.get("name") or "",
        profile_image=payload.get("picture"),
        google_id=payload.get("google_id"),
    )


def _provision_admin(db: Session, identity: ExternalIdentity) -> User:
    user = User(
        id=identity.subject_id,
        email=identity.email,
        name=identity.name,
        profile_image=identity.profile_image,
        google_id=identity.google_id,
        role=ADMIN,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info("[auth] provisioned admin user %s", user.id)
    return user


def _fill_missing_profile(db: Session, user: User, identity: ExternalIdentity):
    # 비어 있는 값만 채운다. 사용자가 바꾼 프로필은 덮어쓰지 않는다.
    changed = False
    if not user.google_id and identity.google_id:
        user.google_id = identity.google_id
        changed = True
    if not user.profile_image and identity.profile_image:
        user.profile_image = identity.profile_image
        changed = True
    if changed:
        db.commit()
        db.refresh(user)


def mock_oauth_login(db: Session, identity: ExternalIdentity) -> tuple[str, User | None]:
    """외부 OAuth 로그인 결과를 받아 토큰을 발급한다.

    애플리케이션 사용자가 아직 없으면 ``None``을 돌려주며, 클라이언트는 사전 승인 인증을 진행해야 한다.
    ``ADMIN_EMAILS``에 포함된 이메일은 인증 없이 관리자 계정이 만들어진다.
    """
    user = db.query(User).filter(User.id == identity.subject_id).first()
    if user is None and identity.email.strip().lower() in settings.admin_emails():
        user = _provision_admin(db, identity)
    elif user is not None:
        _fill_missing_profile(db, user, identity)
    return create_access_token(identity), user
