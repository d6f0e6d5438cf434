from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from pydantic import ValidationError
from sqlalchemy.orm import Session
from jose import JWTError, jwt
from homework_board.database import get_db
from homework_board.exceptions import Unauthorized
from homework_board.models.user import User
from homework_board.config import settings
from homework_board.schemas.user import ExternalIdentity
from homework_board.services.auth_service import ALGORITHM, identity_from_claims
from homework_board.services.verification_service import has_access

security = HTTPBearer()


def decode_token(token: str) -> dict:
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[ALGORITHM])
        return payload
    except JWTError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
        )


def get_current_identity(
    credentials: HTTPAuthorizationCredentials = Depends(security),
) -> ExternalIdentity:
    payload = decode_token(credentials.credentials)
    if payload.get("sub") is None:
        raise HTTPException(status_code=401, detail="Invalid token payload")
    try:
        return identity_from_claims(payload)
    except ValidationError:
        raise HTTPException(status_code=401, detail="Invalid token payload")


def get_current_user(
    identity: ExternalIdentity = Depends(get_current_identity),
    db: Session = Depends(get_db),
) -> User:
    user = db.query(User).filter(User.id == identity.subject_id).first()
    if not user:
        raise Unauthorized("사전 승인 인증이 필요합니다.")
    return user


def get_verified_user(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> User:
    # 승인 명단에서 삭제되어 연결이 끊긴 계정은 다시 인증하기 전까지 이용할 수 없다.
    if not has_access(db, current_user):
        raise Unauthorized("사전 승인 인증이 필요합니다.")
    return current_user


def require_roles(*roles: str):
    def checker(current_user: User = Depends(get_current_user)) -> User:
        if current_user.role not in roles:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Requires role: {', '.join(roles)}",
            )
        return current_user
    return checker
