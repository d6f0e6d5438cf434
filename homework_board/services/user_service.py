"""User Service 도메인 서비스 레이어입니다. 프로필 조회/수정과 관리자용 사용자 목록을 담당합니다."""

from sqlalchemy.orm import Session

from homework_board.exceptions import InvalidFormat, NotFound
from homework_board.models.user import User
from homework_board.schemas.user import UserProfileUpdate


def list_users(db: Session, role: str | None = None):
    q = db.query(User)
    if role:
        q = q.filter(User.role == role)
    return q.order_by(User.created_at.desc(), User.id).all()


def get_user(db: Session, user_id: str) -> User:
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise NotFound("사용자를 찾을 수 없습니다.")
    return user


def update_profile(db: Session, current_user: User, data: UserProfileUpdate) -> User:
    payload = data.model_dump(exclude_unset=True)
    if "name" in payload:
        name = (payload.get("name") or "").strip()
        if not name:
            raise InvalidFormat("이름은 비워둘 수 없습니다.")
        current_user.name = name
    if "profile_image" in payload:
        current_user.profile_image = (payload.get("profile_image") or "").strip() or None
    db.commit()
    db.refresh(current_user)
    return current_user
