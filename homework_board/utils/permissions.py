"""Permissions 관련 공용 유틸리티 헬퍼입니다."""

from homework_board.exceptions import Unauthorized
from homework_board.models.user import User


ADMIN = "admin"
USER = "user"

ALL_ROLES = (ADMIN, USER)


def is_admin(user: User) -> bool:
    return user.role == ADMIN


def is_owner(user: User, owner_id: str | None) -> bool:
    return owner_id is not None and user.id == owner_id


def can_edit(user: User, owner_id: str | None) -> bool:
    # 수정은 작성자 본인만 가능하다.
    return is_owner(user, owner_id)


def can_soft_delete(user: User, owner_id: str | None) -> bool:
    return is_owner(user, owner_id) or is_admin(user)


def can_hard_delete(user: User) -> bool:
    return is_admin(user)


def ensure_admin(user: User, detail: str = "관리자만 사용할 수 있는 기능입니다."):
    if not is_admin(user):
        raise Unauthorized(detail)
