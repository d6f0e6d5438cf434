"""Comments 기능 API 라우터입니다."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from homework_board.database import get_db
from homework_board.schemas.post import CommentOut, CommentUpdate
from homework_board.services import post_service
from homework_board.middleware.auth_middleware import get_verified_user
from homework_board.models.user import User

router = APIRouter(prefix="/api/comments", tags=["comments"])


@router.put("/{comment_id}", response_model=CommentOut)
def update_comment(
    comment_id: int,
    data: CommentUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_verified_user),
):
    return post_service.update_comment(db, comment_id, data, current_user)


@router.delete("/{comment_id}")
def delete_comment(comment_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_verified_user)):
    post_service.soft_delete_comment(db, comment_id, current_user)
    return {"message": "삭제되었습니다."}


@router.delete("/{comment_id}/hard")
def hard_delete_comment(comment_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_verified_user)):
    post_service.hard_delete_comment(db, comment_id, current_user)
    return {"message": "영구 삭제되었습니다."}
