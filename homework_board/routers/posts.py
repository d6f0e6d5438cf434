"""Posts 기능 API 라우터입니다. 요청을 검증하고 서비스 레이어로 비즈니스 로직을 위임합니다."""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import List
from homework_board.database import get_db
from homework_board.schemas.post import (
    CommentCreate,
    CommentOut,
    HeartToggleOut,
    PostCreate,
    PostDetailOut,
    PostOut,
    PostPage,
    PostSort,
    PostUpdate,
)
from homework_board.services import post_service
from homework_board.middleware.auth_middleware import get_verified_user
from homework_board.models.user import User
from homework_board.utils.weeks import Week

router = APIRouter(prefix="/api/posts", tags=["posts"])


@router.get("", response_model=PostPage)
def list_posts(
    sort: PostSort = "latest",
    mine: bool = False,
    week: Week | None = None,
    limit: int | None = Query(None, ge=1, le=100),
    offset: int = Query(0, ge=0),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_verified_user),
):
    return post_service.list_posts(
        db,
        current_user,
        sort=sort,
        mine=mine,
        week=week.value if week else None,
        limit=limit,
        offset=offset,
    )


@router.post("", response_model=PostOut)
def create_post(
    data: PostCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_verified_user),
):
    return post_service.create_post(db, data, current_user)


@router.get("/{post_id}", response_model=PostDetailOut)
def get_post(post_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_verified_user)):
    detail = post_service.get_post_detail(db, post_id, current_user)
    return PostDetailOut(
        **PostOut.model_validate(detail["post"]).model_dump(),
        comments=[CommentOut.model_validate(comment) for comment in detail["comments"]],
    )


@router.put("/{post_id}", response_model=PostOut)
def update_post(
    post_id: int,
    data: PostUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_verified_user),
):
    return post_service.update_post(db, post_id, data, current_user)


@router.delete("/{post_id}")
def delete_post(post_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_verified_user)):
    post_service.soft_delete_post(db, post_id, current_user)
    return {"message": "삭제되었습니다."}


@router.delete("/{post_id}/hard")
def hard_delete_post(post_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_verified_user)):
    post_service.hard_delete_post(db, post_id, current_user)
    return {"message": "영구 삭제되었습니다."}


@router.post("/{post_id}/heart", response_model=HeartToggleOut)
def toggle_heart(post_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_verified_user)):
    return post_service.toggle_heart(db, post_id, current_user)


@router.get("/{post_id}/comments", response_model=List[CommentOut])
def list_comments(post_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_verified_user)):
    return post_service.list_comments(db, post_id, current_user)


@router.post("/{post_id}/comments", response_model=CommentOut)
def create_comment(
    post_id: int,
    data: CommentCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_verified_user),
):
    return post_service.create_comment(db, post_id, data, current_user)
