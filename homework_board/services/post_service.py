"""Post Service 도메인 서비스 레이어입니다. 게시글/댓글/하트의 작성, 소프트 삭제, 집계 카운터를 관리합니다.

``heart_count``와 ``comment_count``는 행 변경과 같은 트랜잭션 안에서 ``SET n = n ± 1`` 원자 연산으로만 바뀝니다.
"""

import logging
from typing import List

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from homework_board.config import settings
from homework_board.exceptions import InvalidFormat, NotFound, StoreError, Unauthorized
from homework_board.models.post import Comment, Heart, Post
from homework_board.models.user import User
from homework_board.schemas.post import CommentCreate, CommentUpdate, PostCreate, PostUpdate
from homework_board.utils.permissions import can_edit, can_hard_delete, can_soft_delete

logger = logging.getLogger(__name__)

POST_NOT_FOUND = "게시글을 찾을 수 없습니다."
COMMENT_NOT_FOUND = "댓글을 찾을 수 없습니다."
SORT_OPTIONS = {"latest", "popular"}


def _commit(db: Session, action: str):
    try:
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error("[posts] %s failed: %s", action, exc)
        raise StoreError() from exc


def _adjust_counter(db: Session, post_id: int, column, delta: int):
    db.query(Post).filter(Post.id == post_id).update(
        {column: column + delta},
        synchronize_session=False,
    )


def _liked_post_ids(db: Session, user_id: str, post_ids: list[int]) -> set[int]:
    if not post_ids:
        return set()
    rows = (
        db.query(Heart.post_id)
        .filter(Heart.user_id == user_id, Heart.post_id.in_(post_ids))
        .all()
    )
    return {int(row[0]) for row in rows}


def _serialize_post(post: Post, current_user: User, liked: bool) -> Post:
    setattr(post, "is_liked", bool(liked))
    setattr(post, "is_own", post.user_id == current_user.id)
    return post


def _serialize_comment(comment: Comment, current_user: User) -> Comment:
    setattr(comment, "is_own", comment.user_id == current_user.id)
    return comment


def get_post(db: Session, post_id: int) -> Post:
    """삭제되지 않은 게시글을 돌려준다. 소프트 삭제된 글은 없는 것으로 취급한다."""
    post = (
        db.query(Post)
        .options(joinedload(Post.author))
        .filter(Post.id == post_id, Post.is_deleted == False)  # noqa: E712
        .first()
    )
    if not post:
        raise NotFound(POST_NOT_FOUND)
    return post


def list_posts(
    db: Session,
    current_user: User,
    sort: str = "latest",
    mine: bool = False,
    week: str | None = None,
    limit: int | None = None,
    offset: int = 0,
) -> dict:
    if sort not in SORT_OPTIONS:
        raise InvalidFormat("정렬 기준은 latest 또는 popular 이어야 합니다.")
    query = db.query(Post).filter(Post.is_deleted == False)  # noqa: E712
    if mine:
        query = query.filter(Post.user_id == current_user.id)
    if week:
        query = query.filter(Post.week == week)

    total = query.count()
    if sort == "popular":
        query = query.order_by(Post.heart_count.desc(), Post.created_at.desc(), Post.id.desc())
    else:
        query = query.order_by(Post.created_at.desc(), Post.id.desc())
    rows = (
        query.options(joinedload(Post.author))
        .offset(max(0, offset))
        .limit(limit or settings.POST_PAGE_SIZE)
        .all()
    )
    liked = _liked_post_ids(db, current_user.id, [post.id for post in rows])
    return {
        "items": [_serialize_post(post, current_user, post.id in liked) for post in rows],
        "total": total,
    }


def get_post_detail(db: Session, post_id: int, current_user: User) -> dict:
    post = get_post(db, post_id)
    comments = (
        db.query(Comment)
        .options(joinedload(Comment.author))
        .filter(Comment.post_id == post_id, Comment.is_deleted == False)  # noqa: E712
        .order_by(Comment.created_at.asc(), Comment.id.asc())
        .all()
    )
    liked = bool(_liked_post_ids(db, current_user.id, [post.id]))
    return {"post": _serialize_post(post, current_user, liked), "comments": [_serialize_comment(c, current_user) for c in comments]}


def create_post(db: Session, data: PostCreate, current_user: User) -> Post:
    post = Post(
        user_id=current_user.id,
        title=data.title.strip(),
        content=data.content or "",
        week=data.week.value,
        image_url=data.image_url,
        heart_count=0,
        comment_count=0,
        is_deleted=False,
    )
    db.add(post)
    _commit(db, "create post")
    db.refresh(post)
    return _serialize_post(post, current_user, False)


def update_post(db: Session, post_id: int, data: PostUpdate, current_user: User) -> Post:
    post = get_post(db, post_id)
    if not can_edit(current_user, post.user_id):
        raise Unauthorized("본인 게시글만 수정할 수 있습니다.")
    payload = data.model_dump(exclude_none=True)
    if "week" in payload:
        payload["week"] = data.week.value
    if "title" in payload:
        payload["title"] = payload["title"].strip()
    for key, value in payload.items():
        setattr(post, key, value)
    _commit(db, "update post")
    db.refresh(post)
    return _serialize_post(post, current_user, bool(_liked_post_ids(db, current_user.id, [post.id])))


def soft_delete_post(db: Session, post_id: int, current_user: User):
    post = get_post(db, post_id)
    if not can_soft_delete(current_user, post.user_id):
        raise Unauthorized("본인 게시글 또는 관리자만 삭제할 수 있습니다.")
    post.is_deleted = True
    _commit(db, "soft delete post")


def hard_delete_post(db: Session, post_id: int, current_user: User):
    if not can_hard_delete(current_user):
        raise Unauthorized("게시글 영구 삭제는 관리자만 가능합니다.")
    post = db.query(Post).filter(Post.id == post_id).first()
    if not post:
        raise NotFound(POST_NOT_FOUND)
    db.delete(post)
    _commit(db, "hard delete post")
    logger.info("[posts] post %s hard-deleted by %s", post_id, current_user.id)


def _find_heart(db: Session, post_id: int, user_id: str) -> Heart | None:
    return db.query(Heart).filter(Heart.post_id == post_id, Heart.user_id == user_id).first()


def toggle_heart(db: Session, post_id: int, current_user: User) -> dict:
    """좋아요를 뒤집는다. 행이 있으면 지우고 없으면 만든다."""
    get_post(db, post_id)
    if _find_heart(db, post_id, current_user.id):
        # 동시 요청이 먼저 지웠다면 0건이 삭제되고 카운터도 그대로 둔다.
        deleted = (
            db.query(Heart)
            .filter(Heart.post_id == post_id, Heart.user_id == current_user.id)
            .delete(synchronize_session=False)
        )
        if deleted:
            _adjust_counter(db, post_id, Post.heart_count, -1)
        liked = False
    else:
        db.add(Heart(post_id=post_id, user_id=current_user.id))
        try:
            db.flush()
        except IntegrityError:
            # 같은 사용자의 동시 요청이 먼저 하트를 만들었다.
            db.rollback()
            liked = True
        else:
            _adjust_counter(db, post_id, Post.heart_count, 1)
            liked = True
    _commit(db, "toggle heart")
    heart_count = db.query(Post.heart_count).filter(Post.id == post_id).scalar() or 0
    return {"post_id": post_id, "liked": liked, "heart_count": int(heart_count)}


def get_comment(db: Session, comment_id: int) -> Comment:
    comment = (
        db.query(Comment)
        .join(Post, Comment.post_id == Post.id)
        .filter(
            Comment.id == comment_id,
            Comment.is_deleted == False,  # noqa: E712
            Post.is_deleted == False,  # noqa: E712
        )
        .first()
    )
    if not comment:
        raise NotFound(COMMENT_NOT_FOUND)
    return comment


def list_comments(db: Session, post_id: int, current_user: User) -> List[Comment]:
    return get_post_detail(db, post_id, current_user)["comments"]


def create_comment(db: Session, post_id: int, data: CommentCreate, current_user: User) -> Comment:
    get_post(db, post_id)
    content = data.content.strip()
    if not content:
        raise InvalidFormat("댓글 내용을 입력해주세요.")
    comment = Comment(post_id=post_id, user_id=current_user.id, content=content, is_deleted=False)
    db.add(comment)
    db.flush()
    _adjust_counter(db, post_id, Post.comment_count, 1)
    _commit(db, "create comment")
    db.refresh(comment)
    return _serialize_comment(comment, current_user)


def update_comment(db: Session, comment_id: int, data: CommentUpdate, current_user: User) -> Comment:
    comment = get_comment(db, comment_id)
    if not can_edit(current_user, comment.user_id):
        raise Unauthorized("본인 댓글만 수정할 수 있습니다.")
    content = data.content.strip()
    if not content:
        raise InvalidFormat("댓글 내용을 입력해주세요.")
    comment.content = content
    _commit(db, "update comment")
    db.refresh(comment)
    return _serialize_comment(comment, current_user)


def soft_delete_comment(db: Session, comment_id: int, current_user: User):
    comment = get_comment(db, comment_id)
    if not can_soft_delete(current_user, comment.user_id):
        raise Unauthorized("본인 댓글 또는 관리자만 삭제할 수 있습니다.")
    updated = (
        db.query(Comment)
        .filter(Comment.id == comment_id, Comment.is_deleted == False)  # noqa: E712
        .update({"is_deleted": True}, synchronize_session=False)
    )
    if updated:
        _adjust_counter(db, comment.post_id, Post.comment_count, -1)
    _commit(db, "soft delete comment")


def hard_delete_comment(db: Session, comment_id: int, current_user: User):
    if not can_hard_delete(current_user):
        raise Unauthorized("댓글 영구 삭제는 관리자만 가능합니다.")
    comment = db.query(Comment).filter(Comment.id == comment_id).first()
    if not comment:
        raise NotFound(COMMENT_NOT_FOUND)
    post_id = int(comment.post_id)
    visible_deleted = (
        db.query(Comment)
        .filter(Comment.id == comment_id, Comment.is_deleted == False)  # noqa: E712
        .delete(synchronize_session=False)
    )
    if visible_deleted:
        _adjust_counter(db, post_id, Post.comment_count, -1)
    else:
        # 이미 소프트 삭제된 댓글은 카운터에서 빠져 있다.
        db.query(Comment).filter(Comment.id == comment_id).delete(synchronize_session=False)
    _commit(db, "hard delete comment")
    logger.info("[posts] comment %s hard-deleted by %s", comment_id, current_user.id)
