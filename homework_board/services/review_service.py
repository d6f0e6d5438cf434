"""Homework Review Service 도메인 서비스 레이어입니다. 관리자의 주차별 과제 통과/미통과 판정을 관리합니다."""

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from homework_board.exceptions import InvalidFormat, NotFound
from homework_board.models.homework_review import HomeworkReview
from homework_board.models.user import User
from homework_board.utils.permissions import ADMIN, ensure_admin
from homework_board.utils.weeks import HOMEWORK_WEEKS, Week, is_homework_week

logger = logging.getLogger(__name__)

NOT_REVIEWED = "not_reviewed"
REVIEW_STATUSES = {"passed", "failed"}


def _week_label(week: str | Week) -> str:
    if not is_homework_week(week):
        raise InvalidFormat("과제 주차만 평가할 수 있습니다.")
    return Week(week).value


def _find_review(db: Session, user_id: str, week: str) -> HomeworkReview | None:
    return (
        db.query(HomeworkReview)
        .filter(HomeworkReview.user_id == user_id, HomeworkReview.week == week)
        .first()
    )


def submit_review(db: Session, user_id: str, week: str | Week, status: str, current_user: User) -> HomeworkReview:
    """(user_id, week) 기준으로 판정을 저장한다. 이미 있으면 이전 판정을 덮어쓴다."""
    ensure_admin(current_user, "과제 평가는 관리자만 가능합니다.")
    label = _week_label(week)
    if status not in REVIEW_STATUSES:
        raise InvalidFormat("평가 상태는 passed 또는 failed 여야 합니다.")
    if not db.query(User.id).filter(User.id == user_id).first():
        raise NotFound("사용자를 찾을 수 없습니다.")

    review = _find_review(db, user_id, label)
    if review is None:
        review = HomeworkReview(user_id=user_id, week=label, status=status, reviewer_id=current_user.id)
        db.add(review)
        try:
            db.commit()
        except IntegrityError:
            # 다른 관리자가 같은 (user, week)를 먼저 저장했다면 그 행을 갱신한다.
            db.rollback()
            review = _find_review(db, user_id, label)
            if review is None:
                raise
            review.status = status
            review.reviewer_id = current_user.id
            db.commit()
    else:
        review.status = status
        review.reviewer_id = current_user.id
        db.commit()
    db.refresh(review)
    logger.info("[reviews] %s / %s -> %s by %s", user_id, label, status, current_user.id)
    return review


def delete_review(db: Session, user_id: str, week: str | Week, current_user: User) -> bool:
    ensure_admin(current_user, "과제 평가는 관리자만 가능합니다.")
    label = _week_label(week)
    deleted = (
        db.query(HomeworkReview)
        .filter(HomeworkReview.user_id == user_id, HomeworkReview.week == label)
        .delete(synchronize_session=False)
    )
    db.commit()
    return deleted > 0


def get_status(db: Session, user_id: str, week: str | Week) -> str:
    review = _find_review(db, user_id, _week_label(week))
    return review.status if review else NOT_REVIEWED


def get_review_matrix(db: Session) -> list[dict]:
    users = (
        db.query(User)
        .filter(User.role != ADMIN)
        .order_by(User.name.asc(), User.id.asc())
        .all()
    )
    reviews: dict[tuple[str, str], str] = {
        (row.user_id, row.week): row.status
        for row in db.query(HomeworkReview.user_id, HomeworkReview.week, HomeworkReview.status).all()
    }
    return [
        {
            "user_id": user.id,
            "user_name": user.name,
            "user_email": user.email,
            "user_profile_image": user.profile_image,
            "weekly_reviews": {
                week.value: reviews.get((user.id, week.value), NOT_REVIEWED)
                for week in HOMEWORK_WEEKS
            },
        }
        for user in users
    ]
