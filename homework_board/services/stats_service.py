"""관리자 통계/리포트 서비스입니다. 게시글, 승인 명단, 과제 평가를 조인해 대시보드와 내보내기용 데이터를 만듭니다."""

import csv
import io
from collections import Counter
from datetime import date, datetime, timedelta

from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload

from homework_board.config import settings
from homework_board.models.approved_user import ApprovedUser
from homework_board.models.post import Comment, Heart, Post
from homework_board.models.user import User
from homework_board.services import review_service
from homework_board.utils.permissions import ADMIN
from homework_board.utils.phone import format_phone
from homework_board.utils.weeks import ALL_LABELS, HOMEWORK_WEEKS, short_label

REVIEW_LABELS = {"passed": "통과", "failed": "미통과", review_service.NOT_REVIEWED: "미평가"}


def get_overview(db: Session) -> dict:
    return {
        "users": int(db.query(func.count(User.id)).scalar() or 0),
        "posts": int(
            db.query(func.count(Post.id)).filter(Post.is_deleted == False).scalar() or 0  # noqa: E712
        ),
        "comments": int(
            db.query(func.count(Comment.id)).filter(Comment.is_deleted == False).scalar() or 0  # noqa: E712
        ),
        "hearts": int(db.query(func.count(Heart.id)).scalar() or 0),
    }


def get_recent_posts(db: Session, limit: int | None = None) -> list[Post]:
    return (
        db.query(Post)
        .options(joinedload(Post.author))
        .filter(Post.is_deleted == False)  # noqa: E712
        .order_by(Post.created_at.desc(), Post.id.desc())
        .limit(limit or settings.RECENT_POST_LIMIT)
        .all()
    )


def get_daily_post_counts(db: Session, days: int | None = None, today: date | None = None) -> list[dict]:
    """최근 ``days``일의 일별 게시글 수. 글이 없는 날도 0으로 채워 오래된 날짜부터 돌려준다."""
    span = max(1, days or settings.DAILY_STATS_DAYS)
    end = today or date.today()
    start = end - timedelta(days=span - 1)
    rows = (
        db.query(Post.created_at)
        .filter(
            Post.is_deleted == False,  # noqa: E712
            Post.created_at >= datetime.combine(start, datetime.min.time()),
            Post.created_at < datetime.combine(end + timedelta(days=1), datetime.min.time()),
        )
        .all()
    )
    counts = Counter(row.created_at.date() for row in rows if row.created_at is not None)
    return [
        {"label": (start + timedelta(days=offset)).isoformat(), "count": counts.get(start + timedelta(days=offset), 0)}
        for offset in range(span)
    ]


def get_week_label_counts(db: Session) -> list[dict]:
    rows = (
        db.query(Post.week, func.count(Post.id))
        .filter(Post.is_deleted == False)  # noqa: E712
        .group_by(Post.week)
        .all()
    )
    counts = {week: int(count) for week, count in rows}
    return [{"label": label.value, "count": counts.get(label.value, 0)} for label in ALL_LABELS]


def get_user_weekly_post_status(db: Session) -> list[dict]:
    users = (
        db.query(User)
        .filter(User.role != ADMIN)
        .order_by(User.name.asc(), User.id.asc())
        .all()
    )
    week_values = [week.value for week in HOMEWORK_WEEKS]
    posts = (
        db.query(Post.id, Post.user_id, Post.week)
        .filter(Post.is_deleted == False, Post.week.in_(week_values))  # noqa: E712
        .order_by(Post.created_at.asc(), Post.id.asc())
        .all()
    )
    posts_by_user: dict[str, dict[str, list[int]]] = {}
    for post_id, user_id, week in posts:
        posts_by_user.setdefault(user_id, {}).setdefault(week, []).append(int(post_id))

    approved = {
        row.user_id: row
        for row in db.query(ApprovedUser)
        .filter(ApprovedUser.user_id.isnot(None), ApprovedUser.is_verified == True)  # noqa: E712
        .all()
    }

    result = []
    for user in users:
        entry = approved.get(user.id)
        user_posts = posts_by_user.get(user.id, {})
        result.append(
            {
                "id": user.id,
                "name": user.name,
                "email": user.email,
                "profile_image": user.profile_image,
                "approved_name": entry.name if entry else None,
                "approved_phone": format_phone(entry.phone) if entry else None,
                "weekly_posts": {week: list(user_posts.get(week, [])) for week in week_values},
            }
        )
    return result


def export_weekly_status_csv(db: Session) -> str:
    statuses = get_user_weekly_post_status(db)
    reviews = {row["user_id"]: row["weekly_reviews"] for row in review_service.get_review_matrix(db)}
    multi_submit_weeks = [
        week for week in HOMEWORK_WEEKS if any(len(row["weekly_posts"][week.value]) > 1 for row in statuses)
    ]

    output = io.StringIO()
    # 엑셀에서 한글이 깨지지 않도록 BOM을 붙인다.
    output.write("\ufeff")
    writer = csv.writer(output)
    header = ["이름", "이메일", "실명", "전화번호"]
    for week in HOMEWORK_WEEKS:
        header += [f"{short_label(week)} 제출", f"{short_label(week)} 평가"]
        if week in multi_submit_weeks:
            header.append(f"{short_label(week)} 제출개수")
    writer.writerow(header)

    for row in statuses:
        values = [row["name"], row["email"], row["approved_name"] or "-", row["approved_phone"] or "-"]
        user_reviews = reviews.get(row["id"], {})
        for week in HOMEWORK_WEEKS:
            post_ids = row["weekly_posts"][week.value]
            submitted = len(post_ids) > 0
            values.append("O" if submitted else "X")
            if submitted:
                values.append(REVIEW_LABELS[user_reviews.get(week.value, review_service.NOT_REVIEWED)])
            else:
                values.append("-")
            if week in multi_submit_weeks:
                values.append(len(post_ids) if len(post_ids) > 1 else "")
        writer.writerow(values)
    return output.getvalue()
