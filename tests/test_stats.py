"""관리자 통계 API와 주차별 제출 현황 CSV 내보내기 테스트입니다."""

import csv
import io
from datetime import date, datetime

from homework_board.models.homework_review import HomeworkReview
from homework_board.models.post import Comment, Heart, Post
from homework_board.services import stats_service
from tests.conftest import auth_headers


def _post(user_id: str, week: str, created_at: datetime | None = None, **kwargs) -> Post:
    if created_at is not None:
        kwargs["created_at"] = created_at
    return Post(
        user_id=user_id,
        title=f"{week} 제출",
        content="",
        week=week,
        image_url="/uploads/post/a.png",
        **kwargs,
    )


def test_overview_counts_visible_rows(client, db, seed_users):
    visible = _post("user-001", "1주차 과제")
    hidden = _post("user-002", "1주차 과제", is_deleted=True)
    db.add_all([visible, hidden])
    db.commit()
    db.add_all(
        [
            Comment(post_id=visible.id, user_id="user-002", content="좋아요"),
            Comment(post_id=visible.id, user_id="user-002", content="삭제됨", is_deleted=True),
            Heart(post_id=visible.id, user_id="user-002"),
        ]
    )
    db.commit()

    admin = auth_headers(client, "admin-001")
    resp = client.get("/api/stats/overview", headers=admin)
    assert resp.json() == {"users": 3, "posts": 1, "comments": 1, "hearts": 1}

    recent = client.get("/api/stats/recent-posts", headers=admin).json()
    assert [p["id"] for p in recent] == [visible.id]


def test_stats_require_admin(client, seed_users):
    member = auth_headers(client, "user-001")
    assert client.get("/api/stats/overview", headers=member).status_code == 403
    assert client.get("/api/stats/weekly-status/export.csv", headers=member).status_code == 403


def test_daily_counts_fill_missing_days(db, seed_users):
    db.add_all(
        [
            _post("user-001", "1주차 과제", datetime(2026, 3, 8, 10, 0)),
            _post("user-002", "1주차 과제", datetime(2026, 3, 10, 9, 0)),
            _post("user-002", "2주차 과제", datetime(2026, 3, 10, 23, 59)),
            _post("user-001", "2주차 과제", datetime(2026, 3, 1, 12, 0)),
            _post("user-001", "2주차 과제", datetime(2026, 3, 9, 12, 0), is_deleted=True),
        ]
    )
    db.commit()

    counts = stats_service.get_daily_post_counts(db, days=3, today=date(2026, 3, 10))
    assert counts == [
        {"label": "2026-03-08", "count": 1},
        {"label": "2026-03-09", "count": 0},
        {"label": "2026-03-10", "count": 2},
    ]


def test_week_label_counts(client, db, seed_users):
    db.add_all([_post("user-001", "1주차 과제"), _post("user-002", "1주차 과제"), _post("admin-001", "공지")])
    db.commit()

    admin = auth_headers(client, "admin-001")
    counts = {row["label"]: row["count"] for row in client.get("/api/stats/weeks", headers=admin).json()}
    assert counts["1주차 과제"] == 2
    assert counts["공지"] == 1
    assert counts["6주차 과제"] == 0
    assert len(counts) == 7


def test_weekly_status(client, db, seed_users):
    first = _post("user-001", "1주차 과제", datetime(2026, 3, 1, 9, 0))
    again = _post("user-001", "1주차 과제", datetime(2026, 3, 2, 9, 0))
    db.add_all([first, again, _post("user-002", "공지")])
    db.commit()

    admin = auth_headers(client, "admin-001")
    rows = client.get("/api/stats/weekly-status", headers=admin).json()
    assert [row["id"] for row in rows] == ["user-001", "user-002"]
    assert rows[0]["approved_name"] == "김철수"
    assert rows[0]["approved_phone"] == "010-1111-2222"
    assert rows[0]["weekly_posts"]["1주차 과제"] == [first.id, again.id]
    assert rows[1]["weekly_posts"]["1주차 과제"] == []
    assert "공지" not in rows[1]["weekly_posts"]


def test_weekly_status_csv(client, db, seed_users):
    db.add_all(
        [
            _post("user-001", "1주차 과제", datetime(2026, 3, 1, 9, 0)),
            _post("user-001", "1주차 과제", datetime(2026, 3, 2, 9, 0)),
            _post("user-002", "2주차 과제", datetime(2026, 3, 9, 9, 0)),
            HomeworkReview(user_id="user-001", week="1주차 과제", status="passed", reviewer_id="admin-001"),
        ]
    )
    db.commit()

    admin = auth_headers(client, "admin-001")
    resp = client.get("/api/stats/weekly-status/export.csv", headers=admin)
    assert resp.status_code == 200
    assert resp.headers["content-type"].startswith("text/csv")
    assert "attachment" in resp.headers["content-disposition"]

    text = resp.content.decode("utf-8")
    assert text.startswith("\ufeff")
    rows = list(csv.reader(io.StringIO(text.lstrip("\ufeff"))))
    header = rows[0]
    assert header[:6] == ["이름", "이메일", "실명", "전화번호", "1주차 제출", "1주차 평가"]
    assert header[6] == "1주차 제출개수"
    assert "2주차 제출개수" not in header

    by_email = {row[1]: dict(zip(header, row)) for row in rows[1:]}
    member = by_email["member@example.com"]
    assert member["1주차 제출"] == "O"
    assert member["1주차 평가"] == "통과"
    assert member["1주차 제출개수"] == "2"
    assert member["2주차 제출"] == "X"
    assert member["2주차 평가"] == "-"

    other = by_email["other@example.com"]
    assert other["2주차 제출"] == "O"
    assert other["2주차 평가"] == "미평가"
    assert other["1주차 제출개수"] == ""
    assert "admin@example.com" not in by_email
