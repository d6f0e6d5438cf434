"""게시글/댓글/하트 API와 집계 카운터 동작을 검증하는 테스트입니다."""

from datetime import datetime

from homework_board.models.post import Comment, Heart, Post
from homework_board.models.user import User
from homework_board.services import post_service
from tests.conftest import TestingSession, auth_headers


def _post_payload(**overrides):
    payload = {
        "title": "1주차 과제 제출",
        "content": "과제 내용",
        "week": "1주차 과제",
        "image_url": "/uploads/post/user-001/a.png",
    }
    payload.update(overrides)
    return payload


def _create_post(client, headers, **overrides) -> dict:
    resp = client.post("/api/posts", json=_post_payload(**overrides), headers=headers)
    assert resp.status_code == 200, resp.text
    return resp.json()


def test_create_and_get_post(client, seed_users):
    headers = auth_headers(client, "user-001")
    post = _create_post(client, headers)
    assert post["heart_count"] == 0
    assert post["comment_count"] == 0
    assert post["is_own"] is True

    resp = client.get(f"/api/posts/{post['id']}", headers=headers)
    assert resp.status_code == 200
    data = resp.json()
    assert data["title"] == "1주차 과제 제출"
    assert data["author"]["name"] == "김철수"
    assert data["comments"] == []


def test_create_post_rejects_unknown_week(client, seed_users):
    headers = auth_headers(client, "user-001")
    resp = client.post("/api/posts", json=_post_payload(week="7주차 과제"), headers=headers)
    assert resp.status_code == 422


def test_unverified_user_cannot_read(client, db, seed_users):
    db.add(User(id="user-999", email="x@example.com", name="미인증"))
    db.commit()
    headers = auth_headers(client, "user-999")
    resp = client.get("/api/posts", headers=headers)
    assert resp.status_code == 403
    assert resp.json()["code"] == "unauthorized"


def test_heart_toggle_is_idempotent_pair(client, db, seed_users):
    headers = auth_headers(client, "user-001")
    post = _create_post(client, headers)
    db.query(Post).filter(Post.id == post["id"]).update({"heart_count": 5})
    db.commit()

    other = auth_headers(client, "user-002")
    first = client.post(f"/api/posts/{post['id']}/heart", headers=other).json()
    assert first == {"post_id": post["id"], "liked": True, "heart_count": 6}

    detail = client.get(f"/api/posts/{post['id']}", headers=other).json()
    assert detail["is_liked"] is True

    second = client.post(f"/api/posts/{post['id']}/heart", headers=other).json()
    assert second == {"post_id": post["id"], "liked": False, "heart_count": 5}
    assert db.query(Heart).filter(Heart.post_id == post["id"]).count() == 0


def test_soft_deleted_post_hidden(client, seed_users):
    headers = auth_headers(client, "user-001")
    post = _create_post(client, headers)

    assert client.delete(f"/api/posts/{post['id']}", headers=headers).status_code == 200

    listing = client.get("/api/posts", headers=headers).json()
    assert listing["total"] == 0
    resp = client.get(f"/api/posts/{post['id']}", headers=headers)
    assert resp.status_code == 404
    assert resp.json()["code"] == "not_found"
    assert client.post(f"/api/posts/{post['id']}/heart", headers=headers).status_code == 404


def test_list_sort_and_filters(client, db, seed_users):
    member = auth_headers(client, "user-001")
    other = auth_headers(client, "user-002")
    first = _create_post(client, member, title="첫 글")
    second = _create_post(client, member, title="둘째 글", week="2주차 과제")
    third = _create_post(client, other, title="셋째 글")
    db.query(Post).filter(Post.id == first["id"]).update({"heart_count": 3})
    db.query(Post).filter(Post.id == third["id"]).update({"heart_count": 1})
    db.commit()

    latest = client.get("/api/posts", headers=member).json()
    assert [p["id"] for p in latest["items"]] == [third["id"], second["id"], first["id"]]

    popular = client.get("/api/posts", params={"sort": "popular"}, headers=member).json()
    assert [p["id"] for p in popular["items"]] == [first["id"], third["id"], second["id"]]

    mine = client.get("/api/posts", params={"mine": True}, headers=member).json()
    assert mine["total"] == 2
    assert all(p["is_own"] for p in mine["items"])

    week = client.get("/api/posts", params={"week": "2주차 과제"}, headers=member).json()
    assert [p["id"] for p in week["items"]] == [second["id"]]

    page = client.get("/api/posts", params={"limit": 1, "offset": 1}, headers=member).json()
    assert page["total"] == 3
    assert [p["id"] for p in page["items"]] == [second["id"]]


def test_only_owner_can_edit(client, seed_users):
    member = auth_headers(client, "user-001")
    other = auth_headers(client, "user-002")
    admin = auth_headers(client, "admin-001")
    post = _create_post(client, member)

    resp = client.put(f"/api/posts/{post['id']}", json={"title": "남의 글"}, headers=other)
    assert resp.status_code == 403
    assert resp.json()["code"] == "unauthorized"
    assert client.put(f"/api/posts/{post['id']}", json={"title": "관리자"}, headers=admin).status_code == 403

    resp = client.put(f"/api/posts/{post['id']}", json={"title": "수정됨", "week": "공지"}, headers=member)
    assert resp.status_code == 200
    assert resp.json()["title"] == "수정됨"
    assert resp.json()["week"] == "공지"


def test_delete_permissions(client, db, seed_users):
    member = auth_headers(client, "user-001")
    other = auth_headers(client, "user-002")
    admin = auth_headers(client, "admin-001")
    post = _create_post(client, member)

    assert client.delete(f"/api/posts/{post['id']}", headers=other).status_code == 403
    assert client.delete(f"/api/posts/{post['id']}/hard", headers=member).status_code == 403
    assert client.delete(f"/api/posts/{post['id']}", headers=admin).status_code == 200

    # 소프트 삭제된 글도 관리자는 영구 삭제할 수 있다.
    assert client.delete(f"/api/posts/{post['id']}/hard", headers=admin).status_code == 200
    assert db.query(Post).filter(Post.id == post["id"]).first() is None


def test_hard_delete_removes_children(client, db, seed_users):
    member = auth_headers(client, "user-001")
    admin = auth_headers(client, "admin-001")
    post = _create_post(client, member)
    client.post(f"/api/posts/{post['id']}/comments", json={"content": "댓글"}, headers=member)
    client.post(f"/api/posts/{post['id']}/heart", headers=member)

    assert client.delete(f"/api/posts/{post['id']}/hard", headers=admin).status_code == 200
    assert db.query(Comment).filter(Comment.post_id == post["id"]).count() == 0
    assert db.query(Heart).filter(Heart.post_id == post["id"]).count() == 0


def _comment_count(db, post_id: int) -> int:
    db.expire_all()
    return db.query(Post.comment_count).filter(Post.id == post_id).scalar()


def test_comment_counter_tracks_visible_comments(client, db, seed_users):
    member = auth_headers(client, "user-001")
    other = auth_headers(client, "user-002")
    admin = auth_headers(client, "admin-001")
    post = _create_post(client, member)

    c1 = client.post(f"/api/posts/{post['id']}/comments", json={"content": "첫 댓글"}, headers=other).json()
    c2 = client.post(f"/api/posts/{post['id']}/comments", json={"content": "둘째 댓글"}, headers=member).json()
    assert c1["is_own"] is True
    assert _comment_count(db, post["id"]) == 2

    assert client.delete(f"/api/comments/{c1['id']}", headers=other).status_code == 200
    assert _comment_count(db, post["id"]) == 1

    comments = client.get(f"/api/posts/{post['id']}/comments", headers=member).json()
    assert [c["id"] for c in comments] == [c2["id"]]

    # 이미 소프트 삭제된 댓글의 영구 삭제는 카운터를 다시 줄이지 않는다.
    assert client.delete(f"/api/comments/{c1['id']}/hard", headers=admin).status_code == 200
    assert _comment_count(db, post["id"]) == 1

    assert client.delete(f"/api/comments/{c2['id']}/hard", headers=admin).status_code == 200
    assert _comment_count(db, post["id"]) == 0


def test_comment_permissions(client, seed_users):
    member = auth_headers(client, "user-001")
    other = auth_headers(client, "user-002")
    admin = auth_headers(client, "admin-001")
    post = _create_post(client, member)
    comment = client.post(f"/api/posts/{post['id']}/comments", json={"content": "댓글"}, headers=member).json()

    assert client.put(f"/api/comments/{comment['id']}", json={"content": "x"}, headers=other).status_code == 403
    assert client.delete(f"/api/comments/{comment['id']}", headers=other).status_code == 403
    assert client.delete(f"/api/comments/{comment['id']}/hard", headers=member).status_code == 403

    resp = client.put(f"/api/comments/{comment['id']}", json={"content": "수정"}, headers=member)
    assert resp.status_code == 200
    assert resp.json()["content"] == "수정"

    assert client.delete(f"/api/comments/{comment['id']}", headers=admin).status_code == 200
    assert client.put(f"/api/comments/{comment['id']}", json={"content": "다시"}, headers=member).status_code == 404


def test_blank_comment_rejected(client, seed_users):
    member = auth_headers(client, "user-001")
    post = _create_post(client, member)
    resp = client.post(f"/api/posts/{post['id']}/comments", json={"content": "   "}, headers=member)
    assert resp.status_code == 400
    assert resp.json()["code"] == "invalid_format"


def test_created_at_ordering_ties_break_by_id(client, db, seed_users):
    member = auth_headers(client, "user-001")
    a = _create_post(client, member, title="A")
    b = _create_post(client, member, title="B")
    same = datetime(2026, 3, 1, 9, 0, 0)
    db.query(Post).update({"created_at": same})
    db.commit()

    latest = client.get("/api/posts", headers=member).json()
    assert [p["id"] for p in latest["items"]] == [b["id"], a["id"]]


def _seed_post(db, **kwargs) -> Post:
    post = Post(user_id="user-001", title="과제", content="", week="1주차 과제", image_url="/uploads/a.png", **kwargs)
    db.add(post)
    db.commit()
    db.refresh(post)
    return post


def test_concurrent_unlike_keeps_heart_count(db, seed_users, monkeypatch):
    post = _seed_post(db, heart_count=1)
    db.add(Heart(post_id=post.id, user_id="user-002"))
    db.commit()

    real_find = post_service._find_heart
    raced = []

    def find_then_unlike(session, post_id, user_id):
        heart = real_find(session, post_id, user_id)
        if not raced:
            # 조회 직후 같은 사용자의 다른 요청이 먼저 좋아요를 취소한 상황
            raced.append(True)
            other = TestingSession()
            try:
                post_service.toggle_heart(other, post_id, other.get(User, user_id))
            finally:
                other.close()
        return heart

    monkeypatch.setattr(post_service, "_find_heart", find_then_unlike)

    result = post_service.toggle_heart(db, post.id, seed_users["other"])
    assert result == {"post_id": post.id, "liked": False, "heart_count": 0}

    db.expire_all()
    hearts = db.query(Heart).filter(Heart.post_id == post.id).count()
    assert db.query(Post.heart_count).filter(Post.id == post.id).scalar() == hearts == 0


def test_concurrent_comment_delete_keeps_comment_count(db, seed_users, monkeypatch):
    post = _seed_post(db, comment_count=1)
    comment = Comment(post_id=post.id, user_id="user-002", content="댓글")
    db.add(comment)
    db.commit()

    real_get = post_service.get_comment
    raced = []

    def get_then_delete(session, comment_id):
        found = real_get(session, comment_id)
        if not raced:
            raced.append(True)
            other = TestingSession()
            try:
                post_service.soft_delete_comment(other, comment_id, other.get(User, "user-002"))
            finally:
                other.close()
        return found

    monkeypatch.setattr(post_service, "get_comment", get_then_delete)

    post_service.soft_delete_comment(db, comment.id, seed_users["other"])

    db.expire_all()
    visible = (
        db.query(Comment)
        .filter(Comment.post_id == post.id, Comment.is_deleted == False)  # noqa: E712
        .count()
    )
    assert db.query(Post.comment_count).filter(Post.id == post.id).scalar() == visible == 0


def test_comments_on_deleted_post_are_frozen(client, db, seed_users):
    member = auth_headers(client, "user-001")
    other = auth_headers(client, "user-002")
    post = _create_post(client, member)
    comment = client.post(f"/api/posts/{post['id']}/comments", json={"content": "댓글"}, headers=other).json()

    assert client.delete(f"/api/posts/{post['id']}", headers=member).status_code == 200

    assert client.put(f"/api/comments/{comment['id']}", json={"content": "수정"}, headers=other).status_code == 404
    assert client.delete(f"/api/comments/{comment['id']}", headers=other).status_code == 404
    assert _comment_count(db, post["id"]) == 1
