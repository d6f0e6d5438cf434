from tests.conftest import auth_headers


def test_get_and_update_profile(client, seed_users):
    headers = auth_headers(client, "user-001")
    assert client.get("/api/users/me", headers=headers).json()["name"] == "김철수"

    resp = client.patch("/api/users/me", json={"name": " 김철수2 ", "profile_image": "/uploads/profile/a.png"}, headers=headers)
    assert resp.status_code == 200
    assert resp.json()["name"] == "김철수2"
    assert resp.json()["profile_image"] == "/uploads/profile/a.png"


def test_update_profile_rejects_blank_name(client, seed_users):
    headers = auth_headers(client, "user-001")
    resp = client.patch("/api/users/me", json={"name": "  "}, headers=headers)
    assert resp.status_code == 400
    assert resp.json()["code"] == "invalid_format"


def test_admin_lists_users(client, seed_users):
    admin = auth_headers(client, "admin-001")
    resp = client.get("/api/users", headers=admin)
    assert resp.status_code == 200
    assert {u["id"] for u in resp.json()} == {"admin-001", "user-001", "user-002"}

    resp = client.get("/api/users", params={"role": "user"}, headers=admin)
    assert {u["id"] for u in resp.json()} == {"user-001", "user-002"}

    assert client.get("/api/users/user-002", headers=admin).json()["email"] == "other@example.com"
    assert client.get("/api/users/nobody", headers=admin).status_code == 404


def test_non_admin_cannot_list_users(client, seed_users):
    headers = auth_headers(client, "user-001")
    assert client.get("/api/users", headers=headers).status_code == 403
