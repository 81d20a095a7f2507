from fastapi.testclient import TestClient

from main import app
from tests.conftest import PASSWORD


def _register(client, **overrides):
    payload = {
        "email": "New.User@Darbar.com",
        "password": "Str0ngPass",
        "first_name": "Asha",
        "last_name": "Rao",
        "phone": "+1 (555) 123-4567",
    }
    payload.update(overrides)
    return client.post("/api/auth/register", json=payload)


def test_register_creates_session(client):
    r = _register(client)
    assert r.status_code == 201, r.text
    body = r.json()
    assert body["email"] == "new.user@darbar.com"
    assert body["role"] == "user"
    assert body["gold_member"] is False
    assert body["points"] == 0

    me = client.get("/api/auth/me")
    assert me.status_code == 200
    assert me.json()["id"] == body["id"]


def test_register_rejects_weak_password_with_field_errors(client):
    r = _register(client, password="weak", first_name="A")
    assert r.status_code == 400
    body = r.json()
    assert body["success"] is False
    assert body["error_code"] == "VALIDATION_ERROR"
    fields = {e["field"] for e in body["errors"]}
    assert fields == {"password", "first_name"}


def test_register_rejects_invalid_email_as_field_error(client):
    for email in ("not-an-email", "a@", "two@@darbar.com"):
        r = _register(client, email=email)
        assert r.status_code == 400, email
        assert [e["field"] for e in r.json()["errors"]] == ["email"]


def test_register_rejects_unknown_fields(client):
    r = _register(client, role="admin")
    assert r.status_code == 400
    assert [e["field"] for e in r.json()["errors"]] == ["role"]


def test_login_rejects_malformed_email(client):
    r = client.post("/api/auth/login", json={"email": "nobody", "password": PASSWORD})
    assert r.status_code == 422


def test_register_duplicate_email_conflict(client):
    assert _register(client).status_code == 201
    r = _register(TestClient(app))
    assert r.status_code == 409
    assert r.json()["error_code"] == "CONFLICT_ERROR"


def test_login_bad_password(client, customer_user):
    r = client.post("/api/auth/login", json={"email": customer_user.email, "password": "Nope12345"})
    assert r.status_code == 401
    assert r.json()["detail"] == "Invalid email or password"


def test_me_requires_session(client):
    r = client.get("/api/auth/me")
    assert r.status_code == 401
    assert r.json()["error_code"] == "AUTHENTICATION_ERROR"


def test_logout_clears_session(customer):
    assert customer.post("/api/auth/logout").status_code == 200
    assert customer.get("/api/auth/me").status_code == 401


def test_change_password(customer, customer_user):
    r = customer.post(
        "/api/auth/change-password",
        json={"current_password": PASSWORD, "new_password": "Changed123"},
    )
    assert r.status_code == 200

    fresh = TestClient(app)
    ok = fresh.post("/api/auth/login", json={"email": customer_user.email, "password": "Changed123"})
    assert ok.status_code == 200


def test_change_password_wrong_current(customer):
    r = customer.post(
        "/api/auth/change-password",
        json={"current_password": "Wrong1234", "new_password": "Changed123"},
    )
    assert r.status_code == 401


def test_users_list_admin_only(admin, customer):
    assert customer.get("/api/users/").status_code == 403
    r = admin.get("/api/users/")
    assert r.status_code == 200
    assert {u["email"] for u in r.json()} >= {"admin@darbar.com", "guest@darbar.com"}


def test_user_profile_self_or_admin(customer, customer_user, admin_user, admin):
    assert customer.get(f"/api/users/{customer_user.id}").status_code == 200
    assert customer.get(f"/api/users/{admin_user.id}").status_code == 403
    assert admin.get(f"/api/users/{customer_user.id}").status_code == 200


def test_update_profile(customer, customer_user):
    r = customer.put(f"/api/users/{customer_user.id}", json={"address": "12 Curry Lane", "phone": "5551234567"})
    assert r.status_code == 200
    assert r.json()["address"] == "12 Curry Lane"

    bad = customer.put(f"/api/users/{customer_user.id}", json={"phone": "123"})
    assert bad.status_code == 400


def test_make_gold_member(admin, customer_user):
    r = admin.put(f"/api/users/{customer_user.id}/gold-member")
    assert r.status_code == 200
    assert r.json()["gold_member"] is True


def test_upload_avatar(customer, store):
    r = customer.post("/api/users/me/image", files={"image": ("me.png", b"\x89PNG", "image/png")})
    assert r.status_code == 200
    url = r.json()["image_url"]
    assert url.startswith("/uploads/users/")
    assert [f["url"] for f in store.list()] == [url]
