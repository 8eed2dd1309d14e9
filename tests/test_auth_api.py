from fastapi.testclient import TestClient


def test_default_admin_is_seeded_and_logged_in(client):
    res = client.get("/api/auth/user")
    assert res.status_code == 200
    body = res.json()
    assert body["username"] == "admin"
    assert body["role"] == "admin"
    assert "orders.approve" in body["capabilities"]


def test_requests_without_session_are_401(app, client):
    anon = TestClient(app)
    res = anon.get("/api/orders")
    assert res.status_code == 401
    assert res.json() == {"message": "Not authenticated"}


def test_bad_password_is_rejected(app, client):
    anon = TestClient(app)
    res = anon.post("/api/auth/login", json={"username": "admin", "password": "nope"})
    assert res.status_code == 401
    assert res.json()["message"] == "Invalid username or password"


def test_logout_clears_session(client):
    assert client.post("/api/auth/logout").status_code == 200
    assert client.get("/api/auth/user").status_code == 401


def test_capabilities_follow_flags(make_user, client_for):
    make_user("mama", can_approve=True)
    body = client_for("mama").get("/api/auth/user").json()
    assert "orders.approve" in body["capabilities"]
    assert "trips.approve" not in body["capabilities"]


def test_suspended_user_loses_session(client, make_user, client_for):
    sara = make_user("sara")
    sara_client = client_for("sara")
    assert client.patch(f"/api/users/{sara['id']}/suspend", json={"is_suspended": True}).status_code == 200

    res = sara_client.get("/api/auth/user")
    assert res.status_code == 401


def test_only_user_managers_create_users(make_user, client_for):
    make_user("sara")
    res = client_for("sara").post(
        "/api/admin/create-user", json={"username": "other", "password": "secret123"}
    )
    assert res.status_code == 403
    assert res.json()["message"] == "Missing permission: users.manage"


def test_duplicate_username_is_a_validation_error(client, make_user):
    make_user("sara")
    res = client.post("/api/admin/create-user", json={"username": "Sara", "password": "secret123"})
    assert res.status_code == 400
    assert res.json()["message"] == "Username already exists"


def test_request_validation_returns_400_with_message(client):
    res = client.post("/api/admin/create-user", json={"username": "x"})
    assert res.status_code == 400
    assert "message" in res.json()


def test_change_password(make_user, client_for, app):
    make_user("sara")
    sara = client_for("sara")
    res = sara.patch("/api/auth/password", json={"current_password": "secret123", "new_password": "newpass1"})
    assert res.status_code == 200

    fresh = TestClient(app)
    assert fresh.post("/api/auth/login", json={"username": "sara", "password": "newpass1"}).status_code == 200
