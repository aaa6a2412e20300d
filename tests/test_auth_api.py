from models.user import User
from services.errors import AuthError, ErrorKind


def _register(client, email="a@b.com", password="pw123456"):
    return client.post("/api/v1/register", json={"email": email, "password": password})


def _login(client, email="a@b.com", password="pw123456"):
    return client.post("/api/v1/login", json={"email": email, "password": password})


def _bearer(token, scheme="Bearer"):
    return {"Authorization": f"{scheme} {token}"}


def test_health(client):
    res = client.get("/api/v1/health")
    assert res.status_code == 200
    assert res.get_json()["status"] == "ok"


def test_register_login_refresh_revoke_flow(client):
    res = _register(client)
    assert res.status_code == 201
    user = res.get_json()["data"]
    assert user["email"] == "a@b.com"
    assert user["is_admin"] is False
    assert "password" not in user and "password_hash" not in user

    res = _login(client)
    assert res.status_code == 200
    tokens = res.get_json()
    assert tokens["token_type"] == "bearer"

    res = client.get("/api/v1/me", headers=_bearer(tokens["access_token"]))
    assert res.status_code == 200
    claims = res.get_json()["data"]
    assert claims["user_id"] == user["id"]
    assert claims["is_admin"] is False

    res = client.post("/api/v1/refresh", headers=_bearer(tokens["refresh_token"]))
    assert res.status_code == 200
    rotated = res.get_json()
    assert rotated["refresh_token"] != tokens["refresh_token"]

    # replay of the consumed token
    res = client.post("/api/v1/refresh", headers=_bearer(tokens["refresh_token"]))
    assert res.status_code == 401
    assert res.get_json()["error"] == "INVALID_TOKEN"

    res = client.post("/api/v1/revoke", headers=_bearer(rotated["refresh_token"]))
    assert res.status_code == 204
    res = client.post("/api/v1/revoke", headers=_bearer(rotated["refresh_token"]))
    assert res.status_code == 204


def test_bearer_scheme_is_case_insensitive(client):
    _register(client)
    tokens = _login(client).get_json()
    res = client.get("/api/v1/me", headers=_bearer(tokens["access_token"], scheme="bEaReR"))
    assert res.status_code == 200


def test_register_taken_email_is_400(client):
    _register(client)
    res = _register(client)
    assert res.status_code == 400
    assert res.get_json()["error"] == "EMAIL_TAKEN"


def test_register_validation_error_is_422(client):
    res = client.post("/api/v1/register", json={"email": "not-an-email"})
    assert res.status_code == 422
    body = res.get_json()
    assert body["error"] == "VALIDATION_ERROR"
    assert "email" in body["details"] and "password" in body["details"]


def test_login_failures_are_identical(client):
    _register(client)
    missing = _login(client, email="missing@b.com", password="x")
    wrong = _login(client, password="wrongpw")

    assert missing.status_code == wrong.status_code == 401
    assert missing.get_json() == wrong.get_json()


def test_missing_or_malformed_authorization_is_401(client):
    for headers in ({}, {"Authorization": "Basic abc"}, {"Authorization": "Bearer "}):
        assert client.post("/api/v1/refresh", headers=headers).status_code == 401
        assert client.post("/api/v1/revoke", headers=headers).status_code == 401
        assert client.get("/api/v1/me", headers=headers).status_code == 401


def test_invalid_token_is_401(client):
    res = client.get("/api/v1/me", headers=_bearer("x.y.z"))
    assert res.status_code == 401
    assert res.get_json()["error"] == "INVALID_TOKEN"


def test_refresh_token_cannot_authenticate_requests(client):
    _register(client)
    tokens = _login(client).get_json()
    res = client.get("/api/v1/me", headers=_bearer(tokens["refresh_token"]))
    assert res.status_code == 401


def test_update_permissions_requires_admin(client, app_service):
    user = app_service.register(User(email="plain@b.com"), "plainpass")
    token = app_service.login("plain@b.com", "plainpass").access_token

    res = client.put(
        f"/api/v1/users/{user.id}/permissions",
        json={"is_admin": True},
        headers=_bearer(token),
    )
    assert res.status_code == 403

    res = client.put(f"/api/v1/users/{user.id}/permissions", json={"is_admin": True})
    assert res.status_code == 401


def test_update_permissions_as_admin(client, app_service, admin_token):
    user = app_service.register(User(email="plain@b.com"), "plainpass")

    res = client.put(
        f"/api/v1/users/{user.id}/permissions",
        json={"is_admin": True},
        headers=_bearer(admin_token),
    )
    assert res.status_code == 204
    assert app_service.store.get_user_by_id(user.id).is_admin is True

    res = client.put(
        "/api/v1/users/999999/permissions",
        json={"is_admin": True},
        headers=_bearer(admin_token),
    )
    assert res.status_code == 404
    assert res.get_json()["error"] == "NOT_FOUND"

    res = client.put(
        f"/api/v1/users/{user.id}/permissions",
        json={},
        headers=_bearer(admin_token),
    )
    assert res.status_code == 422


def test_internal_errors_do_not_leak(client, app_service, monkeypatch):
    def fail(user, password):
        raise AuthError(ErrorKind.INTERNAL, "failed to register user: connection refused on 10.0.0.5")

    monkeypatch.setattr(app_service, "register", fail)
    res = _register(client)

    assert res.status_code == 500
    body = res.get_json()
    assert body["error"] == "INTERNAL_ERROR"
    assert "10.0.0.5" not in res.get_data(as_text=True)


def test_wrong_method_keeps_its_own_error_code(client):
    res = client.get("/api/v1/login")
    assert res.status_code == 405
    assert res.get_json()["error"] == "METHOD_NOT_ALLOWED"
