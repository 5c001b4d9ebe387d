from fastapi.testclient import TestClient

from redeemhub.exceptions import AuthenticationError
from redeemhub.main import app
from redeemhub.services.auth_service import Principal, get_credential_verifier

client = TestClient(app)


def test_admin_login():
    res = client.post(
        "/api/login", json={"username": "admin", "password": "admin123", "role": "admin"}
    )
    assert res.status_code == 200
    assert res.json() == {
        "success": True,
        "role": "admin",
        "username": "admin",
        "name": "Administrator",
    }


def test_admin_login_wrong_password():
    res = client.post("/api/login", json={"username": "admin", "password": "x", "role": "admin"})
    assert res.status_code == 401
    assert res.json() == {"error": "Invalid admin credentials"}


def test_user_login_defaults_name():
    res = client.post("/api/login", json={"password": "1", "role": "user"})
    assert res.status_code == 200
    body = res.json()
    assert body["role"] == "user"
    assert body["username"] == "user"
    assert body["name"] == "User"


def test_user_login_keeps_username():
    res = client.post("/api/login", json={"username": "budi", "password": "1"})
    assert res.status_code == 200
    assert res.json()["name"] == "budi"


def test_user_login_wrong_password():
    res = client.post("/api/login", json={"username": "budi", "password": "2", "role": "user"})
    assert res.status_code == 401
    assert "Use password: 1" in res.json()["error"]


class _OnlyAlice:
    def verify(self, username, password, role):
        if username == "alice" and password == "s3cret":
            return Principal(role="admin", username="alice", name="Alice")
        raise AuthenticationError("nope")


def test_verifier_can_be_swapped():
    app.dependency_overrides[get_credential_verifier] = lambda: _OnlyAlice()
    try:
        ok = client.post("/api/login", json={"username": "alice", "password": "s3cret"})
        assert ok.status_code == 200
        assert ok.json()["name"] == "Alice"

        # the static admin pair no longer works
        bad = client.post(
            "/api/login", json={"username": "admin", "password": "admin123", "role": "admin"}
        )
        assert bad.status_code == 401
        assert bad.json() == {"error": "nope"}
    finally:
        app.dependency_overrides.clear()
