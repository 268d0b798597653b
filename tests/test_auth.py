from fastapi.testclient import TestClient

from config import settings
from main import app
from models.users import User, UserRole
from utils.hashing import get_password_hash, verify_password
from helpers import ADMIN_PASSWORD, WORKER_PASSWORD, login


def test_root_reports_running(client):
    response = client.get("/")
    assert response.status_code == 200
    assert response.json() == {"message": "PalletFlow API is running"}


def test_login_sets_session_cookie_and_hides_password(client, admin_user):
    response = login(client, "ana", ADMIN_PASSWORD)

    assert response.status_code == 200
    body = response.json()
    assert body["user"]["username"] == "ana"
    assert body["user"]["role"] == "administrador"
    assert body["isFirstLogin"] is False
    assert "password" not in body["user"]
    assert settings.SESSION_COOKIE_NAME in response.cookies


def test_login_wrong_password_is_401(client, admin_user):
    response = login(client, "ana", "nope")
    assert response.status_code == 401
    assert response.json() == {"message": "Invalid credentials"}


def test_login_unknown_user_gets_same_answer(client):
    response = login(client, "ghost", "whatever")
    assert response.status_code == 401
    assert response.json()["message"] == "Invalid credentials"


def test_login_long_wrong_password_is_401(client, admin_user):
    response = login(client, "ana", "x" * 100)
    assert response.status_code == 401
    assert response.json() == {"message": "Invalid credentials"}


def test_login_missing_fields_is_400(client):
    response = client.post("/api/auth/login", json={"username": "ana"})
    assert response.status_code == 400
    assert response.json()["message"] == "Invalid request data"
    assert response.json()["errors"]


def test_current_user_requires_session(client):
    response = client.get("/api/auth/user")
    assert response.status_code == 401
    assert response.json() == {"message": "Unauthorized"}


def test_current_user_after_login(admin_client):
    response = admin_client.get("/api/auth/user")
    assert response.status_code == 200
    assert response.json()["username"] == "ana"
    assert "password" not in response.json()


def test_tampered_cookie_is_rejected(client, admin_user):
    client.cookies.set(settings.SESSION_COOKIE_NAME, "not-a-token")
    assert client.get("/api/auth/user").status_code == 401


def test_logout_ends_session(admin_client):
    response = admin_client.post("/api/auth/logout")
    assert response.status_code == 200
    assert response.json() == {"message": "Logged out successfully"}
    assert admin_client.get("/api/auth/user").status_code == 401


def test_logout_without_session_still_succeeds(client):
    assert client.post("/api/auth/logout").status_code == 200


def test_login_again_rotates_session(client, admin_user):
    login(client, "ana", ADMIN_PASSWORD)
    old_cookie = client.cookies.get(settings.SESSION_COOKIE_NAME)

    login(client, "ana", ADMIN_PASSWORD)
    new_cookie = client.cookies.get(settings.SESSION_COOKIE_NAME)
    assert new_cookie != old_cookie

    # The replaced session no longer authenticates
    stale = TestClient(app)
    stale.cookies.set(settings.SESSION_COOKIE_NAME, old_cookie)
    assert stale.get("/api/auth/user").status_code == 401
    assert client.get("/api/auth/user").status_code == 200


def test_first_login_flag_and_password_change(client, db):
    user = User(
        name="Nova",
        nickname="Nova",
        username="nova",
        password=get_password_hash("temp"),
        role=UserRole.ARMAZENISTA,
        is_first_login=True,
    )
    db.add(user)
    db.commit()

    response = login(client, "nova", "temp")
    assert response.json()["isFirstLogin"] is True

    response = client.post(
        "/api/auth/change-password",
        json={"newPassword": "segredo1", "confirmPassword": "segredo1"},
    )
    assert response.status_code == 200
    assert response.json() == {"message": "Password changed successfully"}

    # The session survives the change and reports the cleared flag
    me = client.get("/api/auth/user").json()
    assert me["isFirstLogin"] is False

    db.expire_all()
    stored = db.query(User).filter(User.username == "nova").one()
    assert verify_password("segredo1", stored.password)
    assert not verify_password("temp", stored.password)

    fresh = TestClient(app)
    assert login(fresh, "nova", "temp").status_code == 401
    assert login(fresh, "nova", "segredo1").json()["isFirstLogin"] is False


def test_change_password_requires_session(client):
    response = client.post(
        "/api/auth/change-password",
        json={"newPassword": "segredo1", "confirmPassword": "segredo1"},
    )
    assert response.status_code == 401


def test_change_password_mismatch_is_400(worker_client):
    response = worker_client.post(
        "/api/auth/change-password",
        json={"newPassword": "segredo1", "confirmPassword": "segredo2"},
    )
    assert response.status_code == 400


def test_change_password_too_short_is_400(worker_client):
    response = worker_client.post(
        "/api/auth/change-password",
        json={"newPassword": "abc", "confirmPassword": "abc"},
    )
    assert response.status_code == 400


def test_change_password_over_72_bytes_is_400(worker_client, client, worker_user):
    response = worker_client.post(
        "/api/auth/change-password",
        json={"newPassword": "é" * 40, "confirmPassword": "é" * 40},
    )
    assert response.status_code == 400
    assert login(client, worker_user.username, WORKER_PASSWORD).status_code == 200


def test_deleted_user_loses_session(admin_client, worker_client, worker_user):
    assert worker_client.get("/api/auth/user").status_code == 200
    assert admin_client.delete(f"/api/users/{worker_user.id}").status_code == 200
    assert worker_client.get("/api/auth/user").status_code == 401


def test_role_change_applies_to_live_session(admin_client, worker_client, worker_user):
    assert worker_client.get("/api/users").status_code == 403
    admin_client.put(f"/api/users/{worker_user.id}", json={"role": "administrador"})
    assert worker_client.get("/api/users").status_code == 200


def test_worker_password_still_valid(client, worker_user):
    assert login(client, "bruno", WORKER_PASSWORD).status_code == 200
