from datetime import datetime, timedelta, timezone

from fastapi.testclient import TestClient

from config import settings
from main import app
from models.session import SessionRecord
from models.users import User, UserRole
from utils.hashing import verify_password
from utils.seed import ensure_default_admin
from utils.session import (
    DatabaseSessionStore, InMemorySessionStore, create_session_token, read_session_id,
)
from helpers import ADMIN_PASSWORD, login


def in_future(minutes=10):
    return datetime.now(timezone.utc) + timedelta(minutes=minutes)


def test_memory_store_roundtrip_and_expiry():
    store = InMemorySessionStore()
    store.save("live", {"user_id": 1}, in_future())
    store.save("old", {"user_id": 2}, in_future(-1))

    assert store.get("live") == {"user_id": 1}
    assert store.get("old") is None
    store.delete("live")
    assert store.get("live") is None


def test_database_store_roundtrip(db, admin_user):
    store = DatabaseSessionStore(db)
    store.save("abc", {"user_id": admin_user.id, "user": {"username": "ana"}}, in_future())

    assert store.get("abc") == {"user_id": admin_user.id, "user": {"username": "ana"}}
    store.delete("abc")
    assert store.get("abc") is None


def test_database_store_drops_expired_rows(db, admin_user):
    store = DatabaseSessionStore(db)
    store.save("old", {"user_id": admin_user.id}, in_future(-5))
    assert store.get("old") is None

    store.save("new", {"user_id": admin_user.id}, in_future())
    assert db.query(SessionRecord).filter(SessionRecord.id == "old").first() is None


def test_session_token_roundtrip():
    token = create_session_token("sid-1", in_future())
    assert read_session_id(token) == "sid-1"
    assert read_session_id(token + "x") is None
    assert read_session_id(None) is None


def test_expired_session_token_is_ignored():
    assert read_session_id(create_session_token("sid-1", in_future(-1))) is None


def test_login_with_database_backend(monkeypatch, admin_user, db):
    monkeypatch.setattr(settings, "SESSION_BACKEND", "database")
    client = TestClient(app)

    assert login(client, "ana", ADMIN_PASSWORD).status_code == 200
    assert client.get("/api/auth/user").json()["username"] == "ana"
    db.expire_all()
    assert db.query(SessionRecord).filter(SessionRecord.user_id == admin_user.id).count() == 1

    client.post("/api/auth/logout")
    db.expire_all()
    assert db.query(SessionRecord).count() == 0
    assert client.get("/api/auth/user").status_code == 401


def test_default_admin_is_seeded_once(db):
    first = ensure_default_admin(db)
    second = ensure_default_admin(db)

    assert first.id == second.id
    assert db.query(User).filter(User.username == settings.DEFAULT_ADMIN_USERNAME).count() == 1
    assert first.role == UserRole.ADMINISTRADOR
    assert first.is_first_login is True
    assert verify_password(settings.DEFAULT_ADMIN_PASSWORD, first.password)


def test_unknown_route_returns_message(client):
    response = client.get("/api/nothing-here")
    assert response.status_code == 404
    assert response.json() == {"message": "Not Found"}
