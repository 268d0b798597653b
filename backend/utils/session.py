# utils/session.py
import logging
import secrets
import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional, Tuple

from fastapi import Depends, HTTPException, Request, Response, status
from jose import jwt, JWTError
from sqlalchemy.orm import Session

from config import settings
from database import get_db
from models.session import SessionRecord
from models.users import User, UserRole
from schemas.user import UserResponse

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def user_snapshot(user: User) -> Dict[str, Any]:
    """JSON-safe copy of the user cached in the session (no password)."""
    return UserResponse.model_validate(user).model_dump(mode="json", by_alias=True)


# ==================== SESSION STORES ====================

class SessionStore(ABC):
    """Server-side session storage keyed by an opaque session id."""

    @abstractmethod
    def get(self, session_id: str) -> Optional[Dict[str, Any]]:
        ...

    @abstractmethod
    def save(self, session_id: str, data: Dict[str, Any], expires_at: datetime) -> None:
        ...

    @abstractmethod
    def delete(self, session_id: str) -> None:
        ...


class InMemorySessionStore(SessionStore):
    def __init__(self):
        self._sessions: Dict[str, Tuple[Dict[str, Any], datetime]] = {}
        self._lock = threading.Lock()

    def get(self, session_id):
        with self._lock:
            entry = self._sessions.get(session_id)
            if entry is None:
                return None
            data, expires_at = entry
            if expires_at <= _utcnow():
                del self._sessions[session_id]
                return None
            return dict(data)

    def save(self, session_id, data, expires_at):
        with self._lock:
            self._sessions[session_id] = (dict(data), expires_at)

    def delete(self, session_id):
        with self._lock:
            self._sessions.pop(session_id, None)

    def clear(self):
        with self._lock:
            self._sessions.clear()


class DatabaseSessionStore(SessionStore):
    def __init__(self, db: Session):
        self.db = db

    def get(self, session_id):
        record = (
            self.db.query(SessionRecord)
            .filter(SessionRecord.id == session_id, SessionRecord.expires_at > _utcnow())
            .first()
        )
        if record is None:
            return None
        return {"user_id": record.user_id, "user": record.data}

    def save(self, session_id, data, expires_at):
        # Expired rows are dropped whenever a session is written
        self.db.query(SessionRecord).filter(SessionRecord.expires_at <= _utcnow()).delete(synchronize_session=False)
        record = self.db.query(SessionRecord).filter(SessionRecord.id == session_id).first()
        if record is None:
            record = SessionRecord(id=session_id, user_id=data["user_id"])
            self.db.add(record)
        record.data = data.get("user")
        record.expires_at = expires_at
        self.db.commit()

    def delete(self, session_id):
        self.db.query(SessionRecord).filter(SessionRecord.id == session_id).delete(synchronize_session=False)
        self.db.commit()


memory_store = InMemorySessionStore()


def get_session_store(db: Session = Depends(get_db)) -> SessionStore:
    if settings.SESSION_BACKEND == "database":
        return DatabaseSessionStore(db)
    return memory_store


# ==================== COOKIE ====================

# The cookie carries only the signed session id and its expiry
def create_session_token(session_id: str, expires_at: datetime) -> str:
    return jwt.encode({"sid": session_id, "exp": expires_at}, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def read_session_id(token: Optional[str]) -> Optional[str]:
    if not token:
        return None
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError:
        return None
    return payload.get("sid")


def start_session(response: Response, store: SessionStore, user: User, previous_token: Optional[str] = None) -> str:
    """Create a new session for user and set the cookie; any previous session is discarded."""
    previous_id = read_session_id(previous_token)
    if previous_id:
        store.delete(previous_id)

    session_id = secrets.token_urlsafe(32)
    expires_at = _utcnow() + timedelta(minutes=settings.SESSION_EXPIRE_MINUTES)
    store.save(session_id, {"user_id": user.id, "user": user_snapshot(user)}, expires_at)

    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=create_session_token(session_id, expires_at),
        max_age=settings.SESSION_EXPIRE_MINUTES * 60,
        httponly=True,
        secure=settings.SESSION_COOKIE_SECURE,
        samesite="lax",
    )
    return session_id


def end_session(request: Request, response: Response, store: SessionStore) -> None:
    session_id = read_session_id(request.cookies.get(settings.SESSION_COOKIE_NAME))
    if session_id:
        store.delete(session_id)
    response.delete_cookie(settings.SESSION_COOKIE_NAME)


# ==================== REQUEST CONTEXT ====================

@dataclass
class AuthContext:
    """Authenticated caller of the current request."""
    session_id: str
    user: User
    store: SessionStore

    def refresh_user(self) -> None:
        """Re-cache the user snapshot after the user row changed."""
        data = self.store.get(self.session_id)
        if data is None:
            return
        data["user"] = user_snapshot(self.user)
        expires_at = _utcnow() + timedelta(minutes=settings.SESSION_EXPIRE_MINUTES)
        self.store.save(self.session_id, data, expires_at)


def get_auth_context(
    request: Request,
    db: Session = Depends(get_db),
    store: SessionStore = Depends(get_session_store),
) -> AuthContext:
    unauthorized = HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")

    session_id = read_session_id(request.cookies.get(settings.SESSION_COOKIE_NAME))
    if session_id is None:
        raise unauthorized

    data = store.get(session_id)
    if data is None:
        raise unauthorized

    # Always resolve the live row so role changes and deletions apply immediately
    user = db.query(User).filter(User.id == data["user_id"]).first()
    if user is None:
        store.delete(session_id)
        raise unauthorized

    return AuthContext(session_id=session_id, user=user, store=store)


def get_current_user(ctx: AuthContext = Depends(get_auth_context)) -> User:
    return ctx.user


# Dependency factory for Role-Based Access Control
def role_required(*allowed_roles: UserRole):
    def _checker(current_user: User = Depends(get_current_user)):
        if allowed_roles and current_user.role not in allowed_roles:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Admin access required"
            )
        return current_user
    return _checker


require_admin = role_required(UserRole.ADMINISTRADOR)
