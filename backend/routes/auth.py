# backend/routes/auth.py
import logging

from fastapi import APIRouter, Depends, HTTPException, status, Request, Response
from sqlalchemy.orm import Session

from config import settings
from database import get_db
from models.users import User
from schemas import user as schemas
from schemas.base import MessageResponse
from storage import DatabaseStorage
from utils.hashing import get_password_hash, verify_password
from utils.session import (
    AuthContext, SessionStore, end_session, get_auth_context, get_current_user,
    get_session_store, start_session,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["Auth"])


# Authenticate user and open a server-side session
@router.post("/login", response_model=schemas.LoginResponse)
def login(
    payload: schemas.UserLogin,
    request: Request,
    response: Response,
    db: Session = Depends(get_db),
    store: SessionStore = Depends(get_session_store),
):
    storage = DatabaseStorage(db)
    db_user = storage.get_user_by_username(payload.username)

    # Same answer for unknown user and wrong password
    if not db_user or not verify_password(payload.password, db_user.password):
        logger.warning("Failed login for username=%s", payload.username)
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials")

    start_session(response, store, db_user, previous_token=request.cookies.get(settings.SESSION_COOKIE_NAME))
    logger.info("User %s logged in", db_user.username)

    return {"user": db_user, "is_first_login": bool(db_user.is_first_login)}


# Replace the password; also ends the first-login flow
@router.post("/change-password", response_model=MessageResponse)
def change_password(
    payload: schemas.PasswordChange,
    ctx: AuthContext = Depends(get_auth_context),
    db: Session = Depends(get_db),
):
    storage = DatabaseStorage(db)
    storage.update_user_password(ctx.user, get_password_hash(payload.new_password))
    ctx.refresh_user()
    logger.info("User %s changed password", ctx.user.username)
    return {"message": "Password changed successfully"}


@router.post("/logout", response_model=MessageResponse)
def logout(
    request: Request,
    response: Response,
    store: SessionStore = Depends(get_session_store),
):
    end_session(request, response, store)
    return {"message": "Logged out successfully"}


# Retrieve current authenticated user details
@router.get("/user", response_model=schemas.UserResponse)
def me(current_user: User = Depends(get_current_user)):
    return current_user
