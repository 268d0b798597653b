# backend/routes/users.py
import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from database import get_db
from models.users import User
from schemas.base import MessageResponse
from schemas.user import UserCreate, UserResponse, UserUpdate
from storage import DatabaseStorage
from utils.hashing import get_password_hash
from utils.session import require_admin

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/users", tags=["Users"])


def _get_user_or_404(storage: DatabaseStorage, user_id: int) -> User:
    user = storage.get_user(user_id)
    if not user:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return user


# List all users ordered by name (Admin only)
@router.get("", response_model=List[UserResponse])
def list_users(
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    return DatabaseStorage(db).get_all_users()


@router.get("/{user_id}", response_model=UserResponse)
def get_user(
    user_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    return _get_user_or_404(DatabaseStorage(db), user_id)


# Create a user account (Admin only)
@router.post("", response_model=UserResponse)
def create_user(
    payload: UserCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    storage = DatabaseStorage(db)
    if storage.get_user_by_username(payload.username):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Username already exists")

    data = payload.model_dump()
    data["password"] = get_password_hash(payload.password)
    user = storage.create_user(data)

    logger.info("User %s created by %s", user.username, current_user.username)
    return user


# Partial update; a new password is hashed before storing (Admin only)
@router.put("/{user_id}", response_model=UserResponse)
def update_user(
    user_id: int,
    payload: UserUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    storage = DatabaseStorage(db)
    user = _get_user_or_404(storage, user_id)

    updates = payload.model_dump(exclude_unset=True, exclude_none=True)
    if "username" in updates and updates["username"] != user.username:
        if storage.get_user_by_username(updates["username"]):
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Username already exists")
    if "password" in updates:
        updates["password"] = get_password_hash(updates["password"])

    return storage.update_user(user, updates)


# Delete a user account (Admin only)
@router.delete("/{user_id}", response_model=MessageResponse)
def delete_user(
    user_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    storage = DatabaseStorage(db)
    user = _get_user_or_404(storage, user_id)

    # Prevent self-deletion
    if user.id == current_user.id:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="You cannot delete your own account")

    username = user.username
    storage.delete_user(user)
    logger.info("User %s deleted by %s", username, current_user.username)

    return {"message": "User deleted successfully"}
