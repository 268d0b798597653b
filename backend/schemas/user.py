from datetime import datetime
from pydantic import Field, field_validator, model_validator
from typing import Optional

from models.users import UserRole
from schemas.base import ORMBase

# bcrypt hashes at most 72 bytes of input
MAX_PASSWORD_BYTES = 72


def _check_password_bytes(v: str) -> str:
    if len(v.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise ValueError(f"must be at most {MAX_PASSWORD_BYTES} bytes")
    return v

# Shared properties for user models
class UserBase(ORMBase):
    name: str = Field(min_length=1)
    nickname: str = Field(min_length=1)
    username: str = Field(min_length=1)
    role: UserRole = UserRole.ARMAZENISTA

# Schema for user authentication credentials
class UserLogin(ORMBase):
    username: str = Field(min_length=1)
    password: str = Field(min_length=1)

# Schema for user creation by an administrator
class UserCreate(UserBase):
    password: str = Field(min_length=1)
    is_first_login: bool = True

    @field_validator("password")
    @classmethod
    def password_fits(cls, v: str) -> str:
        return _check_password_bytes(v)

# Partial update, password is re-hashed when present
class UserUpdate(ORMBase):
    name: Optional[str] = Field(None, min_length=1)
    nickname: Optional[str] = Field(None, min_length=1)
    username: Optional[str] = Field(None, min_length=1)
    password: Optional[str] = Field(None, min_length=1)
    role: Optional[UserRole] = None
    is_first_login: Optional[bool] = None

    @field_validator("password")
    @classmethod
    def password_fits(cls, v: Optional[str]) -> Optional[str]:
        return None if v is None else _check_password_bytes(v)

# Output schema for user profile details (never carries the password)
class UserResponse(UserBase):
    id: int
    is_first_login: Optional[bool] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

class LoginResponse(ORMBase):
    user: UserResponse
    is_first_login: bool

class PasswordChange(ORMBase):
    new_password: str = Field(min_length=6)
    confirm_password: str = Field(min_length=6)

    @field_validator("new_password", "confirm_password")
    @classmethod
    def password_fits(cls, v: str) -> str:
        return _check_password_bytes(v)

    @model_validator(mode="after")
    def passwords_match(self):
        if self.new_password != self.confirm_password:
            raise ValueError("Passwords do not match")
        return self
