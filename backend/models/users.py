# backend/models/users.py
import enum
from sqlalchemy import Column, Integer, String, Boolean, DateTime, Enum, func
from database import Base

# System roles; values are stored as-is in the user_role enum
class UserRole(str, enum.Enum):
    ADMINISTRADOR = "administrador"
    ARMAZENISTA = "armazenista"

# Represents a user account with authentication details and system role
class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    nickname = Column(String, nullable=False)
    username = Column(String, unique=True, nullable=False, index=True)
    password = Column(String, nullable=False)  # bcrypt hash
    role = Column(
        Enum(UserRole, name="user_role", values_callable=lambda e: [m.value for m in e]),
        nullable=False,
    )
    # Cleared once the user replaces the initial password
    is_first_login = Column(Boolean, default=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
