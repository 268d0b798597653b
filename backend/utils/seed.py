import logging

from sqlalchemy.orm import Session

from config import settings
from models.users import User, UserRole
from storage import DatabaseStorage
from utils.hashing import get_password_hash

logger = logging.getLogger(__name__)


def ensure_default_admin(db: Session) -> User:
    """Create the bootstrap administrator when it does not exist yet.

    The account starts with is_first_login set, so the first login forces a
    password change.
    """
    storage = DatabaseStorage(db)
    admin = storage.get_user_by_username(settings.DEFAULT_ADMIN_USERNAME)
    if admin:
        return admin

    admin = storage.create_user(
        {
            "name": "Administrador",
            "nickname": "Admin",
            "username": settings.DEFAULT_ADMIN_USERNAME,
            "password": get_password_hash(settings.DEFAULT_ADMIN_PASSWORD),
            "role": UserRole.ADMINISTRADOR,
            "is_first_login": True,
        }
    )
    logger.info("Default administrator '%s' created", admin.username)
    return admin
