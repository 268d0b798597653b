# backend/client/app_state.py
"""
Navigation state for the front-end.

login -> forced password change on first login -> main app, where Users and
Products are admin-only and Dashboard and Inventory are open to every role.
A 401 from any call drops back to the login screen.
"""
import logging
from enum import Enum
from typing import Any, Dict, List, Optional

from client.api import ApiError
from client.forms import LoginForm, PasswordChangeForm
from client.queries import InventoryClient
from client.tables import is_admin

logger = logging.getLogger(__name__)


class Screen(str, Enum):
    LOGIN = "login"
    PASSWORD_CHANGE = "password_change"
    DASHBOARD = "dashboard"
    USERS = "users"
    PRODUCTS = "products"
    INVENTORY = "inventory"


MAIN_SCREENS = [Screen.DASHBOARD, Screen.USERS, Screen.PRODUCTS, Screen.INVENTORY]
ADMIN_SCREENS = {Screen.USERS, Screen.PRODUCTS}


class AppState:
    def __init__(self, client: InventoryClient):
        self.client = client
        self.screen = Screen.LOGIN
        self.user: Optional[Dict[str, Any]] = None

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None

    def _enter(self, user: Dict[str, Any], first_login: bool) -> Screen:
        self.user = user
        self.screen = Screen.PASSWORD_CHANGE if first_login else Screen.DASHBOARD
        return self.screen

    def restore(self) -> Screen:
        """Resume an existing session, e.g. after a page reload."""
        try:
            user = self.client.current_user()
        except ApiError as e:
            if not e.is_unauthorized:
                raise
            return self._reset()
        return self._enter(user, bool(user.get("isFirstLogin")))

    def login(self, username: str, password: str) -> Screen:
        result = LoginForm(username, password).submit(self.client)
        return self._enter(result["user"], result["isFirstLogin"])

    def change_password(self, new_password: str, confirm_password: str) -> Screen:
        PasswordChangeForm(new_password, confirm_password).submit(self.client)
        # The session stays valid, so the refreshed user is read from it
        self.user = self.client.current_user()
        self.screen = Screen.DASHBOARD
        return self.screen

    def available_screens(self) -> List[Screen]:
        if not self.is_authenticated or self.screen == Screen.PASSWORD_CHANGE:
            return []
        admin = is_admin(self.user)
        return [s for s in MAIN_SCREENS if admin or s not in ADMIN_SCREENS]

    def navigate(self, screen: Screen) -> bool:
        if screen not in self.available_screens():
            logger.debug("Navigation to %s refused", screen.value)
            return False
        self.screen = screen
        return True

    def handle_error(self, error: ApiError) -> Screen:
        """Expired or missing session sends the user back to login."""
        if error.is_unauthorized:
            self.client.cache.clear()
            return self._reset()
        return self.screen

    def logout(self) -> Screen:
        try:
            self.client.logout()
        except ApiError as e:
            logger.warning("Logout request failed: %s", e.message)
        return self._reset()

    def _reset(self) -> Screen:
        self.user = None
        self.screen = Screen.LOGIN
        return self.screen
