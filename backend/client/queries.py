# backend/client/queries.py
from typing import Any, Dict, List, Optional
from urllib.parse import quote

from client.api import ApiClient
from client.cache import QueryCache

# Query keys, one per logical resource
AUTH_USER = ("/api/auth/user",)
USERS = ("/api/users",)
PRODUCTS = ("/api/products",)
PICOS = ("/api/picos",)
PALETIZADO_STOCK = ("/api/paletizado-stock",)
DASHBOARD_STATS = ("/api/dashboard/stats",)
ACTIVITY_LOG = ("/api/activity-log",)

# Current user is refetched after five minutes even without invalidation
AUTH_USER_STALE_TIME = 5 * 60

# Which cached resources a mutation on each resource makes outdated
INVALIDATES = {
    USERS: [USERS],
    PRODUCTS: [PRODUCTS, DASHBOARD_STATS],
    PICOS: [PICOS, DASHBOARD_STATS, ACTIVITY_LOG],
    PALETIZADO_STOCK: [PALETIZADO_STOCK, DASHBOARD_STATS, ACTIVITY_LOG],
}


class InventoryClient:
    """Typed access to every API endpoint, with cached reads and invalidating writes."""

    def __init__(self, api: ApiClient, cache: Optional[QueryCache] = None):
        self.api = api
        self.cache = cache if cache is not None else QueryCache()

    def _query(self, key, url: str, stale_time: Optional[float] = None) -> Any:
        return self.cache.fetch(key, lambda: self.api.get(url), stale_time)

    def _mutate(self, resource, method: str, url: str, data: Any = None) -> Any:
        result = self.api.request(method, url, data)
        for key in INVALIDATES[resource]:
            self.cache.invalidate(key)
        return result

    # ==================== AUTH ====================

    def login(self, username: str, password: str) -> Dict[str, Any]:
        result = self.api.post("/api/auth/login", {"username": username, "password": password})
        self.cache.invalidate(AUTH_USER)
        return result

    def change_password(self, new_password: str, confirm_password: str) -> Dict[str, Any]:
        result = self.api.post(
            "/api/auth/change-password",
            {"newPassword": new_password, "confirmPassword": confirm_password},
        )
        self.cache.clear()
        return result

    def logout(self) -> None:
        # The local cache goes even when the request fails
        try:
            self.api.post("/api/auth/logout")
        finally:
            self.cache.clear()

    def current_user(self) -> Dict[str, Any]:
        return self._query(AUTH_USER, "/api/auth/user", stale_time=AUTH_USER_STALE_TIME)

    # ==================== USERS ====================

    def list_users(self) -> List[Dict[str, Any]]:
        return self._query(USERS, "/api/users")

    def create_user(self, data: Dict[str, Any]) -> Dict[str, Any]:
        return self._mutate(USERS, "POST", "/api/users", data)

    def update_user(self, user_id: int, data: Dict[str, Any]) -> Dict[str, Any]:
        return self._mutate(USERS, "PUT", f"/api/users/{user_id}", data)

    def delete_user(self, user_id: int) -> Dict[str, Any]:
        return self._mutate(USERS, "DELETE", f"/api/users/{user_id}")

    # ==================== PRODUCTS ====================

    def list_products(self) -> List[Dict[str, Any]]:
        return self._query(PRODUCTS, "/api/products")

    def search_products(self, q: str) -> List[Dict[str, Any]]:
        url = f"/api/products/search?q={quote(q)}"
        return self._query(PRODUCTS + ("search", q), url)

    def create_product(self, data: Dict[str, Any]) -> Dict[str, Any]:
        return self._mutate(PRODUCTS, "POST", "/api/products", data)

    def update_product(self, product_id: int, data: Dict[str, Any]) -> Dict[str, Any]:
        return self._mutate(PRODUCTS, "PUT", f"/api/products/{product_id}", data)

    def delete_product(self, product_id: int) -> Dict[str, Any]:
        return self._mutate(PRODUCTS, "DELETE", f"/api/products/{product_id}")

    # ==================== PICOS ====================

    def list_picos(self) -> List[Dict[str, Any]]:
        return self._query(PICOS, "/api/picos")

    def create_pico(self, data: Dict[str, Any]) -> Dict[str, Any]:
        return self._mutate(PICOS, "POST", "/api/picos", data)

    def update_pico(self, pico_id: int, data: Dict[str, Any]) -> Dict[str, Any]:
        return self._mutate(PICOS, "PUT", f"/api/picos/{pico_id}", data)

    def delete_pico(self, pico_id: int) -> Dict[str, Any]:
        return self._mutate(PICOS, "DELETE", f"/api/picos/{pico_id}")

    # ==================== PALETIZADO STOCK ====================

    def list_paletizado_stock(self) -> List[Dict[str, Any]]:
        return self._query(PALETIZADO_STOCK, "/api/paletizado-stock")

    def create_paletizado_stock(self, data: Dict[str, Any]) -> Dict[str, Any]:
        return self._mutate(PALETIZADO_STOCK, "POST", "/api/paletizado-stock", data)

    def update_paletizado_stock(self, stock_id: int, data: Dict[str, Any]) -> Dict[str, Any]:
        return self._mutate(PALETIZADO_STOCK, "PUT", f"/api/paletizado-stock/{stock_id}", data)

    def delete_paletizado_stock(self, stock_id: int) -> Dict[str, Any]:
        return self._mutate(PALETIZADO_STOCK, "DELETE", f"/api/paletizado-stock/{stock_id}")

    # ==================== DASHBOARD ====================

    def dashboard_stats(self) -> Dict[str, Any]:
        return self._query(DASHBOARD_STATS, "/api/dashboard/stats")

    def recent_activity(self, limit: int = 10) -> List[Dict[str, Any]]:
        return self._query(ACTIVITY_LOG + (limit,), f"/api/activity-log?limit={limit}")
