# backend/client/api.py
import logging
from typing import Any, Optional

import httpx

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "http://localhost:8000"


class ApiError(Exception):
    """Failed API call. status_code is 0 when no HTTP response was received."""

    def __init__(self, message: str, status_code: int = 0, details: Any = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.details = details

    @property
    def is_unauthorized(self) -> bool:
        return self.status_code == 401


class ApiClient:
    """
    JSON request wrapper over an httpx.Client.

    The underlying client keeps the session cookie between calls, so one
    ApiClient represents one logged-in browser session. Any httpx.Client can
    be passed in (FastAPI's TestClient included).
    """

    def __init__(self, base_url: str = DEFAULT_BASE_URL, http: Optional[httpx.Client] = None, timeout: float = 10.0):
        self.http = http or httpx.Client(base_url=base_url, timeout=timeout)

    def request(self, method: str, url: str, data: Any = None) -> Any:
        try:
            response = self.http.request(method, url, json=data)
        except httpx.RequestError as e:
            logger.error("Network error on %s %s: %s", method, url, e)
            raise ApiError(f"Network error: {e}", 0, {"original_error": str(e)}) from e

        # No content
        if response.status_code == 204 or not response.content:
            if response.is_success:
                return {}
            raise ApiError(f"HTTP {response.status_code}: {response.reason_phrase}", response.status_code)

        content_type = response.headers.get("content-type", "")
        if "application/json" not in content_type:
            raise ApiError(
                "Invalid response: server did not return JSON",
                response.status_code,
                {"content_type": content_type},
            )

        try:
            body = response.json()
        except ValueError as e:
            raise ApiError("Failed to parse JSON response", response.status_code) from e

        if not response.is_success:
            message = body.get("message") if isinstance(body, dict) else None
            if not isinstance(message, str):
                message = f"HTTP {response.status_code}: {response.reason_phrase}"
            raise ApiError(message, response.status_code, body)

        return body

    def get(self, url: str) -> Any:
        return self.request("GET", url)

    def post(self, url: str, data: Any = None) -> Any:
        return self.request("POST", url, data)

    def put(self, url: str, data: Any = None) -> Any:
        return self.request("PUT", url, data)

    def delete(self, url: str) -> Any:
        return self.request("DELETE", url)

    def close(self) -> None:
        self.http.close()
