"""HTTP client for the dashboard API.

Wraps httpx.AsyncClient: the session cookie set by /api/login is kept in the
client's cookie jar and every request carries the CSRF header the server
expects on mutations. Non-2xx responses and undecodable 2xx bodies raise
ApiError.
"""

import logging
from typing import Any

import httpx

from datadesk.client.cache import QueryKey
from datadesk.db.enums import RequestKind

logger = logging.getLogger(__name__)

CSRF_HEADERS = {"X-Requested-With": "XMLHttpRequest"}

_REQUEST_PATHS = {
    RequestKind.DATA: "/api/data-requests",
    RequestKind.FACEBOOK: "/api/facebook-requests",
}


class ApiError(Exception):
    """A failed API call: a non-2xx response, or a 2xx body that is not JSON."""

    def __init__(
        self,
        status_code: int,
        message: str,
        field_errors: dict[str, str] | None = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.message = message
        self.field_errors = field_errors or {}

    def __repr__(self) -> str:
        return f"ApiError({self.status_code}, {self.message!r})"


def _error_from_response(response: httpx.Response) -> ApiError:
    try:
        body = response.json()
    except ValueError:
        body = None

    if not isinstance(body, dict):
        message = response.text or response.reason_phrase or "Request failed"
        return ApiError(response.status_code, message)

    message = body.get("message") or body.get("error") or body.get("detail") or "Request failed"
    field_errors: dict[str, str] = {}
    for item in body.get("errors") or []:
        if isinstance(item, dict) and item.get("field"):
            field_errors[item["field"]] = item.get("message", "")
    if body.get("field"):
        field_errors[body["field"]] = message
    return ApiError(response.status_code, str(message), field_errors)


class DashboardClient:
    """
    Async API client. Use as an async context manager or call aclose().

    Pass `http` to reuse an existing httpx.AsyncClient (tests hand in one
    built on ASGITransport or MockTransport).
    """

    def __init__(
        self,
        base_url: str = "http://localhost:5000",
        *,
        http: httpx.AsyncClient | None = None,
        timeout: float = 10.0,
    ):
        self._http = http or httpx.AsyncClient(base_url=base_url, timeout=timeout)
        self._http.headers.update(CSRF_HEADERS)

    async def __aenter__(self) -> "DashboardClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    async def _request(
        self,
        method: str,
        path: str,
        *,
        json: Any = None,
        params: dict[str, str] | None = None,
    ) -> Any:
        response = await self._http.request(method, path, json=json, params=params or None)
        if not response.is_success:
            error = _error_from_response(response)
            logger.debug("%s %s failed with %s", method, path, response.status_code)
            raise error
        if response.status_code == 204 or not response.content:
            return None
        try:
            return response.json()
        except ValueError as exc:
            # 2xx from something that is not the API (proxy, captive portal)
            logger.debug("%s %s returned a non-JSON body", method, path)
            raise ApiError(response.status_code, "Unexpected response from server") from exc

    # ------------------------------------------------------------------
    # Session
    # ------------------------------------------------------------------

    async def login(self, username: str, password: str) -> dict:
        return await self._request(
            "POST", "/api/login", json={"username": username, "password": password}
        )

    async def register(self, payload: dict) -> dict:
        return await self._request("POST", "/api/register", json=payload)

    async def logout(self) -> None:
        await self._request("POST", "/api/logout")

    async def current_user(self) -> dict:
        return await self._request("GET", "/api/user")

    # ------------------------------------------------------------------
    # Lists (loaders for QueryCache.fetch)
    # ------------------------------------------------------------------

    async def load(self, key: QueryKey) -> Any:
        """GET the list a cache key names."""
        return await self._request("GET", key.path, params=key.query)

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    async def create_data_request(self, payload: dict) -> dict:
        return await self._request("POST", "/api/data-requests", json=payload)

    async def create_facebook_request(self, payload: dict) -> dict:
        return await self._request("POST", "/api/facebook-requests", json=payload)

    async def update_request_status(self, kind: RequestKind, request_id: int, status: str) -> dict:
        return await self._request(
            "PUT", f"{_REQUEST_PATHS[kind]}/{request_id}/status", json={"status": status}
        )

    async def create_user(self, payload: dict) -> dict:
        return await self._request("POST", "/api/admin/users", json=payload)

    async def delete_user(self, user_id: int) -> None:
        await self._request("DELETE", f"/api/admin/users/{user_id}")

    async def create_company(self, payload: dict, *, admin: bool = False) -> dict:
        path = "/api/admin/companies" if admin else "/api/companies"
        return await self._request("POST", path, json=payload)

    async def delete_company(self, company_id: int) -> None:
        await self._request("DELETE", f"/api/companies/{company_id}")

    async def create_holiday(self, payload: dict) -> dict:
        return await self._request("POST", "/api/holidays", json=payload)

    async def delete_holiday(self, holiday_id: int) -> None:
        await self._request("DELETE", f"/api/holidays/{holiday_id}")

    async def add_comment(self, payload: dict) -> dict:
        return await self._request("POST", "/api/comments", json=payload)
