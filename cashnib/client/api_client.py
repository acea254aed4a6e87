"""HTTP client for the CashNib REST API."""
from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import requests

logger = logging.getLogger(__name__)

_DEFAULT_TIMEOUT = (3, 30)


class ApiError(Exception):
    """Raised for any non-2xx response or transport failure."""

    def __init__(self, status_code: Optional[int], detail: str) -> None:
        super().__init__(detail)
        self.status_code = status_code
        self.detail = detail

    def __str__(self) -> str:
        return self.detail


def _error_detail(response: requests.Response) -> str:
    try:
        payload = response.json()
    except ValueError:
        return response.text or f"HTTP {response.status_code}"
    detail = payload.get("detail") if isinstance(payload, dict) else None
    if isinstance(detail, list):
        # FastAPI validation errors
        return "; ".join(str(d.get("msg", d)) if isinstance(d, dict) else str(d) for d in detail)
    return str(detail or payload)


class ApiClient:
    """JSON client with bearer authentication over a `requests.Session`."""

    def __init__(
        self,
        base_url: str,
        token: Optional[str] = None,
        session: Optional[requests.Session] = None,
        timeout=_DEFAULT_TIMEOUT,
    ) -> None:
        self.base_url = base_url.rstrip('/')
        self.token = token
        self.session = session or requests.Session()
        self.timeout = timeout

    def set_token(self, token: Optional[str]) -> None:
        self.token = token

    def _headers(self) -> Dict[str, str]:
        headers = {"Accept": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    def request(self, method: str, path: str, *, params: Optional[dict] = None, json: Any = None) -> Any:
        url = f"{self.base_url}{path}"
        try:
            response = self.session.request(
                method,
                url,
                params={k: v for k, v in (params or {}).items() if v is not None} or None,
                json=json,
                headers=self._headers(),
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            logger.warning("%s %s failed: %s", method, url, exc)
            raise ApiError(None, f"Network error: {exc}") from exc
        if not response.ok:
            raise ApiError(response.status_code, _error_detail(response))
        if response.status_code == 204 or not response.content:
            return None
        try:
            return response.json()
        except ValueError as exc:
            # e.g. an HTML maintenance page served by a proxy
            logger.warning("%s %s returned a non-JSON body", method, url)
            raise ApiError(response.status_code, "Invalid JSON response") from exc

    def get(self, path: str, **params) -> Any:
        return self.request("GET", path, params=params)

    def post(self, path: str, json: Any = None, **params) -> Any:
        return self.request("POST", path, json=json, params=params)

    def put(self, path: str, json: Any = None) -> Any:
        return self.request("PUT", path, json=json)

    def delete(self, path: str) -> Any:
        return self.request("DELETE", path)

    # Collection helpers shared by the slices

    def list_items(self, resource: str, **params) -> Any:
        return self.get(f"/{resource}/", **params)

    def create_item(self, resource: str, data: dict) -> Any:
        return self.post(f"/{resource}/", json=data)

    def update_item(self, resource: str, item_id: str, data: dict) -> Any:
        return self.put(f"/{resource}/{item_id}", json=data)

    def delete_item(self, resource: str, item_id: str) -> None:
        self.delete(f"/{resource}/{item_id}")

    # Resource specific endpoints

    def get_profile(self) -> dict:
        return self.get("/auth/profile")

    def update_profile(self, data: dict) -> dict:
        return self.put("/auth/profile", json=data)

    def logout(self) -> dict:
        return self.post("/auth/logout")

    def get_active_budget(self) -> dict:
        return self.get("/budgets/active")

    def contribute_to_goal(self, goal_id: str, amount: float) -> dict:
        return self.post(f"/goals/{goal_id}/contribute", json={"amount": amount})

    def get_portfolio(self) -> dict:
        return self.get("/investments/portfolio")

    def get_unread_count(self) -> int:
        return self.get("/notifications/unread-count")["unread_count"]

    def mark_notification_read(self, notification_id: str) -> None:
        self.post(f"/notifications/{notification_id}/read")

    def mark_all_notifications_read(self) -> dict:
        return self.post("/notifications/read-all")

    def get_settings(self) -> dict:
        return self.get("/settings/")

    def update_settings(self, data: dict) -> dict:
        return self.put("/settings/", json=data)
