"""
State containers mirroring one API collection each.

Actions never raise: failures land in `error` and optimistic changes are
rolled back. Mutations apply locally first and are reconciled with the
server response.
"""
from __future__ import annotations

import copy
import logging
import uuid
from typing import Any, Dict, List, Optional

from .api_client import ApiClient, ApiError

logger = logging.getLogger(__name__)

TEMP_ID_PREFIX = "temp-"


def _temp_id() -> str:
    return f"{TEMP_ID_PREFIX}{uuid.uuid4().hex}"


class BaseSlice:
    name = "base"

    def __init__(self, client: ApiClient) -> None:
        self.client = client
        self.is_loading = False
        self.error: Optional[str] = None

    def clear_error(self) -> None:
        self.error = None

    def _pending(self) -> None:
        self.is_loading = True
        self.error = None

    def _rejected(self, exc: ApiError) -> None:
        self.is_loading = False
        self.error = str(exc)
        logger.debug("%s action failed: %s", self.name, exc)


class CollectionSlice(BaseSlice):
    """CRUD slice over `/<resource>/` with optimistic create/update/delete."""

    resource = ""

    def __init__(self, client: ApiClient) -> None:
        super().__init__(client)
        self.items: List[Dict[str, Any]] = []

    def _index(self, item_id: str) -> int:
        for i, item in enumerate(self.items):
            if item.get("id") == item_id:
                return i
        return -1

    def _fetch_payload(self, **params) -> Any:
        return self.client.list_items(self.resource, **params)

    def _fulfilled(self, payload: Any, params: dict) -> None:
        self.items = list(payload or [])

    def fetch(self, **params) -> bool:
        self._pending()
        try:
            payload = self._fetch_payload(**params)
        except ApiError as exc:
            self._rejected(exc)
            return False
        self.is_loading = False
        self._fulfilled(payload, params)
        return True

    def _insert(self, item: Dict[str, Any]) -> None:
        self.items.append(item)

    def _created(self, item: Dict[str, Any]) -> None:
        pass

    def create(self, data: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        temp = {**data, "id": _temp_id()}
        self._insert(temp)
        self.error = None
        try:
            saved = self.client.create_item(self.resource, data)
        except ApiError as exc:
            self.items = [i for i in self.items if i.get("id") != temp["id"]]
            self.error = str(exc)
            return None
        index = self._index(temp["id"])
        if index != -1:
            self.items[index] = saved
        self._created(saved)
        return saved

    def _updated(self, item: Dict[str, Any]) -> None:
        pass

    def update(self, item_id: str, data: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        index = self._index(item_id)
        previous = copy.deepcopy(self.items[index]) if index != -1 else None
        if index != -1:
            self.items[index] = {**self.items[index], **data}
        self.error = None
        try:
            saved = self.client.update_item(self.resource, item_id, data)
        except ApiError as exc:
            if previous is not None:
                restore_at = self._index(item_id)
                if restore_at != -1:
                    self.items[restore_at] = previous
            self.error = str(exc)
            return None
        index = self._index(item_id)
        if index != -1:
            self.items[index] = saved
        self._updated(saved)
        return saved

    def _deleted(self, item_id: str) -> None:
        pass

    def _delete_rolled_back(self) -> None:
        pass

    def delete(self, item_id: str) -> bool:
        index = self._index(item_id)
        removed = self.items.pop(index) if index != -1 else None
        self.error = None
        try:
            self.client.delete_item(self.resource, item_id)
        except ApiError as exc:
            if removed is not None:
                self.items.insert(min(index, len(self.items)), removed)
                self._delete_rolled_back()
            self.error = str(exc)
            return False
        self._deleted(item_id)
        return True


class TransactionSlice(CollectionSlice):
    name = "transaction"
    resource = "transactions"

    def __init__(self, client: ApiClient) -> None:
        super().__init__(client)
        self.pagination: Dict[str, Any] = self._initial_pagination()

    @staticmethod
    def _initial_pagination() -> Dict[str, Any]:
        return {"page": 1, "limit": 20, "total": 0, "total_pages": 0, "has_next": False, "has_prev": False}

    def _fulfilled(self, payload: Any, params: dict) -> None:
        transactions = payload.get("transactions", [])
        pagination = payload.get("pagination") or self._initial_pagination()
        if pagination.get("page", 1) == 1:
            self.items = list(transactions)
        else:
            self.items = self.items + list(transactions)
        self.pagination = pagination

    def fetch_next_page(self) -> bool:
        if not self.pagination.get("has_next"):
            return False
        return self.fetch(page=self.pagination["page"] + 1, limit=self.pagination["limit"])

    def reset(self) -> None:
        self.items = []
        self.pagination = self._initial_pagination()

    def _insert(self, item: Dict[str, Any]) -> None:
        self.items.insert(0, item)

    def _created(self, item: Dict[str, Any]) -> None:
        self.pagination["total"] += 1

    def delete(self, item_id: str) -> bool:
        present = self._index(item_id) != -1
        if present:
            self.pagination["total"] -= 1
        return super().delete(item_id)

    def _delete_rolled_back(self) -> None:
        self.pagination["total"] += 1


class BudgetSlice(CollectionSlice):
    name = "budget"
    resource = "budgets"

    def __init__(self, client: ApiClient) -> None:
        super().__init__(client)
        self.current_budget: Optional[Dict[str, Any]] = None

    def set_current_budget(self, budget: Optional[Dict[str, Any]]) -> None:
        self.current_budget = budget

    def fetch_active(self) -> bool:
        self._pending()
        try:
            budget = self.client.get_active_budget()
        except ApiError as exc:
            if exc.status_code == 404:
                self.is_loading = False
                self.current_budget = None
                return True
            self._rejected(exc)
            return False
        self.is_loading = False
        self.current_budget = budget
        return True

    def _updated(self, item: Dict[str, Any]) -> None:
        if self.current_budget and self.current_budget.get("id") == item.get("id"):
            self.current_budget = item

    def _deleted(self, item_id: str) -> None:
        if self.current_budget and self.current_budget.get("id") == item_id:
            self.current_budget = None


class GoalSlice(CollectionSlice):
    name = "goal"
    resource = "goals"

    def contribute(self, goal_id: str, amount: float) -> Optional[Dict[str, Any]]:
        self.error = None
        try:
            saved = self.client.contribute_to_goal(goal_id, amount)
        except ApiError as exc:
            self.error = str(exc)
            return None
        index = self._index(goal_id)
        if index != -1:
            self.items[index] = saved
        return saved


class InvestmentSlice(CollectionSlice):
    name = "investment"
    resource = "investments"

    def __init__(self, client: ApiClient) -> None:
        super().__init__(client)
        self.portfolio: Optional[Dict[str, Any]] = None

    def fetch_portfolio(self) -> bool:
        self._pending()
        try:
            portfolio = self.client.get_portfolio()
        except ApiError as exc:
            self._rejected(exc)
            return False
        self.is_loading = False
        self.portfolio = portfolio
        self.items = list(portfolio.get("investments", []))
        return True


class NotificationSlice(BaseSlice):
    name = "notification"

    def __init__(self, client: ApiClient) -> None:
        super().__init__(client)
        self.items: List[Dict[str, Any]] = []
        self.unread_count = 0

    def fetch(self, unread_only: bool = False, limit: int = 50) -> bool:
        self._pending()
        try:
            payload = self.client.list_items("notifications", unread_only=unread_only, limit=limit)
        except ApiError as exc:
            self._rejected(exc)
            return False
        self.is_loading = False
        self.items = list(payload.get("notifications", []))
        self.unread_count = payload.get("unread_count", 0)
        return True

    def fetch_unread_count(self) -> bool:
        try:
            self.unread_count = self.client.get_unread_count()
        except ApiError as exc:
            self.error = str(exc)
            return False
        return True

    def mark_read(self, notification_id: str) -> bool:
        target = next((n for n in self.items if n.get("id") == notification_id), None)
        was_unread = bool(target) and not target.get("is_read")
        if was_unread:
            target["is_read"] = True
            self.unread_count = max(0, self.unread_count - 1)
        self.error = None
        try:
            self.client.mark_notification_read(notification_id)
        except ApiError as exc:
            if was_unread:
                target["is_read"] = False
                self.unread_count += 1
            self.error = str(exc)
            return False
        return True

    def mark_all_read(self) -> bool:
        snapshot = [(n, n.get("is_read")) for n in self.items]
        previous_count = self.unread_count
        for n in self.items:
            n["is_read"] = True
        self.unread_count = 0
        self.error = None
        try:
            self.client.mark_all_notifications_read()
        except ApiError as exc:
            for n, was_read in snapshot:
                n["is_read"] = was_read
            self.unread_count = previous_count
            self.error = str(exc)
            return False
        return True


DEFAULT_SETTINGS: Dict[str, Any] = {
    "currency": "USD",
    "language": "en",
    "theme": "light",
    "notifications": {
        "budget_alerts": True,
        "goal_milestones": True,
        "transaction_anomalies": True,
        "investment_updates": True,
        "market_news": False,
    },
    "privacy": {
        "data_sharing": False,
        "analytics": True,
        "crash_reporting": True,
    },
    "security": {
        "biometric_auth": False,
        "auto_lock": True,
        "auto_lock_timeout": 5,
    },
}


class SettingsSlice(BaseSlice):
    """Local settings reducers with explicit fetch from and push to the server."""

    name = "settings"

    def __init__(self, client: ApiClient) -> None:
        super().__init__(client)
        self.settings: Dict[str, Any] = copy.deepcopy(DEFAULT_SETTINGS)

    @property
    def items(self) -> Dict[str, Any]:
        return self.settings

    def update_settings(self, values: Dict[str, Any]) -> None:
        self.settings = {**self.settings, **values}

    def update_theme(self, theme: str) -> None:
        self.settings["theme"] = theme

    def update_currency(self, currency: str) -> None:
        self.settings["currency"] = currency

    def update_language(self, language: str) -> None:
        self.settings["language"] = language

    def _merge_section(self, section: str, values: Dict[str, Any]) -> None:
        self.settings[section] = {**self.settings.get(section, {}), **values}

    def update_notification_settings(self, values: Dict[str, Any]) -> None:
        self._merge_section("notifications", values)

    def update_privacy_settings(self, values: Dict[str, Any]) -> None:
        self._merge_section("privacy", values)

    def update_security_settings(self, values: Dict[str, Any]) -> None:
        self._merge_section("security", values)

    def reset_settings(self) -> None:
        self.settings = copy.deepcopy(DEFAULT_SETTINGS)

    def fetch(self) -> bool:
        self._pending()
        try:
            settings = self.client.get_settings()
        except ApiError as exc:
            self._rejected(exc)
            return False
        self.is_loading = False
        self.settings = settings
        return True

    def push(self) -> bool:
        """Send the local settings to the server and adopt its merged result."""
        self._pending()
        try:
            settings = self.client.update_settings(self.settings)
        except ApiError as exc:
            self._rejected(exc)
            return False
        self.is_loading = False
        self.settings = settings
        return True

    def to_state(self) -> Dict[str, Any]:
        return copy.deepcopy(self.settings)

    def load_state(self, state: Dict[str, Any]) -> None:
        merged = copy.deepcopy(DEFAULT_SETTINGS)
        for key, value in (state or {}).items():
            if isinstance(value, dict) and isinstance(merged.get(key), dict):
                merged[key] = {**merged[key], **value}
            else:
                merged[key] = value
        self.settings = merged


class AuthSlice(BaseSlice):
    name = "auth"

    def __init__(self, client: ApiClient) -> None:
        super().__init__(client)
        self.user: Optional[Dict[str, Any]] = None
        self.token: Optional[str] = None

    @property
    def items(self) -> Optional[Dict[str, Any]]:
        return self.user

    @property
    def is_authenticated(self) -> bool:
        return self.token is not None and self.user is not None

    def sign_in(self, token: str) -> bool:
        """Adopt an IdP-issued token and load the matching profile."""
        self._pending()
        self.client.set_token(token)
        try:
            user = self.client.get_profile()
        except ApiError as exc:
            self.client.set_token(self.token)
            self._rejected(exc)
            return False
        self.is_loading = False
        self.token = token
        self.user = user
        return True

    def update_profile(self, data: Dict[str, Any]) -> bool:
        self.error = None
        try:
            self.user = self.client.update_profile(data)
        except ApiError as exc:
            self.error = str(exc)
            return False
        return True

    def sign_out(self) -> None:
        if self.token:
            try:
                self.client.logout()
            except ApiError as exc:
                logger.info("Logout call failed: %s", exc)
        self.client.set_token(None)
        self.token = None
        self.user = None
        self.error = None

    def to_state(self) -> Dict[str, Any]:
        return {"token": self.token, "user": copy.deepcopy(self.user)}

    def load_state(self, state: Dict[str, Any]) -> None:
        self.token = (state or {}).get("token")
        self.user = (state or {}).get("user")
        self.client.set_token(self.token)
