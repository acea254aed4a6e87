"""
Client-side read model for the CashNib API.

`ApiClient` talks to the REST service; slices mirror one collection each and
`Store` aggregates them, persisting only the auth and settings slices.
"""

from .api_client import ApiClient, ApiError
from .slices import (
    AuthSlice,
    TransactionSlice,
    BudgetSlice,
    GoalSlice,
    InvestmentSlice,
    NotificationSlice,
    SettingsSlice,
)
from .store import Store

__all__ = [
    "ApiClient",
    "ApiError",
    "AuthSlice",
    "TransactionSlice",
    "BudgetSlice",
    "GoalSlice",
    "InvestmentSlice",
    "NotificationSlice",
    "SettingsSlice",
    "Store",
]
