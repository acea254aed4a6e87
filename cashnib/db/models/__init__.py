"""
Domain-split SQLAlchemy models.

Each table mirrors one collection of the finance document store; nested
document fields live in JSONB columns.
"""

from .base import Base, now_utc  # re-export

from .users import User
from .transactions import Transaction
from .budgets import Budget
from .goals import Goal
from .investments import Investment
from .notifications import Notification
from .settings import UserSettings
from .audit import AuditLog

# Collections owned by a user; deleting an account clears each of them
USER_OWNED_MODELS = (
    Transaction,
    Budget,
    Goal,
    Investment,
    Notification,
    UserSettings,
    AuditLog,
)

__all__ = [
    "Base",
    "now_utc",
    "User",
    "Transaction",
    "Budget",
    "Goal",
    "Investment",
    "Notification",
    "UserSettings",
    "AuditLog",
    "USER_OWNED_MODELS",
]
