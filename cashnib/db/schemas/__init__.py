"""
Domain-split Pydantic schemas.

Re-exports every request/response model so callers can use
`from cashnib.db import schemas` and reference `schemas.<Name>`.
"""

from .common import Pagination
from .users import UserProfile, UserProfileUpdate
from .transactions import (
    Location,
    Receipt,
    TransactionBase,
    TransactionCreate,
    TransactionUpdate,
    Transaction,
    TransactionFilter,
    TransactionListResponse,
    CategorizeRequest,
    CategorizeResponse,
    TransactionStats,
    ExportRequest,
    ImportRequest,
    ImportRowError,
    ImportResult,
)
from .budgets import (
    BudgetCategory,
    BudgetBase,
    BudgetCreate,
    BudgetUpdate,
    Budget,
    CategoryPerformance,
    BudgetPerformance,
)
from .goals import (
    AutoContribute,
    Milestone,
    GoalBase,
    GoalCreate,
    GoalUpdate,
    Goal,
    ContributionRequest,
)
from .investments import (
    InvestmentBase,
    InvestmentCreate,
    InvestmentUpdate,
    Investment,
    Portfolio,
    PriceRefreshRequest,
    PriceRefreshResult,
)
from .notifications import (
    NotificationCreate,
    Notification,
    NotificationListResponse,
    UnreadCountResponse,
)
from .settings import (
    NotificationSettings,
    PrivacySettings,
    SecuritySettings,
    AppSettings,
    NotificationSettingsUpdate,
    PrivacySettingsUpdate,
    SecuritySettingsUpdate,
    AppSettingsUpdate,
)
from .reports import CategoryAmount, FinancialSummary, MonthlyTrendPoint, SpendingAnalysis
from .audits import AuditLogBase, AuditLogCreate, AuditLog
