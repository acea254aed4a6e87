"""
Notification service: in-app notifications and the typed finance alerts.

Typed helpers honour the user's `settings.notifications` switches and are
safe to call from request handlers; failures are logged and swallowed by
callers through `notify_safely`.
"""
from __future__ import annotations

import logging
import uuid
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from cashnib.db import models
from cashnib.db.repositories import notifications as notification_repo
from cashnib.services import settings_service

logger = logging.getLogger("cashnib.notifications")

# Event type constants (single source of truth)
TYPE_BUDGET_ALERT = 'budget_alert'
TYPE_GOAL_MILESTONE = 'goal_milestone'
TYPE_TRANSACTION_ANOMALY = 'transaction_anomaly'
TYPE_INVESTMENT_UPDATE = 'investment_update'
TYPE_GENERAL = 'general'

NOTIFICATION_TYPES = (
    TYPE_BUDGET_ALERT,
    TYPE_GOAL_MILESTONE,
    TYPE_TRANSACTION_ANOMALY,
    TYPE_INVESTMENT_UPDATE,
    TYPE_GENERAL,
)

# Settings switch consulted for each typed notification
_SETTINGS_SWITCH = {
    TYPE_BUDGET_ALERT: 'budget_alerts',
    TYPE_GOAL_MILESTONE: 'goal_milestones',
    TYPE_TRANSACTION_ANOMALY: 'transaction_anomalies',
    TYPE_INVESTMENT_UPDATE: 'investment_updates',
}


class NotificationService:
    """Service class for handling all notification operations."""

    def __init__(self, db: Session):
        self.db = db

    # === In-App Notification Management ===

    def create_notification(
        self,
        user_id: uuid.UUID,
        type: str,
        title: str,
        message: str,
        priority: str = 'medium',
        action_url: Optional[str] = None,
        metadata: Optional[Dict[str, Any]] = None,
        expires_days: Optional[int] = 30,
    ) -> models.Notification:
        return notification_repo.create_notification(
            self.db,
            user_id,
            type=type,
            title=title,
            message=message,
            priority=priority,
            action_url=action_url,
            metadata=metadata,
            expires_days=expires_days,
        )

    def get_user_notifications(self, user_id: uuid.UUID, unread_only: bool = False, limit: int = 50) -> List[models.Notification]:
        return notification_repo.get_user_notifications(self.db, user_id, unread_only=unread_only, limit=limit)

    def get_unread_count(self, user_id: uuid.UUID) -> int:
        return notification_repo.count_unread(self.db, user_id)

    def get_total_count(self, user_id: uuid.UUID) -> int:
        return notification_repo.count_total(self.db, user_id)

    def mark_notification_read(self, notification_id: uuid.UUID, user_id: uuid.UUID) -> bool:
        return notification_repo.mark_as_read(self.db, user_id, notification_id)

    def mark_all_read(self, user_id: uuid.UUID) -> int:
        return notification_repo.mark_all_as_read(self.db, user_id)

    def cleanup_expired_notifications(self) -> int:
        deleted = notification_repo.delete_expired(self.db)
        logger.info("Removed %d expired notifications", deleted)
        return deleted

    # === Typed finance notifications ===

    def _allowed(self, user_id: uuid.UUID, type: str) -> bool:
        switch = _SETTINGS_SWITCH.get(type)
        if switch is None:
            return True
        return settings_service.notification_enabled(self.db, user_id, switch)

    def _typed(self, user_id: uuid.UUID, type: str, **kwargs) -> Optional[models.Notification]:
        if not self._allowed(user_id, type):
            logger.debug("Skipping %s notification for %s: disabled in settings", type, user_id)
            return None
        return self.create_notification(user_id, type, **kwargs)

    def notify_budget_alert(
        self,
        user_id: uuid.UUID,
        *,
        budget_id: uuid.UUID,
        budget_name: str,
        category: str,
        spent: float,
        budgeted: float,
        window: str,
    ) -> Optional[models.Notification]:
        percentage = round(spent / budgeted * 100, 1) if budgeted else 0.0
        return self._typed(
            user_id,
            TYPE_BUDGET_ALERT,
            title=f"Budget alert: {category}",
            message=(
                f"You have spent {spent:.2f} of {budgeted:.2f} ({percentage}%) "
                f"in {category} for budget '{budget_name}'."
            ),
            priority='high' if spent > budgeted else 'medium',
            action_url=f"/budgets/{budget_id}",
            metadata={
                'budget_id': str(budget_id),
                'category': category,
                'window': window,
                'spent': spent,
                'budgeted': budgeted,
                'percentage': percentage,
            },
        )

    def notify_goal_milestone(
        self,
        user_id: uuid.UUID,
        *,
        goal_id: uuid.UUID,
        goal_name: str,
        milestone: str,
        progress: float,
        completed: bool = False,
    ) -> Optional[models.Notification]:
        if completed:
            title = f"Goal completed: {goal_name}"
            message = f"Congratulations! You reached your goal '{goal_name}'."
        else:
            title = f"Milestone reached: {milestone}"
            message = f"Your goal '{goal_name}' is now {progress}% complete."
        return self._typed(
            user_id,
            TYPE_GOAL_MILESTONE,
            title=title,
            message=message,
            priority='high' if completed else 'medium',
            action_url=f"/goals/{goal_id}",
            metadata={
                'goal_id': str(goal_id),
                'milestone': milestone,
                'progress': progress,
                'completed': completed,
            },
        )

    def notify_transaction_anomaly(
        self,
        user_id: uuid.UUID,
        *,
        transaction_id: uuid.UUID,
        category: str,
        amount: float,
        average: float,
    ) -> Optional[models.Notification]:
        return self._typed(
            user_id,
            TYPE_TRANSACTION_ANOMALY,
            title=f"Unusual {category} expense",
            message=(
                f"An expense of {amount:.2f} in {category} is well above your "
                f"usual {average:.2f}."
            ),
            priority='medium',
            action_url=f"/transactions/{transaction_id}",
            metadata={
                'transaction_id': str(transaction_id),
                'category': category,
                'amount': amount,
                'average': round(average, 2),
            },
        )

    def notify_investment_update(
        self,
        user_id: uuid.UUID,
        *,
        investment_id: uuid.UUID,
        symbol: str,
        old_price: float,
        new_price: float,
        change_pct: float,
    ) -> Optional[models.Notification]:
        direction = 'up' if change_pct >= 0 else 'down'
        return self._typed(
            user_id,
            TYPE_INVESTMENT_UPDATE,
            title=f"{symbol} is {direction} {abs(change_pct):.1f}%",
            message=f"{symbol} moved from {old_price:.2f} to {new_price:.2f}.",
            priority='low',
            action_url=f"/investments/{investment_id}",
            metadata={
                'investment_id': str(investment_id),
                'symbol': symbol,
                'old_price': old_price,
                'new_price': new_price,
                'change_pct': round(change_pct, 2),
            },
        )


def get_notification_service(db: Session) -> NotificationService:
    return NotificationService(db)


def notify_safely(db: Session, fn, *args, **kwargs) -> Any:
    """Run a notification helper; log and return None on failure."""
    try:
        return fn(*args, **kwargs)
    except Exception as exc:
        db.rollback()
        logger.warning("Notification dispatch failed in %s: %s", getattr(fn, "__name__", fn), exc)
        return None
