"""Goal contributions and milestone notifications."""
from __future__ import annotations

import uuid
from typing import List, Optional, Tuple

from sqlalchemy.orm import Session

from cashnib.db import models
from cashnib.db.repositories import goals as goal_repo
from cashnib.services.notification_service import NotificationService, notify_safely
from cashnib.utils.feature_flags import goal_milestones_enabled


def crossed_milestones(goal: models.Goal, previous_amount: float) -> List[dict]:
    current = float(goal.current_amount or 0)
    crossed = []
    for milestone in goal.milestones or []:
        amount = float(milestone.get('amount') or 0)
        if previous_amount < amount <= current:
            crossed.append(milestone)
    return sorted(crossed, key=lambda m: float(m.get('amount') or 0))


def announce_progress(db: Session, goal: models.Goal, previous_amount: float, newly_completed: bool) -> List[models.Notification]:
    """Notify about milestones crossed since `previous_amount` and completion."""
    if not goal_milestones_enabled():
        return []
    service = NotificationService(db)
    created = []
    for milestone in crossed_milestones(goal, previous_amount):
        note = notify_safely(
            db,
            service.notify_goal_milestone,
            goal.user_id,
            goal_id=goal.id,
            goal_name=goal.name,
            milestone=milestone.get('name') or f"{milestone.get('amount')}",
            progress=goal.progress,
        )
        if note is not None:
            created.append(note)
    if newly_completed:
        note = notify_safely(
            db,
            service.notify_goal_milestone,
            goal.user_id,
            goal_id=goal.id,
            goal_name=goal.name,
            milestone='completed',
            progress=goal.progress,
            completed=True,
        )
        if note is not None:
            created.append(note)
    return created


def contribute(db: Session, user_id: uuid.UUID, goal_id: uuid.UUID, amount: float) -> Tuple[Optional[models.Goal], List[models.Notification]]:
    existing = goal_repo.get_goal(db, user_id, goal_id)
    if existing is None:
        return None, []
    previous = float(existing.current_amount or 0)
    goal, newly_completed = goal_repo.add_contribution(db, user_id, goal_id, amount)
    return goal, announce_progress(db, goal, previous, newly_completed)
