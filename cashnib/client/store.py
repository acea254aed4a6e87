"""Aggregate of all slices with JSON persistence of auth and settings."""
from __future__ import annotations

import json
import logging
import os
from typing import Optional

from .api_client import ApiClient
from .slices import (
    AuthSlice,
    BudgetSlice,
    GoalSlice,
    InvestmentSlice,
    NotificationSlice,
    SettingsSlice,
    TransactionSlice,
)

logger = logging.getLogger(__name__)

PERSISTED_SLICES = ("auth", "settings")


class Store:
    def __init__(self, client: ApiClient, path: Optional[str] = None) -> None:
        self.client = client
        self.path = path
        self.auth = AuthSlice(client)
        self.transaction = TransactionSlice(client)
        self.budget = BudgetSlice(client)
        self.goal = GoalSlice(client)
        self.investment = InvestmentSlice(client)
        self.notification = NotificationSlice(client)
        self.settings = SettingsSlice(client)

    def save(self, path: Optional[str] = None) -> str:
        target = path or self.path
        if not target:
            raise ValueError("No persistence path configured")
        state = {name: getattr(self, name).to_state() for name in PERSISTED_SLICES}
        directory = os.path.dirname(os.path.abspath(target))
        os.makedirs(directory, exist_ok=True)
        tmp = f"{target}.tmp"
        with open(tmp, "w", encoding="utf-8") as fh:
            json.dump(state, fh, indent=2, sort_keys=True)
        os.replace(tmp, target)
        return target

    def load(self, path: Optional[str] = None) -> bool:
        """Restore persisted slices; returns False when nothing usable is stored."""
        source = path or self.path
        if not source or not os.path.exists(source):
            return False
        try:
            with open(source, "r", encoding="utf-8") as fh:
                state = json.load(fh)
        except (OSError, ValueError) as exc:
            logger.warning("Ignoring unreadable store state at %s: %s", source, exc)
            return False
        for name in PERSISTED_SLICES:
            if name in state:
                getattr(self, name).load_state(state[name])
        return True
