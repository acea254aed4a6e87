"""Feature toggles for the optional finance automations.

Each toggle is read once from its ``FEATURE_*`` environment variable and
cached; call ``refresh_feature_flag_cache`` after changing the environment.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Dict, List, Literal, Tuple

logger = logging.getLogger(__name__)

FeatureFlagKey = Literal[
    "budget_alerts_enabled",
    "goal_milestones_enabled",
    "transaction_anomalies_enabled",
    "transaction_import_enabled",
]

_TRUTHY = frozenset({"1", "true", "yes", "on"})
_FALSY = frozenset({"", "0", "false", "no", "off"})


@dataclass(frozen=True)
class FeatureToggle:
    key: FeatureFlagKey
    env_var: str
    description: str
    default: bool = True

    def read(self) -> bool:
        raw = os.getenv(self.env_var)
        if raw is None:
            return self.default
        value = raw.strip().lower()
        if value in _TRUTHY:
            return True
        if value in _FALSY:
            return False
        logger.warning("Unrecognized value %r for %s; using default %s", raw, self.env_var, self.default)
        return self.default


TOGGLES: Tuple[FeatureToggle, ...] = (
    FeatureToggle(
        "budget_alerts_enabled",
        "FEATURE_BUDGET_ALERTS_ENABLED",
        "Notify when an expense pushes a budget category past the alert threshold",
    ),
    FeatureToggle(
        "goal_milestones_enabled",
        "FEATURE_GOAL_MILESTONES_ENABLED",
        "Notify when a goal crosses a milestone or is completed",
    ),
    FeatureToggle(
        "transaction_anomalies_enabled",
        "FEATURE_TRANSACTION_ANOMALIES_ENABLED",
        "Flag expenses far above the category's recent average",
    ),
    FeatureToggle(
        "transaction_import_enabled",
        "FEATURE_TRANSACTION_IMPORT_ENABLED",
        "Allow bulk transaction import",
    ),
)


@lru_cache(maxsize=None)
def get_feature_flags() -> Dict[FeatureFlagKey, bool]:
    return {toggle.key: toggle.read() for toggle in TOGGLES}


def is_feature_enabled(flag: FeatureFlagKey) -> bool:
    return get_feature_flags()[flag]


def describe_feature_flags() -> List[dict]:
    """Current toggle state with its env var and purpose, for build info."""
    flags = get_feature_flags()
    return [
        {
            "key": toggle.key,
            "env_var": toggle.env_var,
            "enabled": flags[toggle.key],
            "description": toggle.description,
        }
        for toggle in TOGGLES
    ]


def disabled_features() -> List[str]:
    return [key for key, enabled in get_feature_flags().items() if not enabled]


def budget_alerts_enabled() -> bool:
    return is_feature_enabled("budget_alerts_enabled")


def goal_milestones_enabled() -> bool:
    return is_feature_enabled("goal_milestones_enabled")


def transaction_anomalies_enabled() -> bool:
    return is_feature_enabled("transaction_anomalies_enabled")


def transaction_import_enabled() -> bool:
    return is_feature_enabled("transaction_import_enabled")


def refresh_feature_flag_cache() -> None:
    get_feature_flags.cache_clear()
