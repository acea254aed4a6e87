"""Portfolio aggregation and price refresh."""
from __future__ import annotations

import logging
import os
import uuid
from typing import Dict, List, Optional

from sqlalchemy.orm import Session

from cashnib.db import models, schemas
from cashnib.db.models.base import now_utc
from cashnib.db.repositories import investments as investment_repo
from cashnib.services.notification_service import NotificationService, notify_safely
from cashnib.services.price_service import get_price_service

logger = logging.getLogger(__name__)


def alert_pct() -> float:
    raw = os.getenv("INVESTMENT_ALERT_PCT", "5")
    try:
        return float(raw)
    except ValueError:
        logger.warning("Invalid INVESTMENT_ALERT_PCT '%s'; using 5.", raw)
        return 5.0


def build_portfolio(db: Session, user_id: uuid.UUID) -> schemas.Portfolio:
    holdings = investment_repo.get_investments(db, user_id)
    total_value = round(sum(float(h.total_value or 0) for h in holdings), 2)
    total_cost = round(sum(h.cost_basis for h in holdings), 2)
    total_gain_loss = round(total_value - total_cost, 2)
    percentage = round(total_gain_loss / total_cost * 100, 2) if total_cost > 0 else 0.0
    last_updated = max((h.last_updated for h in holdings), default=now_utc())
    return schemas.Portfolio(
        user_id=user_id,
        total_value=total_value,
        total_cost=total_cost,
        total_gain_loss=total_gain_loss,
        total_gain_loss_percentage=percentage,
        investments=[schemas.Investment.model_validate(h) for h in holdings],
        last_updated=last_updated,
    )


def refresh_prices(
    db: Session,
    user_id: uuid.UUID,
    prices: Optional[Dict[str, float]] = None,
) -> schemas.PriceRefreshResult:
    """Apply explicit or provider quotes to every holding of the user.

    Holdings without a quote are reported in `skipped`. Moves of at least
    INVESTMENT_ALERT_PCT percent raise an investment_update notification.
    """
    holdings = investment_repo.get_investments(db, user_id)
    if prices is None:
        quotes = get_price_service().get_quotes(h.symbol for h in holdings)
    else:
        quotes = {k.strip().upper(): float(v) for k, v in prices.items()}

    threshold = alert_pct()
    service = NotificationService(db)
    updated: List[models.Investment] = []
    skipped: List[str] = []
    for holding in holdings:
        price = quotes.get(holding.symbol)
        if price is None or price < 0:
            skipped.append(holding.symbol)
            continue
        old_price = float(holding.current_price or 0)
        investment_repo.set_current_price(db, holding, price)
        updated.append(holding)
        if old_price > 0:
            change = (price - old_price) / old_price * 100
            if abs(change) >= threshold:
                notify_safely(
                    db,
                    service.notify_investment_update,
                    user_id,
                    investment_id=holding.id,
                    symbol=holding.symbol,
                    old_price=old_price,
                    new_price=price,
                    change_pct=change,
                )
    return schemas.PriceRefreshResult(
        updated=len(updated),
        skipped=skipped,
        investments=[schemas.Investment.model_validate(h) for h in updated],
    )
