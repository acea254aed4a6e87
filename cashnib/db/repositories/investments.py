"""
Investment repository functions.

Derived valuation columns are recomputed before every commit.
"""
from __future__ import annotations

import uuid
from sqlalchemy.orm import Session

from cashnib.db import models, schemas


def create_investment(db: Session, user_id: uuid.UUID, investment: schemas.InvestmentCreate):
    data = investment.model_dump()
    if data.get('current_price') is None:
        data['current_price'] = data['purchase_price']
    db_investment = models.Investment(**data, user_id=user_id)
    db_investment.refresh_valuation()
    db.add(db_investment)
    db.commit()
    db.refresh(db_investment)
    return db_investment


def get_investment(db: Session, user_id: uuid.UUID, investment_id: uuid.UUID):
    return (
        db.query(models.Investment)
        .filter(models.Investment.id == investment_id, models.Investment.user_id == user_id)
        .first()
    )


def get_investments(db: Session, user_id: uuid.UUID):
    return (
        db.query(models.Investment)
        .filter(models.Investment.user_id == user_id)
        .order_by(models.Investment.created_at.desc())
        .all()
    )


def update_investment(db: Session, user_id: uuid.UUID, investment_id: uuid.UUID, investment: schemas.InvestmentUpdate):
    db_investment = get_investment(db, user_id, investment_id)
    if db_investment:
        for key, value in investment.model_dump(exclude_unset=True).items():
            if key == 'current_price' and value is None:
                continue
            setattr(db_investment, key, value)
        db_investment.refresh_valuation()
        db.commit()
        db.refresh(db_investment)
    return db_investment


def set_current_price(db: Session, db_investment: models.Investment, price: float):
    db_investment.current_price = price
    db_investment.refresh_valuation()
    db.commit()
    db.refresh(db_investment)
    return db_investment


def delete_investment(db: Session, user_id: uuid.UUID, investment_id: uuid.UUID) -> bool:
    try:
        db_investment = get_investment(db, user_id, investment_id)
        if not db_investment:
            return False
        db.delete(db_investment)
        db.commit()
        return True
    except Exception as e:
        db.rollback()
        raise RuntimeError(f"Failed to delete investment {investment_id}: {str(e)}")
