from __future__ import annotations

import logging
from typing import List

from sqlalchemy.orm import Session

from models.investment import Investment
from services.portfolio_service import get_or_create_portfolio, refresh_portfolio_total

logger = logging.getLogger(__name__)


def list_investments(db: Session, user_id: int) -> List[Investment]:
    return (
        db.query(Investment)
        .filter(Investment.user_id == user_id)
        .order_by(Investment.created_at.asc(), Investment.id.asc())
        .all()
    )


def get_investment(db: Session, user_id: int, investment_id: int) -> Investment | None:
    return (
        db.query(Investment)
        .filter(Investment.user_id == user_id, Investment.id == investment_id)
        .first()
    )


def create_investment(
    db: Session,
    user_id: int,
    *,
    asset_name: str,
    type: str,
    value: float,
    risk: str,
    sector: str,
) -> Investment:
    portfolio = get_or_create_portfolio(db, user_id)

    investment = Investment(
        user_id=user_id,
        portfolio_id=portfolio.id,
        asset_name=asset_name,
        type=type,
        value=value,
        risk=risk,
        sector=sector,
    )
    db.add(investment)
    db.commit()

    refresh_portfolio_total(db, portfolio)
    db.refresh(investment)
    logger.info("investment_created investment_id=%s portfolio_id=%s", investment.id, portfolio.id)
    return investment


def update_investment(db: Session, user_id: int, investment_id: int, **changes) -> Investment:
    investment = get_investment(db, user_id, investment_id)
    if not investment:
        raise ValueError("Investment not found")

    for key, value in changes.items():
        if value is not None:
            setattr(investment, key, value)

    db.commit()

    refresh_portfolio_total(db, investment.portfolio)
    db.refresh(investment)
    return investment


def delete_investment(db: Session, user_id: int, investment_id: int) -> None:
    investment = get_investment(db, user_id, investment_id)
    if not investment:
        raise ValueError("Investment not found")

    portfolio = investment.portfolio
    db.delete(investment)
    db.commit()

    refresh_portfolio_total(db, portfolio)
    logger.info("investment_deleted investment_id=%s portfolio_id=%s", investment_id, portfolio.id)
