from __future__ import annotations

import logging
from typing import Any, Dict, List

from sqlalchemy import func
from sqlalchemy.orm import Session

from models.investment import Investment
from models.portfolio import Portfolio
from services.analytics.aggregator import summarize

logger = logging.getLogger(__name__)


def get_or_create_portfolio(db: Session, user_id: int) -> Portfolio:
    """The one portfolio per user, created on first use."""
    portfolio = db.query(Portfolio).filter(Portfolio.user_id == user_id).first()
    if portfolio:
        return portfolio

    portfolio = Portfolio(user_id=user_id, total_investments=0.0)
    db.add(portfolio)
    db.commit()
    db.refresh(portfolio)
    logger.info("portfolio_created portfolio_id=%s", portfolio.id)
    return portfolio


def get_portfolio_investments(db: Session, portfolio_id: int) -> List[Investment]:
    return (
        db.query(Investment)
        .filter(Investment.portfolio_id == portfolio_id)
        .order_by(Investment.created_at.asc(), Investment.id.asc())
        .all()
    )


def refresh_portfolio_total(db: Session, portfolio: Portfolio) -> Portfolio:
    total = (
        db.query(func.coalesce(func.sum(Investment.value), 0.0))
        .filter(Investment.portfolio_id == portfolio.id)
        .scalar()
    )
    portfolio.total_investments = float(total or 0.0)
    portfolio.last_updated = func.now()
    db.add(portfolio)
    db.commit()
    db.refresh(portfolio)
    return portfolio


def _with_weights(slices, total: float) -> List[Dict[str, Any]]:
    out: List[Dict[str, Any]] = []
    for s in slices:
        weight = round(s.value / total * 100.0, 2) if total > 0 else 0.0
        out.append({"key": s.key, "value": s.value, "weight": weight})
    return out


def get_portfolio_summary(db: Session, user_id: int) -> Dict[str, Any]:
    """
    Dashboard payload: aggregator output for the user's portfolio plus
    percentage weights per allocation slice. Raises InvalidInput when a
    stored row is malformed.
    """
    portfolio = get_or_create_portfolio(db, user_id)
    summary = summarize(get_portfolio_investments(db, portfolio.id))

    return {
        "portfolio_id": portfolio.id,
        "total_value": summary.total_value,
        "risk_level": summary.risk_level.value,
        "risk_score": summary.risk_score,
        "investment_count": summary.investment_count,
        "type_allocation": _with_weights(summary.type_allocation, summary.total_value),
        "sector_allocation": _with_weights(summary.sector_allocation, summary.total_value),
        "last_updated": portfolio.last_updated,
    }
