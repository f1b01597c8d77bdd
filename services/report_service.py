from __future__ import annotations

import logging
import os
import random
from typing import List, Optional

from sqlalchemy.orm import Session

from models.analysis_report import AnalysisReport
from services.analytics.aggregator import summarize
from services.analytics.suggestion_engine import generate
from services.analytics.types import SelectionPolicy
from services.market_data_service import load_market_snapshot
from services.portfolio_service import get_or_create_portfolio, get_portfolio_investments

logger = logging.getLogger(__name__)


def _selection_policy() -> SelectionPolicy:
    raw = (os.getenv("SUGGESTION_SELECTION") or "random").strip().lower()
    try:
        return SelectionPolicy(raw)
    except ValueError:
        logger.warning("unknown_suggestion_selection value=%s using=random", raw)
        return SelectionPolicy.random


def list_reports(db: Session, user_id: int) -> List[AnalysisReport]:
    return (
        db.query(AnalysisReport)
        .filter(AnalysisReport.user_id == user_id)
        .order_by(AnalysisReport.created_at.desc(), AnalysisReport.id.desc())
        .all()
    )


async def create_report(
    db: Session,
    user_id: int,
    *,
    rng: Optional[random.Random] = None,
    feed_url: Optional[str] = None,
) -> AnalysisReport:
    """
    Run the suggestion engine over the user's current investments and
    persist the result. Raises InvalidInput when a stored row is malformed;
    nothing is written in that case.
    """
    portfolio = get_or_create_portfolio(db, user_id)
    investments = get_portfolio_investments(db, portfolio.id)
    summary = summarize(investments)
    market = await load_market_snapshot(db, feed_url)

    result = generate(summary, investments, market, rng=rng, policy=_selection_policy())

    report = AnalysisReport(
        user_id=user_id,
        portfolio_id=portfolio.id,
        risk=result.risk_level.value,
        prediction=result.prediction,
    )
    db.add(report)
    db.commit()
    db.refresh(report)

    logger.info(
        "analysis_report_created report_id=%s risk=%s suggestions=%d market_ticks=%d",
        report.id, report.risk, len(result.suggestions), len(market),
    )
    return report
