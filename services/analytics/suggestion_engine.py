# services/analytics/suggestion_engine.py
"""
Heuristic portfolio suggestions.

Four generators feed one candidate pool, in this order:
  1. diversification (missing asset types, narrow sector spread)
  2. market picks (top prices from the feed, or curated fallback tickers)
  3. risk balance (growth vs. stabilizing additions)
  4. alternative investments (static)

At most MAX_SUGGESTIONS survive selection. All randomness goes through the
`rng` argument so callers and tests can seed it.
"""
from __future__ import annotations

import logging
import random
from typing import Any, Dict, Iterable, List, Optional, Sequence

from pydantic import ValidationError

from services.analytics.aggregator import (
    classify_risk,
    mean_risk_score,
    normalize_investments,
    summarize,
)
from services.analytics.types import (
    InvestmentRecord,
    InvestmentType,
    MarketTick,
    PortfolioSummary,
    SelectionPolicy,
    SuggestionResult,
)

logger = logging.getLogger(__name__)

MAX_SUGGESTIONS = 5
MARKET_PICKS = 3
MIN_SECTORS = 4

# conservative at or below, aggressive at or above
CONSERVATIVE_MAX = 1.5
AGGRESSIVE_MIN = 2.5

FALLBACK_TICKERS: tuple[str, ...] = (
    "AAPL", "MSFT", "GOOGL", "AMZN", "NVDA",
    "META", "BRK.B", "JPM", "JNJ", "KO",
)

GROWTH_IDEAS = ("growth stocks", "emerging-market ETFs", "small-cap index funds")
STABILIZING_IDEAS = ("government bonds", "dividend-paying blue chips", "high-yield deposits")

ALTERNATIVE_SUGGESTIONS: tuple[str, ...] = (
    "Real estate investment trusts (REITs) offer property exposure without buying a building.",
    "Precious metals such as gold and silver can hedge against inflation and market stress.",
    "Peer-to-peer lending platforms provide fixed-income style returns outside traditional bonds.",
    "Collectibles like art or rare coins can diversify returns, but they are illiquid.",
    "Green energy funds give exposure to the long-term transition to renewable power.",
)

SECTOR_SUGGESTION = "Adding investments in different sectors could improve portfolio balance."
EMPTY_PORTFOLIO_SUGGESTION = (
    "Start with a mix of low and medium risk investments to build a stable foundation."
)


def _human_join(items: Sequence[str]) -> str:
    if len(items) <= 1:
        return "".join(items)
    return ", ".join(items[:-1]) + " and " + items[-1]


# ---------------------------------------------------------------------------
# Generators
# ---------------------------------------------------------------------------

def diversification_suggestions(summary: PortfolioSummary) -> List[str]:
    present_types = {s.key for s in summary.type_allocation}
    missing = [t.value for t in InvestmentType if t.value not in present_types]
    sectors = {s.key for s in summary.sector_allocation}

    out: List[str] = []
    if missing:
        out.append(
            f"Consider diversifying into more asset types to reduce risk: {_human_join(missing)}."
        )
    if len(sectors) < MIN_SECTORS:
        out.append(SECTOR_SUGGESTION)
    return out


def _coerce_tick(raw: Any) -> Optional[MarketTick]:
    if isinstance(raw, MarketTick):
        return raw
    try:
        if isinstance(raw, dict):
            return MarketTick.model_validate(raw)
        return MarketTick.model_validate(raw, from_attributes=True)
    except ValidationError:
        symbol = raw.get("symbol") if isinstance(raw, dict) else getattr(raw, "symbol", None)
        logger.warning("market_tick_skipped symbol=%s", symbol)
        return None


def latest_ticks(market: Iterable[Any]) -> Dict[str, MarketTick]:
    """
    Latest tick per symbol (by timestamp; later entries win ties).
    Malformed ticks are logged and skipped.
    """
    latest: Dict[str, MarketTick] = {}
    for raw in market:
        tick = _coerce_tick(raw)
        if tick is None:
            continue
        prev = latest.get(tick.symbol)
        if prev is None or prev.timestamp is None or (
            tick.timestamp is not None and tick.timestamp >= prev.timestamp
        ):
            latest[tick.symbol] = tick
    return latest


def top_symbols_by_price(market: Iterable[Any], n: int = MARKET_PICKS) -> List[str]:
    ranked = sorted(latest_ticks(market).values(), key=lambda t: (-t.price, t.symbol))
    return [t.symbol for t in ranked[:n]]


def market_suggestions(market: Optional[Iterable[Any]], rng: random.Random) -> List[str]:
    picks = top_symbols_by_price(market or [])
    if picks:
        return [
            f"Based on current market prices, consider researching {_human_join(picks)}."
        ]

    picks = rng.sample(FALLBACK_TICKERS, MARKET_PICKS)
    return [
        f"Well-known stocks worth researching include {_human_join(picks)}."
    ]


def risk_suggestions(records: Sequence[InvestmentRecord]) -> List[str]:
    score = mean_risk_score(records)
    if score is None:
        return [EMPTY_PORTFOLIO_SUGGESTION]
    if score <= CONSERVATIVE_MAX:
        return [
            "Your portfolio is conservative. Consider adding some growth investments "
            f"for potentially higher returns, such as {_human_join(GROWTH_IDEAS)}."
        ]
    if score >= AGGRESSIVE_MIN:
        return [
            "Your portfolio is aggressive. Consider adding some stable investments "
            f"to balance risk, such as {_human_join(STABILIZING_IDEAS)}."
        ]
    return []


def alternative_suggestions() -> List[str]:
    return list(ALTERNATIVE_SUGGESTIONS)


# ---------------------------------------------------------------------------
# Selection + entry point
# ---------------------------------------------------------------------------

def select_suggestions(
    pool: Sequence[str],
    *,
    rng: random.Random,
    policy: SelectionPolicy = SelectionPolicy.random,
    limit: int = MAX_SUGGESTIONS,
) -> List[str]:
    """Pick at most `limit` entries; output keeps generation order."""
    if len(pool) <= limit:
        return list(pool)
    if policy == SelectionPolicy.priority:
        return list(pool[:limit])
    chosen = sorted(rng.sample(range(len(pool)), limit))
    return [pool[i] for i in chosen]


def build_candidate_pool(
    summary: PortfolioSummary,
    records: Sequence[InvestmentRecord],
    market: Optional[Iterable[Any]],
    rng: random.Random,
) -> List[str]:
    return [
        *diversification_suggestions(summary),
        *market_suggestions(market, rng),
        *risk_suggestions(records),
        *alternative_suggestions(),
    ]


def generate(
    summary: Optional[PortfolioSummary],
    investments: Optional[Iterable[Any]],
    market: Optional[Iterable[Any]] = None,
    *,
    rng: Optional[random.Random] = None,
    policy: SelectionPolicy = SelectionPolicy.random,
    limit: int = MAX_SUGGESTIONS,
) -> SuggestionResult:
    """
    Produce the risk level and selected suggestions for one report.

    `investments` is required (InvalidInput when None); malformed rows raise
    InvalidInput from the aggregator. The summary and risk level are always
    recomputed from `investments`; a `summary` that disagrees with them is
    logged and ignored. An empty or missing `market`, or one with no usable
    ticks, selects the fallback tickers.
    """
    records = normalize_investments(investments)
    rng = rng or random.Random()

    fresh = summarize(records)
    if summary is not None and summary != fresh:
        logger.debug("stale_summary_replaced count=%d", fresh.investment_count)
    summary = fresh
    risk_level = classify_risk(mean_risk_score(records))

    pool = build_candidate_pool(summary, records, market, rng)
    return SuggestionResult(
        risk_level=risk_level,
        suggestions=select_suggestions(pool, rng=rng, policy=policy, limit=limit),
    )
