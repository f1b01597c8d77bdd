from __future__ import annotations

import logging
import os
from datetime import datetime
from typing import Any, Dict, List, Optional

import httpx
from sqlalchemy import func
from sqlalchemy.orm import Session

from models.market_data import MarketData
from services.analytics.types import MarketTick

logger = logging.getLogger(__name__)

# Optional relay serving {symbol: {symbol, price, timestamp}}; DB is used when unset
MARKET_FEED_URL = os.getenv("MARKET_FEED_URL", "").strip()
MARKET_FEED_TIMEOUT = float(os.getenv("MARKET_FEED_TIMEOUT", "5"))


def record_tick(db: Session, symbol: str, price: float, timestamp: Optional[datetime] = None) -> MarketData:
    row = MarketData(symbol=symbol, price=price)
    if timestamp is not None:
        row.timestamp = timestamp
    db.add(row)
    db.commit()
    db.refresh(row)
    return row


def get_latest_ticks(db: Session) -> List[MarketTick]:
    """Latest tick per symbol, ordered by symbol."""
    latest = (
        db.query(MarketData.symbol, func.max(MarketData.timestamp).label("ts"))
        .group_by(MarketData.symbol)
        .subquery()
    )
    rows = (
        db.query(MarketData)
        .join(latest, (MarketData.symbol == latest.c.symbol) & (MarketData.timestamp == latest.c.ts))
        .order_by(MarketData.symbol.asc(), MarketData.id.desc())
        .all()
    )

    out: Dict[str, MarketTick] = {}
    for row in rows:
        # same-timestamp duplicates: highest id wins
        if row.symbol not in out:
            out[row.symbol] = MarketTick(symbol=row.symbol, price=row.price, timestamp=row.timestamp)
    return list(out.values())


def parse_relay_payload(payload: Any) -> List[MarketTick]:
    """Accept the relay's keyed object or a plain list of ticks; skip bad entries."""
    if isinstance(payload, dict):
        items = list(payload.values())
    elif isinstance(payload, list):
        items = payload
    else:
        return []

    ticks: List[MarketTick] = []
    for item in items:
        if not isinstance(item, dict) or not item.get("symbol"):
            continue
        try:
            ticks.append(MarketTick.model_validate(item))
        except ValueError:
            logger.warning("market_feed_bad_item symbol=%s", item.get("symbol"))
    return ticks


async def fetch_relay_ticks(url: str, client: Optional[httpx.AsyncClient] = None) -> List[MarketTick]:
    """
    Read the relay feed. The feed is optional: network errors, bad statuses
    and undecodable bodies are logged and produce an empty list.
    """
    try:
        if client is not None:
            resp = await client.get(url)
        else:
            async with httpx.AsyncClient(timeout=MARKET_FEED_TIMEOUT) as c:
                resp = await c.get(url)
    except httpx.HTTPError as exc:
        logger.warning("market_feed_unreachable error=%s", type(exc).__name__)
        return []

    if resp.status_code >= 400:
        logger.warning("market_feed_bad_status status=%s", resp.status_code)
        return []

    try:
        payload = resp.json()
    except ValueError:
        logger.warning("market_feed_bad_body")
        return []

    return parse_relay_payload(payload)


async def load_market_snapshot(db: Session, feed_url: Optional[str] = None) -> List[MarketTick]:
    url = MARKET_FEED_URL if feed_url is None else feed_url
    if url:
        return await fetch_relay_ticks(url)
    return get_latest_ticks(db)
