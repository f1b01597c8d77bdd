# services/analytics/aggregator.py
from __future__ import annotations

import math
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Optional, Sequence

from services.analytics.errors import InvalidInput
from services.analytics.types import (
    RISK_WEIGHTS,
    AllocationSlice,
    InvestmentRecord,
    InvestmentType,
    PortfolioSummary,
    RiskLevel,
)

# mean <= LOW_MAX -> Low, mean <= MEDIUM_MAX -> Medium, else High
LOW_MAX = 1.5
MEDIUM_MAX = 2.5


def _get(row: Any, key: str, default: Any = None) -> Any:
    if isinstance(row, dict):
        return row.get(key, default)
    return getattr(row, key, default)


def _enum_value(enum_cls, raw: Any, field: str, index: int):
    if isinstance(raw, enum_cls):
        return raw
    if isinstance(raw, str):
        try:
            return enum_cls(raw)
        except ValueError:
            pass
    allowed = ", ".join(m.value for m in enum_cls)
    raise InvalidInput(f"{field} must be one of {allowed}, got {raw!r}", index=index, field=field)


def _money(raw: Any, index: int) -> float:
    # bool is an int subclass; strings are rejected rather than parsed
    if isinstance(raw, bool) or not isinstance(raw, (int, float, Decimal)):
        raise InvalidInput(f"value must be a number, got {raw!r}", index=index, field="value")
    value = float(raw)
    if not math.isfinite(value):
        raise InvalidInput(f"value must be finite, got {raw!r}", index=index, field="value")
    if value < 0:
        raise InvalidInput(f"value must be non-negative, got {raw!r}", index=index, field="value")
    return value


def normalize_investment(row: Any, index: int = 0) -> InvestmentRecord:
    """Validate one ORM row / dict / record. Raises InvalidInput, never coerces."""
    if isinstance(row, InvestmentRecord):
        return row
    if row is None:
        raise InvalidInput("record is missing", index=index)

    sector = _get(row, "sector")
    if not isinstance(sector, str) or not sector.strip():
        raise InvalidInput(f"sector must be a non-empty string, got {sector!r}", index=index, field="sector")

    asset_name = _get(row, "asset_name") or ""
    if not isinstance(asset_name, str):
        raise InvalidInput(f"asset_name must be a string, got {asset_name!r}", index=index, field="asset_name")

    return InvestmentRecord(
        asset_name=asset_name,
        type=_enum_value(InvestmentType, _get(row, "type"), "type", index),
        value=_money(_get(row, "value"), index),
        risk=_enum_value(RiskLevel, _get(row, "risk"), "risk", index),
        sector=sector.strip(),
    )


def normalize_investments(investments: Optional[Iterable[Any]]) -> List[InvestmentRecord]:
    if investments is None:
        raise InvalidInput("investments are required")
    return [normalize_investment(row, i) for i, row in enumerate(investments)]


def mean_risk_score(records: Sequence[InvestmentRecord]) -> Optional[float]:
    """Arithmetic mean of risk weights; None for an empty list."""
    if not records:
        return None
    return sum(RISK_WEIGHTS[r.risk] for r in records) / len(records)


def classify_risk(score: Optional[float]) -> RiskLevel:
    # ties resolve to the lower-risk bucket
    if score is None or score <= LOW_MAX:
        return RiskLevel.low
    if score <= MEDIUM_MAX:
        return RiskLevel.medium
    return RiskLevel.high


def _allocate(records: Sequence[InvestmentRecord], key_fn) -> List[AllocationSlice]:
    groups: Dict[str, float] = {}
    for r in records:
        key = key_fn(r)
        groups[key] = groups.get(key, 0.0) + r.value
    return [AllocationSlice(key=k, value=v) for k, v in groups.items()]


def summarize(investments: Optional[Iterable[Any]]) -> PortfolioSummary:
    """
    Aggregate investment rows into total value, type/sector allocation and
    a three-bucket risk level. Allocation groups keep first-seen order.
    An empty list is the zero state (total 0, Low risk, no slices).
    """
    records = normalize_investments(investments)
    score = mean_risk_score(records)

    return PortfolioSummary(
        total_value=sum(r.value for r in records),
        risk_level=classify_risk(score),
        risk_score=score,
        investment_count=len(records),
        type_allocation=_allocate(records, lambda r: r.type.value),
        sector_allocation=_allocate(records, lambda r: r.sector),
    )
