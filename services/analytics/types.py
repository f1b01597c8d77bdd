# services/analytics/types.py
from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class InvestmentType(str, Enum):
    real_estate = "Real Estate"
    stocks = "Stocks"
    bonds = "Bonds"
    crypto = "Crypto"
    deposits = "Deposits"


class RiskLevel(str, Enum):
    low = "Low"
    medium = "Medium"
    high = "High"


# numeric encoding used to average qualitative risk
RISK_WEIGHTS = {
    RiskLevel.low: 1,
    RiskLevel.medium: 2,
    RiskLevel.high: 3,
}


class InvestmentRecord(BaseModel):
    """Validated, read-only view of one investment row."""

    model_config = ConfigDict(frozen=True)

    asset_name: str = ""
    type: InvestmentType
    value: float
    risk: RiskLevel
    sector: str


class AllocationSlice(BaseModel):
    model_config = ConfigDict(frozen=True)

    key: str
    value: float


class PortfolioSummary(BaseModel):
    model_config = ConfigDict(frozen=True)

    total_value: float = 0.0
    risk_level: RiskLevel = RiskLevel.low
    risk_score: Optional[float] = None  # mean risk weight, None when empty
    investment_count: int = 0
    type_allocation: List[AllocationSlice] = Field(default_factory=list)
    sector_allocation: List[AllocationSlice] = Field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return self.investment_count == 0


class MarketTick(BaseModel):
    model_config = ConfigDict(frozen=True)

    symbol: str
    price: float = Field(allow_inf_nan=False)
    timestamp: Optional[datetime] = None

    @field_validator("timestamp")
    @classmethod
    def _as_utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        # feeds mix naive and offset timestamps; naive ones are UTC
        if v is None:
            return None
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v.astimezone(timezone.utc)


class SelectionPolicy(str, Enum):
    random = "random"        # random subset, kept in generation order
    priority = "priority"    # first N in generation order


class SuggestionResult(BaseModel):
    """Engine output; id/user/portfolio/created_at are stamped on persist."""

    model_config = ConfigDict(frozen=True)

    risk_level: RiskLevel
    suggestions: List[str] = Field(default_factory=list)

    @property
    def prediction(self) -> str:
        return PARAGRAPH_SEPARATOR.join(self.suggestions)


PARAGRAPH_SEPARATOR = "\n\n"
