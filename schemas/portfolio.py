from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict


class PortfolioOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    total_investments: float
    created_at: datetime
    last_updated: datetime


class AllocationOut(BaseModel):
    key: str
    value: float
    weight: float  # percent of total value


class PortfolioSummaryOut(BaseModel):
    portfolio_id: int
    total_value: float
    risk_level: str
    risk_score: Optional[float] = None
    investment_count: int
    type_allocation: List[AllocationOut]
    sector_allocation: List[AllocationOut]
    last_updated: Optional[datetime] = None
