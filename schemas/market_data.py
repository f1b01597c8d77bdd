from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class MarketTickIn(BaseModel):
    symbol: str
    price: float = Field(gt=0, allow_inf_nan=False)
    timestamp: Optional[datetime] = None

    @field_validator("symbol")
    @classmethod
    def validate_symbol(cls, value: str) -> str:
        symbol = (value or "").strip().upper()
        if not symbol or len(symbol) > 20:
            raise ValueError("symbol must be 1-20 characters")
        return symbol


class MarketTickOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    symbol: str
    price: float
    timestamp: Optional[datetime] = None
