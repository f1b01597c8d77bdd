from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from services.analytics.types import InvestmentType, RiskLevel


def _clean_text(value: str, field: str, max_len: int) -> str:
    text = (value or "").strip()
    if not text or len(text) > max_len:
        raise ValueError(f"{field} must be 1-{max_len} characters")
    return text


class InvestmentCreate(BaseModel):
    asset_name: str
    type: InvestmentType
    value: float = Field(ge=0, allow_inf_nan=False)
    risk: RiskLevel
    sector: str

    @field_validator("asset_name")
    @classmethod
    def validate_asset_name(cls, value: str) -> str:
        return _clean_text(value, "asset_name", 120)

    @field_validator("sector")
    @classmethod
    def validate_sector(cls, value: str) -> str:
        return _clean_text(value, "sector", 80)


class InvestmentUpdate(BaseModel):
    asset_name: Optional[str] = None
    type: Optional[InvestmentType] = None
    value: Optional[float] = Field(default=None, ge=0, allow_inf_nan=False)
    risk: Optional[RiskLevel] = None
    sector: Optional[str] = None

    @field_validator("asset_name")
    @classmethod
    def validate_asset_name(cls, value: Optional[str]) -> Optional[str]:
        return None if value is None else _clean_text(value, "asset_name", 120)

    @field_validator("sector")
    @classmethod
    def validate_sector(cls, value: Optional[str]) -> Optional[str]:
        return None if value is None else _clean_text(value, "sector", 80)


class InvestmentOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    portfolio_id: int
    asset_name: str
    type: str
    value: float
    risk: str
    sector: str
    created_at: datetime
