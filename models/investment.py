# models/investment.py
from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, Float, ForeignKey, String, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from database import Base


class Investment(Base):
    __tablename__ = "investments"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), index=True)
    portfolio_id: Mapped[int] = mapped_column(ForeignKey("portfolios.id", ondelete="CASCADE"), index=True)

    asset_name: Mapped[str] = mapped_column(String(120))
    type: Mapped[str] = mapped_column(String(16))     # Real Estate/Stocks/Bonds/Crypto/Deposits
    value: Mapped[float] = mapped_column(Float)
    risk: Mapped[str] = mapped_column(String(8))      # Low/Medium/High
    sector: Mapped[str] = mapped_column(String(80))

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    owner = relationship("User", back_populates="investments")
    portfolio = relationship("Portfolio", back_populates="investments")
