# models/analysis_report.py
from __future__ import annotations
from sqlalchemy import DateTime, ForeignKey, String, Text, func
from database import Base
from sqlalchemy.orm import Mapped, mapped_column, relationship
from datetime import datetime

class AnalysisReport(Base):
    """Snapshot of one suggestion run. Rows are append-only."""

    __tablename__ = "analysis_reports"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    portfolio_id: Mapped[int] = mapped_column(ForeignKey("portfolios.id", ondelete="CASCADE"), nullable=False, index=True)
    risk: Mapped[str] = mapped_column(String(8), nullable=False)
    prediction: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    portfolio = relationship("Portfolio", back_populates="reports")
