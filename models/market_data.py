from sqlalchemy import DateTime, Float, Integer, String, func
from database import Base
from sqlalchemy.orm import mapped_column

class MarketData(Base):
    __tablename__ = "market_data"

    id = mapped_column(Integer, primary_key=True, index=True)
    symbol = mapped_column(String(20), nullable=False, index=True)
    price = mapped_column(Float, nullable=False)
    timestamp = mapped_column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True)
