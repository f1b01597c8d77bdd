# main.py
import os

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from config.logging_config import configure_logging

configure_logging()

from middleware.rate_limit import limiter
from middleware.request_logging import RequestLoggingMiddleware
from routers.user_routes import router as user_router
from routers.profile_routes import router as profile_router
from routers.investment_routes import router as investment_router
from routers.portfolio_routes import router as portfolio_router
from routers.suggestion_routes import router as suggestion_router
from routers.market_data_routes import router as market_data_router


app = FastAPI(title="Portfolio Advisor API")

origins = [
    o.strip()
    for o in os.getenv("CORS_ORIGINS", "http://localhost:3000,http://localhost:5173").split(",")
    if o.strip()
]

app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

app.add_middleware(RequestLoggingMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["*"],
)

# Include routers
app.include_router(user_router)
app.include_router(profile_router, prefix="/api/profile")
app.include_router(investment_router, prefix="/api/investments")
app.include_router(portfolio_router, prefix="/api/portfolio")
app.include_router(suggestion_router, prefix="/api/suggestions")
app.include_router(market_data_router, prefix="/api/market-data")

# db startup
from database import Base, engine
import models  # this triggers models/__init__.py which imports all tables

Base.metadata.create_all(bind=engine)
