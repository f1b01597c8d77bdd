# routers/portfolio_routes.py
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from database import get_db
from models.user import User
from schemas.portfolio import PortfolioOut, PortfolioSummaryOut
from services.analytics.errors import InvalidInput
from services.portfolio_service import get_or_create_portfolio, get_portfolio_summary
from services.supabase_auth import get_current_db_user

router = APIRouter()


@router.get("", response_model=PortfolioOut)
def portfolio(
    db: Session = Depends(get_db),
    user: User = Depends(get_current_db_user),
):
    return get_or_create_portfolio(db, user.id)


@router.get("/summary", response_model=PortfolioSummaryOut)
def portfolio_summary(
    db: Session = Depends(get_db),
    user: User = Depends(get_current_db_user),
):
    try:
        return get_portfolio_summary(db, user.id)
    except InvalidInput as e:
        raise HTTPException(status_code=422, detail=f"Failed to build portfolio summary: {e}")
