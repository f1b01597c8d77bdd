# routers/market_data_routes.py
from typing import Dict, List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from database import get_db
from schemas.market_data import MarketTickIn, MarketTickOut
from services.market_data_service import get_latest_ticks, load_market_snapshot, record_tick
from services.supabase_auth import get_current_db_user

router = APIRouter()


@router.get("/latest", response_model=Dict[str, MarketTickOut])
async def latest_market_data(db: Session = Depends(get_db)):
    ticks = await load_market_snapshot(db)
    return {t.symbol: t for t in ticks}


@router.get("", response_model=List[MarketTickOut])
def list_market_data(db: Session = Depends(get_db)):
    return get_latest_ticks(db)


@router.post("", response_model=MarketTickOut, status_code=201, dependencies=[Depends(get_current_db_user)])
def post_market_tick(payload: MarketTickIn, db: Session = Depends(get_db)):
    return record_tick(db, payload.symbol, payload.price, payload.timestamp)
