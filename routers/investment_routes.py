from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session

from database import get_db
from models.user import User
from schemas.investment import InvestmentCreate, InvestmentOut, InvestmentUpdate
from services.investment_service import (
    create_investment,
    delete_investment,
    list_investments,
    update_investment,
)
from services.supabase_auth import get_current_db_user

router = APIRouter()


@router.get("", response_model=List[InvestmentOut])
def get_user_investments(
    db: Session = Depends(get_db),
    user: User = Depends(get_current_db_user),
):
    return list_investments(db, user.id)


@router.post("", response_model=InvestmentOut, status_code=status.HTTP_201_CREATED)
def create_user_investment(
    payload: InvestmentCreate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_db_user),
):
    return create_investment(db, user.id, **payload.model_dump(mode="json"))


@router.put("/{investment_id}", response_model=InvestmentOut)
def update_user_investment(
    investment_id: int,
    payload: InvestmentUpdate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_db_user),
):
    try:
        return update_investment(
            db,
            user.id,
            investment_id,
            **payload.model_dump(mode="json", exclude_unset=True),
        )
    except ValueError as exc:
        raise HTTPException(status_code=404, detail=str(exc))


@router.delete("/{investment_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_user_investment(
    investment_id: int,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_db_user),
):
    try:
        delete_investment(db, user.id, investment_id)
    except ValueError as exc:
        raise HTTPException(status_code=404, detail=str(exc))
    return Response(status_code=status.HTTP_204_NO_CONTENT)
