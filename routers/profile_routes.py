# routers/profile_routes.py
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from database import get_db
from models.user import User
from schemas.profile import ProfileCreate, ProfileOut, ProfileUpdate
from services.profile_service import create_profile, get_profile, update_profile
from services.supabase_auth import get_current_db_user

router = APIRouter()

@router.get("", response_model=ProfileOut)
def get_user_profile(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_db_user),
):
    profile = get_profile(db, current_user.id)
    if not profile:
        raise HTTPException(status_code=404, detail="Profile not found")
    return profile

@router.post("", response_model=ProfileOut, status_code=status.HTTP_201_CREATED)
def create_user_profile(
    payload: ProfileCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_db_user),
):
    try:
        return create_profile(db, current_user.id, **payload.model_dump())
    except ValueError as exc:
        raise HTTPException(status_code=409, detail=str(exc))

@router.patch("", response_model=ProfileOut)
def update_user_profile(
    payload: ProfileUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_db_user),
):
    try:
        return update_profile(db, current_user.id, **payload.model_dump(exclude_unset=True))
    except ValueError as exc:
        raise HTTPException(status_code=404, detail=str(exc))
