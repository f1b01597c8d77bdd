from __future__ import annotations

from sqlalchemy.orm import Session

from models.user_profile import UserProfile


def get_profile(db: Session, user_id: int) -> UserProfile | None:
    return db.query(UserProfile).filter(UserProfile.user_id == user_id).first()


def create_profile(db: Session, user_id: int, **fields) -> UserProfile:
    if get_profile(db, user_id):
        raise ValueError("Profile already exists")

    profile = UserProfile(user_id=user_id, **fields)
    db.add(profile)
    db.commit()
    db.refresh(profile)
    return profile


def update_profile(db: Session, user_id: int, **changes) -> UserProfile:
    profile = get_profile(db, user_id)
    if not profile:
        raise ValueError("Profile not found")

    # Update only fields provided
    for key, value in changes.items():
        setattr(profile, key, value)

    db.add(profile)
    db.commit()
    db.refresh(profile)
    return profile
