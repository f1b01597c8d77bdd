# models/user.py
from sqlalchemy.orm import Mapped, mapped_column, relationship
from database import Base

class User(Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)

    # link to Supabase auth.users.id (UUID string)
    supabase_user_id: Mapped[str] = mapped_column(unique=True, index=True)

    email: Mapped[str] = mapped_column(unique=True, index=True)

    profile = relationship("UserProfile", back_populates="user", uselist=False)
    portfolio = relationship("Portfolio", back_populates="owner", uselist=False)
    investments = relationship("Investment", back_populates="owner")
