from __future__ import annotations

from sqlalchemy import Column, Integer, String, DateTime, Boolean, ForeignKey
from sqlalchemy.sql import func
from sqlalchemy.orm import Mapped, mapped_column
from datetime import datetime

from database.database import Base


class User(Base):
    """Forum members. Created on first login, never deleted."""

    __tablename__ = "users"

    id:         Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    username:   Mapped[str] = mapped_column(String(50), unique=True, nullable=False)
    email:      Mapped[str | None] = mapped_column(String(100), nullable=True)
    created_at                    = Column(DateTime, server_default=func.now())

    # signed, only ever moved by ±1 from the vote handlers
    karma:      Mapped[int]  = mapped_column(Integer, default=0, nullable=False)

    is_admin:     Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    is_moderator: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    deleted_at:   Mapped[datetime | None] = mapped_column(DateTime, nullable=True)


class Hat(Base):
    __tablename__ = "hats"

    id         = Column(Integer, primary_key=True)
    created_at = Column(DateTime, server_default=func.now())
    user_id    = Column(Integer, ForeignKey("users.id"), nullable=False)
    granted_by_user_id = Column(Integer, nullable=True)
    hat        = Column(String(255), nullable=False)
    link       = Column(String(255), nullable=True)
    doffed_at  = Column(DateTime, nullable=True)
