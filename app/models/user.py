# app/models/user.py - Application users
from __future__ import annotations

from sqlalchemy import BigInteger, Boolean, String
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base import Base, new_id, now_ms
from app.services.permissions import UserRole


class User(Base):
    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    email: Mapped[str | None] = mapped_column(String(255), unique=True, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False, default="")

    # admin | schoolAdmin | teacher | parent
    role: Mapped[str] = mapped_column(String(32), nullable=False, default=UserRole.PARENT.value)
    # Set for school admins and teachers
    school_id: Mapped[str | None] = mapped_column(String(36), index=True)

    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    created_at: Mapped[int] = mapped_column(BigInteger, nullable=False, default=now_ms)

    def __repr__(self):
        return f"<User(id={self.id}, email='{self.email}', role={self.role})>"
