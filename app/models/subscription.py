# app/models/subscription.py - Parent subscriptions per school
from __future__ import annotations

from sqlalchemy import BigInteger, Boolean, CheckConstraint, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base import Base, new_id, now_ms


class Subscription(Base):
    __tablename__ = "subscriptions"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    user_id: Mapped[str] = mapped_column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    school_id: Mapped[str | None] = mapped_column(String(36), ForeignKey("schools.id"), index=True)
    plan: Mapped[str] = mapped_column(String(16), nullable=False, default="free")
    start_date: Mapped[int] = mapped_column(BigInteger, nullable=False)
    end_date: Mapped[int] = mapped_column(BigInteger, nullable=False)
    # Turned on by the checkout flow once payment clears
    active: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    students_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    payment_status: Mapped[str | None] = mapped_column(String(16))  # pending|paid|failed|expired

    created_at: Mapped[int] = mapped_column(BigInteger, nullable=False, default=now_ms)

    __table_args__ = (
        CheckConstraint("plan IN ('free','standard','premium')", name="ck_subscription_plan"),
        CheckConstraint("start_date <= end_date", name="ck_subscription_period"),
    )
