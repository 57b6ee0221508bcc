"""Client ORM — a travel-trade customer record.

Invariants:
    - updated_at refreshed by every successful mutation
    - created_by stamped from the acting session, never from request input
    - Interactions reference clients with ON DELETE CASCADE
"""

from datetime import datetime, timezone

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from travelcrm.db.base import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Client(Base):
    __tablename__ = "clients"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    phone: Mapped[str] = mapped_column(String(50), nullable=False)
    market_type: Mapped[str] = mapped_column(
        String(10), nullable=False, default="local",
    )
    market: Mapped[str | None] = mapped_column(String(100), nullable=True)
    segment: Mapped[str | None] = mapped_column(String(20), nullable=True)
    business_type: Mapped[str | None] = mapped_column(String(30), nullable=True)
    headcount_name: Mapped[str | None] = mapped_column(String(200), nullable=True)
    headcount_role: Mapped[str | None] = mapped_column(String(100), nullable=True)
    headcount_email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow, index=True,
    )
    created_by: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("admins.id"), nullable=True,
    )
