"""SQLAlchemy database models."""

from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional

from sqlalchemy import CheckConstraint, DateTime, Index, Integer, Numeric, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    """Base class for all models."""

    pass


class TrackingTarget(Base):
    """Product listing being monitored for price and availability.

    Rows are created and edited by the CRUD layer. The sniper only reads
    ``id``, ``locator`` and ``display_name`` and writes the three
    check-result columns.
    """

    __tablename__ = "tracking_targets"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    display_name: Mapped[str] = mapped_column(Text, nullable=False)
    locator: Mapped[Optional[str]] = mapped_column(Text, nullable=True)  # URL or search token
    status: Mapped[str] = mapped_column(String(16), default="tracking", nullable=False)
    target_price: Mapped[Optional[Decimal]] = mapped_column(Numeric(12, 2), nullable=True)

    # Written by the reconciler
    current_price: Mapped[Optional[Decimal]] = mapped_column(Numeric(12, 2), nullable=True)
    stock_status: Mapped[Optional[str]] = mapped_column(String(16), nullable=True)
    last_checked: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False
    )

    __table_args__ = (
        CheckConstraint(
            "status IN ('tracking', 'not-tracking')", name="ck_tracking_targets_status"
        ),
        CheckConstraint(
            "stock_status IS NULL OR stock_status IN ('in-stock', 'out-of-stock')",
            name="ck_tracking_targets_stock_status",
        ),
        Index("ix_tracking_targets_status", "status"),
    )

    def __repr__(self) -> str:
        return f"<TrackingTarget id={self.id} name={self.display_name!r} status={self.status}>"
