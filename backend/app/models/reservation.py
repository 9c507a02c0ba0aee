"""Reservation model — stays and visits booked on a property."""

import uuid
from datetime import datetime
from decimal import Decimal

from sqlalchemy import DateTime, ForeignKey, Index, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.database import Base, TenantScopedMixin, TimestampMixin, UUIDPrimaryKeyMixin


class Reservation(UUIDPrimaryKeyMixin, TenantScopedMixin, TimestampMixin, Base):
    """A guest's reservation of a property between two instants."""

    __tablename__ = "reservations"

    property_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("properties.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    guest_name: Mapped[str] = mapped_column(String(255), nullable=False)
    guest_phone: Mapped[str | None] = mapped_column(String(50), nullable=True)
    num_guests: Mapped[int] = mapped_column(Integer, default=1)
    check_in: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    check_out: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    status: Mapped[str] = mapped_column(
        String(50),
        default="pending",
        index=True,
    )  # pending, confirmed, cancelled, checked_in, checked_out, visit
    total_price: Mapped[Decimal | None] = mapped_column(Numeric(10, 2), nullable=True)
    special_requests: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Relationships
    property: Mapped["Property"] = relationship(back_populates="reservations", lazy="raise_on_sql")  # type: ignore[name-defined]  # noqa: F821

    __table_args__ = (Index("ix_reservations_check_in", "check_in"),)

    def __repr__(self) -> str:
        return f"<Reservation(id={self.id}, property_id={self.property_id}, status={self.status})>"
