"""Resident management models for ProMan.

Residents occupy room-type addresses as owners, tenants or family members.
"""

from datetime import datetime

from sqlalchemy import (
    Boolean,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ...database import Base, TimestampMixin
from ..address_management.models import Address

# Common resident types; the column stays open-ended
RESIDENT_TYPES = ("owner", "tenant", "family")
DEFAULT_RESIDENT_TYPE = "owner"


class Resident(TimestampMixin, Base):
    """A person living at a room address."""

    __tablename__ = "residents"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    phone: Mapped[str | None] = mapped_column(String(20), nullable=True)
    id_card: Mapped[str | None] = mapped_column(String(18), nullable=True)
    address_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("addresses.id"), nullable=False
    )
    resident_type: Mapped[str] = mapped_column(
        String(50), nullable=False, default=DEFAULT_RESIDENT_TYPE
    )
    move_in_date: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    move_out_date: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    # Relationships
    address: Mapped["Address"] = relationship("Address")

    __table_args__ = (
        Index("ix_residents_address", "address_id"),
        Index("ix_residents_phone", "phone"),
        Index("ix_residents_is_active", "is_active"),
    )

    def __repr__(self) -> str:
        return f"<Resident(id={self.id}, name={self.name}, address_id={self.address_id})>"
