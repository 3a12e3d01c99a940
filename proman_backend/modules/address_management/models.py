"""Address management models for ProMan.

Addresses form a self-referencing tree:
community -> building -> unit/floor -> room.
"""

import enum
from decimal import Decimal

from sqlalchemy import (
    Boolean,
    Enum,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column

from ...database import Base, TimestampMixin, enum_values


class AddressType(str, enum.Enum):
    """Address node types."""

    COMMUNITY = "community"
    BUILDING = "building"
    UNIT = "unit"
    FLOOR = "floor"
    ROOM = "room"


class Address(TimestampMixin, Base):
    """A node in the address hierarchy.

    ``parent_id`` is null for root nodes. Rows are never removed, only
    deactivated through ``is_active``.
    """

    __tablename__ = "addresses"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    type: Mapped[AddressType] = mapped_column(
        Enum(
            AddressType,
            name="address_type",
            native_enum=False,
            length=50,
            values_callable=enum_values,
        ),
        nullable=False,
    )
    parent_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("addresses.id"), nullable=True
    )
    code: Mapped[str | None] = mapped_column(String(100), nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    area: Mapped[Decimal | None] = mapped_column(Numeric(10, 2), nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    __table_args__ = (
        Index("ix_addresses_parent", "parent_id"),
        Index("ix_addresses_type", "type"),
        Index("ix_addresses_is_active", "is_active"),
    )

    def __repr__(self) -> str:
        return f"<Address(id={self.id}, type={self.type}, name={self.name})>"
