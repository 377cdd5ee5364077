"""
modular_api.modules.ordering.models

Ordering persistence schema.

Responsibilities:
- Define the Ordering module's declarative base (its own `MetaData`).
- Define the `Order` entity. Products are referenced by id only; modules never
  share foreign keys.
"""

from __future__ import annotations

import enum
import uuid
from datetime import UTC, datetime

from sqlalchemy import Enum, Index, String, Uuid as SAUuid
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def _utcnow() -> datetime:
    return datetime.now(UTC).replace(tzinfo=None)


class OrderingBase(DeclarativeBase):
    pass


class OrderStatus(enum.StrEnum):
    # Enum values are stored in DB; treat as stable API contract.
    placed = "PLACED"
    fulfilled = "FULFILLED"
    cancelled = "CANCELLED"


class Order(OrderingBase):
    __tablename__ = "orders"

    id: Mapped[uuid.UUID] = mapped_column(
        SAUuid(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    customer_id: Mapped[str] = mapped_column(String(128), nullable=False)
    product_id: Mapped[uuid.UUID] = mapped_column(SAUuid(as_uuid=True), nullable=False)
    quantity: Mapped[int] = mapped_column(nullable=False, default=1)
    status: Mapped[OrderStatus] = mapped_column(
        Enum(
            OrderStatus,
            native_enum=False,
            length=16,
            values_callable=lambda e: [m.value for m in e],
        ),
        nullable=False,
        default=OrderStatus.placed,
    )

    created_at: Mapped[datetime] = mapped_column(nullable=False, default=_utcnow)

    __table_args__ = (Index("ix_orders_customer_created", "customer_id", "created_at"),)
