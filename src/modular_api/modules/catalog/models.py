"""
modular_api.modules.catalog.models

Catalog persistence schema.

Responsibilities:
- Define the Catalog module's declarative base (its own `MetaData`).
- Define the `Product` entity.
"""

from __future__ import annotations

import uuid
from datetime import UTC, datetime
from decimal import Decimal

from sqlalchemy import Numeric, String, Text, Uuid as SAUuid
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def _utcnow() -> datetime:
    # Persist naive UTC timestamps; matches the revision scripts' DateTime columns.
    return datetime.now(UTC).replace(tzinfo=None)


class CatalogBase(DeclarativeBase):
    pass


class Product(CatalogBase):
    __tablename__ = "products"

    id: Mapped[uuid.UUID] = mapped_column(
        SAUuid(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    name: Mapped[str] = mapped_column(String(75), nullable=False, index=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    price: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)

    created_at: Mapped[datetime] = mapped_column(nullable=False, default=_utcnow)


# --- Module Notes -----------------------------------------------------------
# Schema changes here need a matching revision under migrations/versions/catalog/.
