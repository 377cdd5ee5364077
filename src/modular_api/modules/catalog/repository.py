from __future__ import annotations

import uuid

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from modular_api.modules.catalog.models import Product


class ProductRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def add(self, product: Product) -> Product:
        self._session.add(product)
        # Flush so the generated id is available before commit.
        await self._session.flush()
        return product

    async def get(self, product_id: uuid.UUID) -> Product | None:
        return await self._session.get(Product, product_id)

    async def list_by_name(self, name: str, *, limit: int = 50) -> list[Product]:
        stmt = select(Product).where(Product.name == name).order_by(Product.created_at).limit(limit)
        return list((await self._session.execute(stmt)).scalars().all())
