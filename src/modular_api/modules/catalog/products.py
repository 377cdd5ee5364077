"""
modular_api.modules.catalog.products

Product creation use case.

Responsibilities:
- Define the create-product command and its response.
- Map the command onto a `Product`, persist it through the Catalog context, and
  report the new id.
"""

from __future__ import annotations

import uuid
from decimal import Decimal

from pydantic import BaseModel, Field

from modular_api.modules.catalog.context import CatalogDbContext
from modular_api.modules.catalog.models import Product
from modular_api.modules.catalog.repository import ProductRepo
from modular_api.observability.logging import get_logger


class ProductCreationCommand(BaseModel):
    name: str = Field(min_length=1, max_length=75)
    description: str | None = Field(default=None, max_length=1000)
    price: Decimal = Field(ge=0, max_digits=12, decimal_places=2)


class ProductCreationResponse(BaseModel):
    id: uuid.UUID


class ProductCreationHandler:
    def __init__(self, context: CatalogDbContext) -> None:
        self._context = context
        self._log = get_logger(__name__)

    async def handle(self, command: ProductCreationCommand) -> ProductCreationResponse:
        if command is None:
            raise TypeError("command is required")

        product = Product(**command.model_dump())
        await ProductRepo(self._context.session).add(product)
        # Commit is left to the caller that owns the unit of work.
        self._log.info("product created", product_id=str(product.id))
        return ProductCreationResponse(id=product.id)
