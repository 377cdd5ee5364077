"""
modular_api.modules.catalog.router

Catalog endpoints.

Responsibilities:
- Create a product (delegates to `ProductCreationHandler`).
- Fetch a product by id.
"""

from __future__ import annotations

import uuid
from decimal import Decimal

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel
from starlette.status import HTTP_201_CREATED, HTTP_404_NOT_FOUND

from modular_api.api.deps import context_dep
from modular_api.modules.catalog.context import CatalogDbContext
from modular_api.modules.catalog.products import (
    ProductCreationCommand,
    ProductCreationHandler,
    ProductCreationResponse,
)
from modular_api.modules.catalog.repository import ProductRepo

router = APIRouter(prefix="/api/v1/catalog/products", tags=["catalog"])

catalog_context = context_dep(CatalogDbContext)


class ProductResponse(BaseModel):
    id: uuid.UUID
    name: str
    description: str | None
    price: Decimal


@router.post("", response_model=ProductCreationResponse, status_code=HTTP_201_CREATED)
async def create_product(
    body: ProductCreationCommand,
    context: CatalogDbContext = Depends(catalog_context),
) -> ProductCreationResponse:
    response = await ProductCreationHandler(context).handle(body)
    await context.session.commit()
    return response


@router.get("/{product_id}", response_model=ProductResponse)
async def get_product(
    product_id: uuid.UUID,
    context: CatalogDbContext = Depends(catalog_context),
) -> ProductResponse:
    product = await ProductRepo(context.session).get(product_id)
    if product is None:
        raise HTTPException(status_code=HTTP_404_NOT_FOUND, detail="Product not found")
    return ProductResponse(
        id=product.id,
        name=product.name,
        description=product.description,
        price=product.price,
    )
