"""
tests.test_catalog

Product creation handler against an in-memory Catalog store.
"""

from __future__ import annotations

from decimal import Decimal

import pytest
from pydantic import ValidationError
from structlog.testing import capture_logs

from modular_api.modules.catalog.context import CatalogDbContext
from modular_api.modules.catalog.products import ProductCreationCommand, ProductCreationHandler
from modular_api.modules.catalog.repository import ProductRepo
from modular_api.persistence.binder import ContextBinder
from modular_api.settings import DbConfig


@pytest.mark.asyncio
async def test_handler_persists_product_and_logs_id(in_memory_config: DbConfig) -> None:
    binder = ContextBinder(in_memory_config)
    binder.bind(CatalogDbContext)
    try:
        async with binder.scope(CatalogDbContext) as context:
            await context.ensure_created()
            command = ProductCreationCommand(name="Desk lamp", price=Decimal("24.50"))
            with capture_logs() as logs:
                response = await ProductCreationHandler(context).handle(command)
            await context.session.commit()

        created = [e for e in logs if e["event"] == "product created"]
        assert created == [{"event": "product created", "log_level": "info", "product_id": str(response.id)}]

        async with binder.scope(CatalogDbContext) as context:
            product = await ProductRepo(context.session).get(response.id)
            assert product is not None
            assert product.name == "Desk lamp"
            assert product.price == Decimal("24.50")
            assert [p.id for p in await ProductRepo(context.session).list_by_name("Desk lamp")] == [response.id]
    finally:
        await binder.dispose()


@pytest.mark.asyncio
async def test_handler_requires_a_command(in_memory_config: DbConfig) -> None:
    binder = ContextBinder(in_memory_config)
    binder.bind(CatalogDbContext)
    try:
        async with binder.scope(CatalogDbContext) as context:
            with pytest.raises(TypeError):
                await ProductCreationHandler(context).handle(None)  # type: ignore[arg-type]
    finally:
        await binder.dispose()


@pytest.mark.parametrize(
    "payload",
    [
        {"name": "", "price": "1.00"},
        {"name": "x" * 76, "price": "1.00"},
        {"name": "Chair", "price": "-1"},
        {"name": "Chair", "price": "1.001"},
    ],
)
def test_command_validation(payload: dict) -> None:
    with pytest.raises(ValidationError):
        ProductCreationCommand(**payload)
