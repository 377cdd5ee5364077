from __future__ import annotations

import pytest

from modular_api.modules.catalog.context import CatalogDbContext
from modular_api.modules.ordering.context import OrderingDbContext
from modular_api.persistence.context import derive_module_label
from modular_api.persistence.errors import ConfigurationError
from modular_api.persistence.session import in_memory_url


@pytest.mark.parametrize(
    ("type_name", "label"),
    [
        ("CatalogDbContext", "CATALOG"),
        ("OrderingDbContext", "ORDERING"),
        ("CatalogDBCONTEXT", "CATALOG"),
        ("catalogdbcontext", "CATALOG"),
        ("OrderingContext", "ORDERING"),
        ("Identity", "IDENTITY"),
    ],
)
def test_label_derivation(type_name: str, label: str) -> None:
    assert derive_module_label(type_name) == label


@pytest.mark.parametrize("type_name", ["DbContext", "Context", "dbcontext", "  "])
def test_empty_label_is_rejected(type_name: str) -> None:
    with pytest.raises(ConfigurationError):
        derive_module_label(type_name)


def test_module_contexts_have_distinct_labels() -> None:
    assert CatalogDbContext.module_label() == "CATALOG"
    assert OrderingDbContext.module_label() == "ORDERING"


def test_in_memory_store_is_named_after_label() -> None:
    assert in_memory_url("CATALOG") == "sqlite+aiosqlite:///file:CATALOG?mode=memory&cache=shared&uri=true"
