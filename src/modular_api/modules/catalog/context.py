"""
modular_api.modules.catalog.context

Persistence context for the Catalog module (label `CATALOG`).
"""

from __future__ import annotations

from modular_api.modules.catalog.models import CatalogBase
from modular_api.persistence.context import DbContext


class CatalogDbContext(DbContext):
    metadata = CatalogBase.metadata
