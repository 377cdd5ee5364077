"""
modular_api.modules.ordering.context

Persistence context for the Ordering module (label `ORDERING`).
"""

from __future__ import annotations

from modular_api.modules.ordering.models import OrderingBase
from modular_api.persistence.context import DbContext


class OrderingDbContext(DbContext):
    metadata = OrderingBase.metadata
