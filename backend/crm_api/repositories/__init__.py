"""Repository layer for database operations.

This module provides repository classes for materials and the tenant-owned
entities they reference, plus the store protocols services are written
against.
"""

from crm_api.repositories.base import (
    MaterialStore,
    SupplierStore,
    TenantEntityStore,
    WarehouseStore,
)
from crm_api.repositories.material_repository import MaterialRepository
from crm_api.repositories.section_repository import SectionRepository
from crm_api.repositories.supplier_repository import SupplierRepository
from crm_api.repositories.user_repository import UserRepository
from crm_api.repositories.warehouse_repository import WarehouseRepository

__all__ = [
    "MaterialStore",
    "SupplierStore",
    "TenantEntityStore",
    "WarehouseStore",
    "MaterialRepository",
    "SectionRepository",
    "SupplierRepository",
    "UserRepository",
    "WarehouseRepository",
]
