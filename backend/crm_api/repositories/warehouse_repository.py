"""Repository for warehouses."""

from crm_api.core.errors import WarehouseNotFoundError
from crm_api.models.warehouse import Warehouse as WarehouseRow
from crm_api.repositories.base import TenantEntityRepository
from crm_api.schemas.warehouse import WAREHOUSE_SORT_FIELDS, Warehouse


class WarehouseRepository(TenantEntityRepository[Warehouse]):
    model = WarehouseRow
    schema = Warehouse
    sort_fields = WAREHOUSE_SORT_FIELDS
    not_found = WarehouseNotFoundError
