"""Repository for suppliers."""

from crm_api.core.errors import SupplierNotFoundError
from crm_api.models.supplier import Supplier as SupplierRow
from crm_api.repositories.base import TenantEntityRepository
from crm_api.schemas.supplier import SUPPLIER_SORT_FIELDS, Supplier


class SupplierRepository(TenantEntityRepository[Supplier]):
    model = SupplierRow
    schema = Supplier
    sort_fields = SUPPLIER_SORT_FIELDS
    not_found = SupplierNotFoundError
