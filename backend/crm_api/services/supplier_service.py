# backend/crm_api/services/supplier_service.py
from typing import List, Tuple
import logging

from crm_api.core.errors import SupplierNotFoundError
from crm_api.repositories.base import SupplierStore
from crm_api.schemas.common import TenantListParams
from crm_api.schemas.supplier import Supplier, SupplierCreate, SupplierPatch
from crm_api.services.authorization import CallerInfo, ensure_allowed, ensure_company_admin

logger = logging.getLogger(__name__)


class SupplierService:
    def __init__(self, suppliers: SupplierStore):
        self.suppliers = suppliers

    async def create(self, caller: CallerInfo, data: SupplierCreate) -> Supplier:
        ensure_company_admin(caller)
        supplier = await self.suppliers.create(caller.company_id, data)
        logger.info(f"User {caller.user_id} created supplier {supplier.id}")
        return supplier

    async def get_by_id(self, supplier_id: int, caller: CallerInfo) -> Supplier:
        supplier = await self.suppliers.get_by_id(supplier_id)
        if supplier is None:
            raise SupplierNotFoundError()
        ensure_allowed(caller, supplier.company_id)
        return supplier

    async def update(self, supplier_id: int, patch: SupplierPatch, caller: CallerInfo) -> Supplier:
        ensure_company_admin(caller)
        await self.get_by_id(supplier_id, caller)
        return await self.suppliers.update(supplier_id, patch.model_dump(exclude_unset=True))

    async def delete(self, supplier_id: int, caller: CallerInfo) -> None:
        ensure_company_admin(caller)
        await self.get_by_id(supplier_id, caller)
        await self.suppliers.delete(supplier_id)
        logger.info(f"User {caller.user_id} deleted supplier {supplier_id}")

    async def list(self, params: TenantListParams) -> Tuple[List[Supplier], int]:
        return await self.suppliers.list(params)
