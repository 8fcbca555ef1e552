# backend/crm_api/services/warehouse_service.py
from typing import List, Tuple
import logging

from crm_api.core.errors import WarehouseNotFoundError
from crm_api.models.user import User
from crm_api.repositories.base import MaterialStore, WarehouseStore
from crm_api.repositories.user_repository import UserRepository
from crm_api.schemas.common import ListParams, TenantListParams
from crm_api.schemas.material import Material
from crm_api.schemas.warehouse import Warehouse, WarehouseCreate, WarehousePatch
from crm_api.services.authorization import (
    BUILTIN_SECTIONS,
    CallerInfo,
    ensure_allowed,
    ensure_company_admin,
)

logger = logging.getLogger(__name__)


class WarehouseService:
    """Warehouses; reads are open to the owning company, changes take a company admin."""

    def __init__(self, warehouses: WarehouseStore, materials: MaterialStore, users: UserRepository):
        self.warehouses = warehouses
        self.materials = materials
        self.users = users

    async def create(self, caller: CallerInfo, data: WarehouseCreate) -> Warehouse:
        ensure_company_admin(caller)
        warehouse = await self.warehouses.create(caller.company_id, data)
        logger.info(f"User {caller.user_id} created warehouse {warehouse.id}")
        return warehouse

    async def get_by_id(self, warehouse_id: int, caller: CallerInfo) -> Warehouse:
        warehouse = await self.warehouses.get_by_id(warehouse_id)
        if warehouse is None:
            raise WarehouseNotFoundError()
        ensure_allowed(caller, warehouse.company_id)
        return warehouse

    async def update(self, warehouse_id: int, patch: WarehousePatch, caller: CallerInfo) -> Warehouse:
        ensure_company_admin(caller)
        await self.get_by_id(warehouse_id, caller)
        return await self.warehouses.update(warehouse_id, patch.model_dump(exclude_unset=True))

    async def delete(self, warehouse_id: int, caller: CallerInfo) -> None:
        ensure_company_admin(caller)
        # Materials referencing the warehouse are left in place
        await self.get_by_id(warehouse_id, caller)
        await self.warehouses.delete(warehouse_id)
        logger.info(f"User {caller.user_id} deleted warehouse {warehouse_id}")

    async def list(self, params: TenantListParams) -> Tuple[List[Warehouse], int]:
        return await self.warehouses.list(params)

    async def income_history(
        self, warehouse_id: int, caller: CallerInfo, params: ListParams
    ) -> Tuple[List[Material], int]:
        """Purchased materials received into the warehouse, one page at a time."""
        await self.get_by_id(warehouse_id, caller)
        return await self.materials.list_income_by_warehouse(warehouse_id, params)

    async def get_responsible_users(
        self, caller: CallerInfo, params: ListParams
    ) -> Tuple[List[User], int]:
        """Users of the caller's company who can be put in charge of a warehouse."""
        ensure_company_admin(caller)
        return await self.users.list_with_sections(
            TenantListParams(company_id=caller.company_id, **params.model_dump()), BUILTIN_SECTIONS
        )
