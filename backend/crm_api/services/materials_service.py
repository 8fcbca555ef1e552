# backend/crm_api/services/materials_service.py
"""Materials lifecycle: ownership checks, partial updates and stage moves."""

from datetime import datetime
from typing import Callable, List, Tuple
import logging

from crm_api.core.errors import MaterialNotFoundError, SupplierNotFoundError, WarehouseNotFoundError
from crm_api.models.types import utcnow
from crm_api.repositories.base import MaterialStore, SupplierStore, WarehouseStore
from crm_api.schemas.material import (
    Material,
    MaterialCreate,
    MaterialParams,
    MaterialPatch,
    MaterialSearchItem,
    MaterialStage,
)
from crm_api.services.authorization import CallerInfo, ensure_allowed

logger = logging.getLogger(__name__)


class MaterialsService:
    """Business rules for materials in every stage.

    Args:
        materials: Material storage
        warehouses: Warehouse lookup used for reference checks
        suppliers: Supplier lookup used for reference checks
        clock: Source of ``last_updated`` timestamps
    """

    def __init__(
        self,
        materials: MaterialStore,
        warehouses: WarehouseStore,
        suppliers: SupplierStore,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.materials = materials
        self.warehouses = warehouses
        self.suppliers = suppliers
        self.clock = clock

    # ---- shared steps ----

    async def _new_material(self, caller: CallerInfo, data: MaterialCreate) -> Material:
        company_id = data.company_id if data.company_id is not None else caller.company_id
        ensure_allowed(caller, company_id)

        warehouse = await self.warehouses.get_by_id(data.warehouse_id)
        if warehouse is None:
            raise WarehouseNotFoundError()
        ensure_allowed(caller, warehouse.company_id)

        supplier = await self.suppliers.get_by_id(data.supplier_id)
        if supplier is None:
            raise SupplierNotFoundError()
        ensure_allowed(caller, supplier.company_id)

        values = data.model_dump(exclude={"company_id"})
        values.update(company_id=company_id, supplier_name=supplier.name, last_updated=self.clock())
        return Material(**values)

    async def _load(self, stage: MaterialStage, material_id: int, caller: CallerInfo) -> Material:
        material = await self.materials.get(stage, material_id)
        if material is None:
            raise MaterialNotFoundError()
        ensure_allowed(caller, material.company_id)
        return material

    async def _update(
        self, stage: MaterialStage, material_id: int, patch: MaterialPatch, caller: CallerInfo
    ) -> Material:
        material = await self._load(stage, material_id, caller)
        changes = patch.changes()

        # Only existence of a new reference is checked here, not its owner
        if "warehouse_id" in changes and changes["warehouse_id"] != material.warehouse_id:
            if await self.warehouses.get_by_id(changes["warehouse_id"]) is None:
                raise WarehouseNotFoundError()

        if "supplier_id" in changes and changes["supplier_id"] != material.supplier_id:
            supplier = await self.suppliers.get_by_id(changes["supplier_id"])
            if supplier is None:
                raise SupplierNotFoundError()
            changes.setdefault("supplier_name", supplier.name)

        changes["last_updated"] = self.clock()
        merged = material.model_copy(update=changes)
        await self.materials.update(stage, merged)
        return merged

    async def _delete(self, stage: MaterialStage, material_id: int, caller: CallerInfo) -> None:
        await self._load(stage, material_id, caller)
        await self.materials.delete(stage, material_id)
        logger.info(f"User {caller.user_id} deleted {stage.value} material {material_id}")

    # ---- planning ----

    async def create_planning(self, caller: CallerInfo, data: MaterialCreate) -> int:
        material = await self._new_material(caller, data)
        material_id = await self.materials.create_planning(material)
        logger.info(f"User {caller.user_id} created planning material {material_id}")
        return material_id

    async def get_planning_by_id(self, material_id: int, caller: CallerInfo) -> Material:
        return await self._load(MaterialStage.PLANNING, material_id, caller)

    async def update_planning_by_id(
        self, material_id: int, patch: MaterialPatch, caller: CallerInfo
    ) -> Material:
        return await self._update(MaterialStage.PLANNING, material_id, patch, caller)

    async def delete_planning_by_id(self, material_id: int, caller: CallerInfo) -> None:
        await self._delete(MaterialStage.PLANNING, material_id, caller)

    async def get_planning_list(self, params: MaterialParams) -> Tuple[List[Material], int]:
        return await self.materials.list(MaterialStage.PLANNING, params)

    async def move_planning_to_purchased(self, material_id: int, caller: CallerInfo) -> Tuple[int, int]:
        """Purchase a planning material.

        Returns:
            Tuple of (purchased id, item_id)
        """
        await self._load(MaterialStage.PLANNING, material_id, caller)
        return await self.materials.move_planning_to_purchased(material_id)

    # ---- purchased ----

    async def create_purchased(self, caller: CallerInfo, data: MaterialCreate) -> Tuple[int, int]:
        material = await self._new_material(caller, data)
        material_id, item_id = await self.materials.create_purchased(material)
        logger.info(f"User {caller.user_id} created purchased material {material_id} (item {item_id})")
        return material_id, item_id

    async def get_purchased_by_id(self, material_id: int, caller: CallerInfo) -> Material:
        return await self._load(MaterialStage.PURCHASED, material_id, caller)

    async def update_purchased_by_id(
        self, material_id: int, patch: MaterialPatch, caller: CallerInfo
    ) -> Material:
        return await self._update(MaterialStage.PURCHASED, material_id, patch, caller)

    async def delete_purchased_by_id(self, material_id: int, caller: CallerInfo) -> None:
        await self._delete(MaterialStage.PURCHASED, material_id, caller)

    async def get_purchased_list(self, params: MaterialParams) -> Tuple[List[Material], int]:
        return await self.materials.list(MaterialStage.PURCHASED, params)

    async def move_purchased_to_archive(self, material_id: int, caller: CallerInfo) -> None:
        await self._load(MaterialStage.PURCHASED, material_id, caller)
        await self.materials.move_purchased_to_archive(material_id)

    # ---- archives ----

    async def get_planning_archive_by_id(self, material_id: int, caller: CallerInfo) -> Material:
        return await self._load(MaterialStage.PLANNING_ARCHIVE, material_id, caller)

    async def get_purchased_archive_by_id(self, material_id: int, caller: CallerInfo) -> Material:
        return await self._load(MaterialStage.PURCHASED_ARCHIVE, material_id, caller)

    async def get_planning_archive_list(self, params: MaterialParams) -> Tuple[List[Material], int]:
        return await self.materials.list(MaterialStage.PLANNING_ARCHIVE, params)

    async def get_purchased_archive_list(self, params: MaterialParams) -> Tuple[List[Material], int]:
        return await self.materials.list(MaterialStage.PURCHASED_ARCHIVE, params)

    async def delete_planning_archive_by_id(self, material_id: int, caller: CallerInfo) -> None:
        await self._delete(MaterialStage.PLANNING_ARCHIVE, material_id, caller)

    async def delete_purchased_archive_by_id(self, material_id: int, caller: CallerInfo) -> None:
        await self._delete(MaterialStage.PURCHASED_ARCHIVE, material_id, caller)

    # ---- search ----

    async def search(self, params: MaterialParams) -> Tuple[List[MaterialSearchItem], int]:
        """Name prefix search across all stages of the company in ``params``."""
        return await self.materials.search(params)
