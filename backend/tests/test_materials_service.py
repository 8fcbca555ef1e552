"""Tests for MaterialsService rules, using in-memory stores."""

from datetime import datetime, timezone
from typing import Dict, Tuple

import pytest
from pydantic import ValidationError

from crm_api.core.errors import (
    MaterialNotFoundError,
    NotAllowedError,
    SupplierNotFoundError,
    WarehouseNotFoundError,
)
from crm_api.repositories import MaterialRepository, SupplierRepository, WarehouseRepository
from crm_api.schemas.material import Material, MaterialCreate, MaterialPatch, MaterialStage
from crm_api.schemas.supplier import Supplier, SupplierCreate
from crm_api.schemas.warehouse import Warehouse, WarehouseCreate
from crm_api.services.authorization import FULL_ALL_ACCESS, CallerInfo
from crm_api.services.materials_service import MaterialsService

NOW = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


class FakeMaterialStore:
    """Dict-backed stand-in for MaterialRepository."""

    def __init__(self):
        self.tables: Dict[MaterialStage, Dict[int, Material]] = {stage: {} for stage in MaterialStage}
        self.next_id = 1
        self.next_item_id = 1

    def _new_id(self) -> int:
        self.next_id += 1
        return self.next_id - 1

    async def create_planning(self, material: Material) -> int:
        material_id = self._new_id()
        self.tables[MaterialStage.PLANNING][material_id] = material.model_copy(update={"id": material_id, "item_id": 0})
        return material_id

    async def create_purchased(self, material: Material) -> Tuple[int, int]:
        material_id, item_id = self._new_id(), self.next_item_id
        self.next_item_id += 1
        self.tables[MaterialStage.PURCHASED][material_id] = material.model_copy(
            update={"id": material_id, "item_id": item_id}
        )
        return material_id, item_id

    async def get(self, stage, material_id):
        return self.tables[stage].get(material_id)

    async def update(self, stage, material):
        if material.id not in self.tables[stage]:
            raise MaterialNotFoundError()
        self.tables[stage][material.id] = material

    async def delete(self, stage, material_id):
        if self.tables[stage].pop(material_id, None) is None:
            raise MaterialNotFoundError()

    async def list(self, stage, params):
        items = [m for m in self.tables[stage].values() if m.company_id == params.company_id]
        return items[params.offset:params.offset + params.limit], len(items)

    async def move_planning_to_purchased(self, material_id):
        planning = self.tables[MaterialStage.PLANNING].pop(material_id, None)
        if planning is None:
            raise MaterialNotFoundError()
        purchased_id, item_id = await self.create_purchased(planning)
        self.tables[MaterialStage.PLANNING_ARCHIVE][material_id] = planning.model_copy(update={"item_id": item_id})
        return purchased_id, item_id

    async def move_purchased_to_archive(self, material_id):
        purchased = self.tables[MaterialStage.PURCHASED].pop(material_id, None)
        if purchased is None:
            raise MaterialNotFoundError()
        self.tables[MaterialStage.PURCHASED_ARCHIVE][material_id] = purchased

    async def search(self, params):
        raise NotImplementedError

    async def list_income_by_warehouse(self, warehouse_id, params):
        raise NotImplementedError


class FakeEntityStore:
    """Lookup-only stand-in for the warehouse and supplier repositories."""

    def __init__(self, *entities):
        self.entities = {entity.id: entity for entity in entities}

    async def get_by_id(self, entity_id):
        return self.entities.get(entity_id)


@pytest.fixture
def materials():
    return FakeMaterialStore()


@pytest.fixture
def service(materials):
    warehouses = FakeEntityStore(
        Warehouse(id=1, company_id=7, name="Main"),
        Warehouse(id=2, company_id=7, name="Overflow"),
        Warehouse(id=3, company_id=8, name="Other tenant"),
    )
    suppliers = FakeEntityStore(
        Supplier(id=1, company_id=7, name="Acme Metals"),
        Supplier(id=2, company_id=7, name="Bolt & Co"),
        Supplier(id=3, company_id=8, name="Foreign Supply"),
    )
    return MaterialsService(materials, warehouses, suppliers, clock=lambda: NOW)


caller = CallerInfo(company_id=7, user_id=1)
stranger = CallerInfo(company_id=8, user_id=2)
admin = CallerInfo(company_id=1, user_id=3, sections=frozenset({FULL_ALL_ACCESS}))


def new_material(**overrides) -> MaterialCreate:
    values = dict(name="Steel Beam", article="X", warehouse_id=1, supplier_id=1)
    values.update(overrides)
    return MaterialCreate(**values)


class TestCreate:

    @pytest.mark.asyncio
    async def test_create_planning_fills_denormalized_fields(self, service, materials):
        material_id = await service.create_planning(caller, new_material(supplier_name="ignored"))

        stored = materials.tables[MaterialStage.PLANNING][material_id]
        assert stored.company_id == 7
        assert stored.supplier_name == "Acme Metals"
        assert stored.last_updated == NOW
        assert stored.item_id == 0

    @pytest.mark.asyncio
    async def test_create_purchased_returns_item_id(self, service):
        material_id, item_id = await service.create_purchased(caller, new_material())
        assert material_id > 0
        assert item_id > 0

    @pytest.mark.asyncio
    async def test_missing_warehouse(self, service):
        with pytest.raises(WarehouseNotFoundError):
            await service.create_planning(caller, new_material(warehouse_id=404))

    @pytest.mark.asyncio
    async def test_missing_supplier(self, service):
        with pytest.raises(SupplierNotFoundError):
            await service.create_purchased(caller, new_material(supplier_id=404))

    @pytest.mark.asyncio
    async def test_foreign_warehouse_refused(self, service, materials):
        with pytest.raises(NotAllowedError):
            await service.create_planning(caller, new_material(warehouse_id=3))
        assert materials.tables[MaterialStage.PLANNING] == {}

    @pytest.mark.asyncio
    async def test_foreign_supplier_refused(self, service):
        with pytest.raises(NotAllowedError):
            await service.create_planning(caller, new_material(supplier_id=3))

    @pytest.mark.asyncio
    async def test_foreign_company_refused(self, service):
        with pytest.raises(NotAllowedError):
            await service.create_planning(caller, new_material(company_id=8, warehouse_id=3, supplier_id=3))

    @pytest.mark.asyncio
    async def test_full_access_creates_for_another_company(self, service, materials):
        material_id = await service.create_planning(admin, new_material(company_id=8, warehouse_id=3, supplier_id=3))
        assert materials.tables[MaterialStage.PLANNING][material_id].company_id == 8


class TestOwnershipGate:

    @pytest.mark.asyncio
    async def test_stranger_cannot_touch_material(self, service, materials):
        material_id = await service.create_planning(caller, new_material())

        with pytest.raises(NotAllowedError):
            await service.get_planning_by_id(material_id, stranger)
        with pytest.raises(NotAllowedError):
            await service.update_planning_by_id(material_id, MaterialPatch(name="Hacked"), stranger)
        with pytest.raises(NotAllowedError):
            await service.delete_planning_by_id(material_id, stranger)
        with pytest.raises(NotAllowedError):
            await service.move_planning_to_purchased(material_id, stranger)

        assert materials.tables[MaterialStage.PLANNING][material_id].name == "Steel Beam"

    @pytest.mark.asyncio
    async def test_full_access_override(self, service, materials):
        material_id = await service.create_planning(caller, new_material())

        assert (await service.get_planning_by_id(material_id, admin)).name == "Steel Beam"
        updated = await service.update_planning_by_id(material_id, MaterialPatch(name="Renamed"), admin)
        assert updated.name == "Renamed"
        await service.delete_planning_by_id(material_id, admin)
        assert material_id not in materials.tables[MaterialStage.PLANNING]

    @pytest.mark.asyncio
    async def test_missing_material(self, service):
        with pytest.raises(MaterialNotFoundError):
            await service.get_purchased_by_id(1, caller)

    @pytest.mark.asyncio
    async def test_archives_are_gated(self, service):
        material_id, _ = await service.create_purchased(caller, new_material())
        await service.move_purchased_to_archive(material_id, caller)

        with pytest.raises(NotAllowedError):
            await service.get_purchased_archive_by_id(material_id, stranger)
        with pytest.raises(NotAllowedError):
            await service.delete_purchased_archive_by_id(material_id, stranger)
        archived = await service.get_purchased_archive_by_id(material_id, caller)
        assert archived.id == material_id


class TestPartialUpdate:

    @pytest.mark.asyncio
    async def test_untouched_fields_are_kept(self, service, materials):
        material_id = await service.create_planning(caller, new_material(name="A", article="X"))

        updated = await service.update_planning_by_id(material_id, MaterialPatch(name="B"), caller)

        assert updated.name == "B"
        assert updated.article == "X"
        stored = materials.tables[MaterialStage.PLANNING][material_id]
        assert (stored.name, stored.article) == ("B", "X")

    @pytest.mark.asyncio
    async def test_last_updated_is_always_stamped(self, materials):
        ticks = iter([datetime(2024, 1, 1, tzinfo=timezone.utc), datetime(2024, 2, 1, tzinfo=timezone.utc)])
        service = MaterialsService(
            materials,
            FakeEntityStore(Warehouse(id=1, company_id=7, name="Main")),
            FakeEntityStore(Supplier(id=1, company_id=7, name="Acme Metals")),
            clock=lambda: next(ticks),
        )
        material_id = await service.create_planning(caller, new_material())

        updated = await service.update_planning_by_id(material_id, MaterialPatch(), caller)
        assert updated.last_updated == datetime(2024, 2, 1, tzinfo=timezone.utc)

    @pytest.mark.asyncio
    async def test_company_and_item_id_are_not_patchable(self, service, materials):
        material_id, item_id = await service.create_purchased(caller, new_material())

        patch = MaterialPatch.model_validate({"company_id": 99, "item_id": 5, "name": "B"})
        updated = await service.update_purchased_by_id(material_id, patch, caller)

        assert updated.company_id == 7
        assert updated.item_id == item_id

    @pytest.mark.asyncio
    async def test_supplier_change_refreshes_supplier_name(self, service):
        material_id = await service.create_planning(caller, new_material())

        updated = await service.update_planning_by_id(material_id, MaterialPatch(supplier_id=2), caller)
        assert updated.supplier_id == 2
        assert updated.supplier_name == "Bolt & Co"

        updated = await service.update_planning_by_id(
            material_id, MaterialPatch(supplier_id=1, supplier_name="Custom"), caller
        )
        assert updated.supplier_name == "Custom"

    @pytest.mark.asyncio
    async def test_new_references_must_exist(self, service):
        material_id = await service.create_planning(caller, new_material())

        with pytest.raises(WarehouseNotFoundError):
            await service.update_planning_by_id(material_id, MaterialPatch(warehouse_id=404), caller)
        with pytest.raises(SupplierNotFoundError):
            await service.update_planning_by_id(material_id, MaterialPatch(supplier_id=404), caller)

    @pytest.mark.asyncio
    async def test_new_reference_ownership_not_rechecked(self, service):
        material_id = await service.create_planning(caller, new_material())

        updated = await service.update_planning_by_id(material_id, MaterialPatch(warehouse_id=3), caller)
        assert updated.warehouse_id == 3

    @pytest.mark.asyncio
    async def test_dates_can_be_cleared(self, service):
        material_id = await service.create_planning(caller, new_material(expiration_date=NOW))

        updated = await service.update_planning_by_id(material_id, MaterialPatch(expiration_date=None), caller)
        assert updated.expiration_date is None

    def test_null_for_required_field_is_rejected(self):
        with pytest.raises(ValidationError):
            MaterialPatch(name=None)

    def test_patch_tracks_presence(self):
        assert MaterialPatch(name="B").changes() == {"name": "B"}
        assert MaterialPatch(expiration_date=None).changes() == {"expiration_date": None}


class TestMoves:

    @pytest.mark.asyncio
    async def test_move_then_archive(self, service, materials):
        planning_id = await service.create_planning(caller, new_material())

        purchased_id, item_id = await service.move_planning_to_purchased(planning_id, caller)
        archived = await service.get_planning_archive_by_id(planning_id, caller)
        assert archived.item_id == item_id

        await service.move_purchased_to_archive(purchased_id, caller)
        assert purchased_id in materials.tables[MaterialStage.PURCHASED_ARCHIVE]

    @pytest.mark.asyncio
    async def test_move_missing(self, service):
        with pytest.raises(MaterialNotFoundError):
            await service.move_planning_to_purchased(404, caller)


class TestWithDatabase:
    """The service over the real repositories."""

    @pytest.mark.asyncio
    async def test_steel_beam_lifecycle(self, test_session):
        warehouses = WarehouseRepository(test_session)
        suppliers = SupplierRepository(test_session)
        service = MaterialsService(MaterialRepository(test_session), warehouses, suppliers)
        owner = CallerInfo(company_id=7, user_id=1)

        warehouse = await warehouses.create(7, WarehouseCreate(name="Main"))
        supplier = await suppliers.create(7, SupplierCreate(name="Acme Metals"))
        assert (warehouse.id, supplier.id) == (1, 1)

        planning_id = await service.create_planning(
            owner, new_material(name="Steel Beam", warehouse_id=1, supplier_id=1, company_id=7)
        )
        planning = await service.get_planning_by_id(planning_id, owner)
        assert planning.item_id == 0
        assert planning.supplier_name == "Acme Metals"

        purchased_id, item_id = await service.move_planning_to_purchased(planning_id, owner)
        assert item_id > 0

        archived = await service.get_planning_archive_by_id(planning_id, owner)
        assert archived.id == planning_id
        assert archived.item_id == item_id

        purchased = await service.get_purchased_by_id(purchased_id, owner)
        assert purchased.name == "Steel Beam"
        assert purchased.item_id == item_id
