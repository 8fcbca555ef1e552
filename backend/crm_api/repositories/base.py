"""Shared storage helpers and the store protocols services depend on."""

import json
import logging
from typing import Any, Generic, List, Optional, Protocol, Tuple, Type, TypeVar

from pydantic import BaseModel
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from crm_api.core.errors import InvalidInputError, NotFoundError, StorageCorruptionError
from crm_api.schemas.common import ListParams, TenantListParams
from crm_api.schemas.material import Material, MaterialParams, MaterialSearchItem, MaterialStage
from crm_api.schemas.supplier import Supplier
from crm_api.schemas.warehouse import Warehouse

logger = logging.getLogger(__name__)

SchemaT = TypeVar("SchemaT", bound=BaseModel)


def dump_other_fields(value: Optional[dict]) -> str:
    """Serialize an ``other_fields`` map; an absent map is stored as ``{}``."""
    return json.dumps(value or {}, ensure_ascii=False, default=str)


def load_other_fields(raw: Optional[str], source: str) -> dict:
    """Decode a stored ``other_fields`` value.

    Args:
        raw: Text read from the database
        source: Table and id of the row, used in the error message

    Returns:
        The decoded map

    Raises:
        StorageCorruptionError: If the text is not a JSON object
    """
    if raw is None or raw == "":
        return {}
    try:
        value = json.loads(raw)
    except ValueError as e:
        logger.error(f"Undecodable other_fields in {source}: {e}")
        raise StorageCorruptionError(f"other_fields of {source} is corrupted") from e
    if not isinstance(value, dict):
        logger.error(f"other_fields in {source} is not an object")
        raise StorageCorruptionError(f"other_fields of {source} is corrupted")
    return value


def order_by(columns, params: ListParams, allowed: frozenset):
    """Build the ORDER BY clause for a whitelisted sort field.

    Raises:
        InvalidInputError: If the sort field is not whitelisted
    """
    if params.sort_field not in allowed:
        raise InvalidInputError(f"invalid sort field: {params.sort_field}")
    column = columns[params.sort_field]
    return column.desc() if params.sort == "desc" else column.asc()


class MaterialStore(Protocol):
    async def create_planning(self, material: Material) -> int: ...

    async def create_purchased(self, material: Material) -> Tuple[int, int]: ...

    async def get(self, stage: MaterialStage, material_id: int) -> Optional[Material]: ...

    async def update(self, stage: MaterialStage, material: Material) -> None: ...

    async def delete(self, stage: MaterialStage, material_id: int) -> None: ...

    async def list(self, stage: MaterialStage, params: MaterialParams) -> Tuple[List[Material], int]: ...

    async def move_planning_to_purchased(self, material_id: int) -> Tuple[int, int]: ...

    async def move_purchased_to_archive(self, material_id: int) -> None: ...

    async def search(self, params: MaterialParams) -> Tuple[List[MaterialSearchItem], int]: ...

    async def list_income_by_warehouse(
        self, warehouse_id: int, params: ListParams
    ) -> Tuple[List[Material], int]: ...


class TenantEntityStore(Protocol[SchemaT]):
    async def create(self, company_id: int, data: BaseModel) -> SchemaT: ...

    async def get_by_id(self, entity_id: int) -> Optional[SchemaT]: ...

    async def update(self, entity_id: int, changes: dict[str, Any]) -> SchemaT: ...

    async def delete(self, entity_id: int) -> None: ...

    async def list(self, params: TenantListParams) -> Tuple[List[SchemaT], int]: ...


class TenantEntityRepository(Generic[SchemaT]):
    """CRUD over a company-owned table whose rows carry ``other_fields``.

    Subclasses set the ORM model, the schema rows are returned as, the sort
    whitelist and the error raised for a missing row.
    """

    model: Type[Any]
    schema: Type[SchemaT]
    sort_fields: frozenset = frozenset({"id"})
    not_found: Type[NotFoundError] = NotFoundError

    def __init__(self, session: AsyncSession):
        """Initialize the repository with a database session.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    def _to_schema(self, row) -> SchemaT:
        data = {column.name: getattr(row, column.name) for column in self.model.__table__.columns}
        data["other_fields"] = load_other_fields(row.other_fields, f"{self.model.__tablename__}#{row.id}")
        return self.schema.model_validate(data)

    async def _get_row(self, entity_id: int):
        result = await self.session.execute(
            select(self.model)
            .where(self.model.id == entity_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def create(self, company_id: int, data: BaseModel) -> SchemaT:
        """Insert a row owned by ``company_id``.

        Args:
            company_id: Owning company
            data: Validated create payload

        Returns:
            The stored entity
        """
        values = data.model_dump()
        values["other_fields"] = dump_other_fields(values.get("other_fields"))
        row = self.model(company_id=company_id, **values)
        self.session.add(row)
        try:
            await self.session.flush()
            entity = self._to_schema(row)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise
        return entity

    async def get_by_id(self, entity_id: int) -> Optional[SchemaT]:
        row = await self._get_row(entity_id)
        return self._to_schema(row) if row is not None else None

    async def update(self, entity_id: int, changes: dict[str, Any]) -> SchemaT:
        """Overwrite the given columns; ``id`` and ``company_id`` are never written.

        Raises:
            NotFoundError: If the row does not exist
        """
        row = await self._get_row(entity_id)
        if row is None:
            raise self.not_found()
        for key, value in changes.items():
            if key in ("id", "company_id"):
                continue
            if key == "other_fields":
                value = dump_other_fields(value)
            setattr(row, key, value)
        try:
            await self.session.flush()
            entity = self._to_schema(row)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise
        return entity

    async def delete(self, entity_id: int) -> None:
        row = await self._get_row(entity_id)
        if row is None:
            raise self.not_found()
        await self.session.delete(row)
        await self.session.commit()

    async def list(self, params: TenantListParams) -> Tuple[List[SchemaT], int]:
        """One page of the company's rows plus the company's total row count."""
        clause = order_by(self.model.__table__.c, params, self.sort_fields)
        tenant = self.model.company_id == params.company_id

        total = await self.session.scalar(select(func.count()).select_from(self.model).where(tenant))
        result = await self.session.execute(
            select(self.model)
            .where(tenant)
            .order_by(clause, self.model.id)
            .limit(params.limit)
            .offset(params.offset)
        )
        return [self._to_schema(row) for row in result.scalars().all()], total or 0


WarehouseStore = TenantEntityStore[Warehouse]
SupplierStore = TenantEntityStore[Supplier]
