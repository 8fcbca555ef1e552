"""Storage for materials across the planning, purchased and archive tables."""

import logging
from typing import List, Optional, Tuple

from sqlalchemy import func, literal_column, select, union_all
from sqlalchemy.ext.asyncio import AsyncSession

from crm_api.core.errors import MaterialNotFoundError
from crm_api.models.material import (
    PlanningMaterial,
    PlanningMaterialArchive,
    PurchasedItemId,
    PurchasedMaterial,
    PurchasedMaterialArchive,
)
from crm_api.repositories.base import dump_other_fields, load_other_fields, order_by
from crm_api.schemas.common import ListParams
from crm_api.schemas.material import (
    MATERIAL_SORT_FIELDS,
    Material,
    MaterialParams,
    MaterialSearchItem,
    MaterialStage,
)

logger = logging.getLogger(__name__)

TABLES = {
    MaterialStage.PLANNING: PlanningMaterial,
    MaterialStage.PURCHASED: PurchasedMaterial,
    MaterialStage.PLANNING_ARCHIVE: PlanningMaterialArchive,
    MaterialStage.PURCHASED_ARCHIVE: PurchasedMaterialArchive,
}

COLUMN_NAMES = [column.name for column in PlanningMaterial.__table__.columns]

# Never written by an update
_IMMUTABLE = ("id", "company_id", "item_id")


def escape_like(query: str) -> str:
    """Escape LIKE wildcards so user input only ever matches literally."""
    return query.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _decode(values: dict, source: str) -> dict:
    data = {name: values[name] for name in COLUMN_NAMES}
    data["other_fields"] = load_other_fields(values["other_fields"], source)
    return data


def _to_material(row) -> Material:
    values = {name: getattr(row, name) for name in COLUMN_NAMES}
    return Material.model_validate(_decode(values, f"{row.__tablename__}#{row.id}"))


def _to_columns(material: Material, exclude: tuple = ()) -> dict:
    values = material.model_dump(include=set(COLUMN_NAMES) - set(exclude))
    if "other_fields" in values:
        values["other_fields"] = dump_other_fields(values["other_fields"])
    return values


def _copy_columns(row, exclude: tuple = ()) -> dict:
    """Column values of an ORM row, stored representation unchanged."""
    return {name: getattr(row, name) for name in COLUMN_NAMES if name not in exclude}


class MaterialRepository:
    """Repository for material rows in all four stage tables.

    Owns ``other_fields`` serialization and the multi-statement moves between
    tables. Every mutating method commits on success and rolls back on any
    failure before re-raising.
    """

    def __init__(self, session: AsyncSession):
        """Initialize the repository with a database session.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    async def _get_row(self, stage: MaterialStage, material_id: int, for_update: bool = False):
        model = TABLES[stage]
        stmt = select(model).where(model.id == material_id).execution_options(populate_existing=True)
        if for_update:
            stmt = stmt.with_for_update()
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def _next_item_id(self) -> int:
        sequence = PurchasedItemId()
        self.session.add(sequence)
        await self.session.flush()
        return sequence.id

    async def create_planning(self, material: Material) -> int:
        """Insert a planning material.

        Args:
            material: Material to store; ``id`` and ``item_id`` are ignored

        Returns:
            The generated planning id
        """
        row = PlanningMaterial(item_id=0, **_to_columns(material, exclude=("id", "item_id")))
        self.session.add(row)
        try:
            await self.session.flush()
            material_id = row.id
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise
        return material_id

    async def create_purchased(self, material: Material) -> Tuple[int, int]:
        """Insert a purchased material with a freshly drawn ``item_id``.

        Returns:
            Tuple of (purchased id, item_id)
        """
        try:
            item_id = await self._next_item_id()
            row = PurchasedMaterial(item_id=item_id, **_to_columns(material, exclude=("id", "item_id")))
            self.session.add(row)
            await self.session.flush()
            material_id = row.id
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise
        return material_id, item_id

    async def get(self, stage: MaterialStage, material_id: int) -> Optional[Material]:
        """Get a material by id from one stage table.

        Returns:
            Material or None
        """
        row = await self._get_row(stage, material_id)
        return _to_material(row) if row is not None else None

    async def update(self, stage: MaterialStage, material: Material) -> None:
        """Write every mutable field of ``material`` over the stored row.

        Raises:
            MaterialNotFoundError: If no row has ``material.id``
        """
        row = await self._get_row(stage, material.id)
        if row is None:
            raise MaterialNotFoundError()
        for key, value in _to_columns(material, exclude=_IMMUTABLE).items():
            setattr(row, key, value)
        try:
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

    async def delete(self, stage: MaterialStage, material_id: int) -> None:
        row = await self._get_row(stage, material_id)
        if row is None:
            raise MaterialNotFoundError()
        try:
            await self.session.delete(row)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

    async def list(self, stage: MaterialStage, params: MaterialParams) -> Tuple[List[Material], int]:
        """One page of a company's materials in a stage table.

        The total and the page are read by two separate statements, so a
        concurrent write can make them disagree.

        Returns:
            Tuple of (page, total rows for the company)
        """
        model = TABLES[stage]
        clause = order_by(model.__table__.c, params, MATERIAL_SORT_FIELDS)
        tenant = model.company_id == params.company_id

        total = await self.session.scalar(select(func.count()).select_from(model).where(tenant))
        result = await self.session.execute(
            select(model).where(tenant).order_by(clause, model.id).limit(params.limit).offset(params.offset)
        )
        return [_to_material(row) for row in result.scalars().all()], total or 0

    async def list_income_by_warehouse(
        self, warehouse_id: int, params: ListParams
    ) -> Tuple[List[Material], int]:
        """Purchased materials received into a warehouse.

        Args:
            warehouse_id: Receiving warehouse
            params: Pagination; ``sort_field`` usually ``received_date``

        Returns:
            Tuple of (page, total)
        """
        clause = order_by(PurchasedMaterial.__table__.c, params, MATERIAL_SORT_FIELDS)
        condition = PurchasedMaterial.warehouse_id == warehouse_id

        total = await self.session.scalar(
            select(func.count()).select_from(PurchasedMaterial).where(condition)
        )
        result = await self.session.execute(
            select(PurchasedMaterial)
            .where(condition)
            .order_by(clause, PurchasedMaterial.id)
            .limit(params.limit)
            .offset(params.offset)
        )
        return [_to_material(row) for row in result.scalars().all()], total or 0

    async def move_planning_to_purchased(self, material_id: int) -> Tuple[int, int]:
        """Purchase a planning material in one transaction.

        The planning row is removed, a purchased row with a new ``id`` and
        ``item_id`` is inserted, and the planning archive receives a copy
        keyed by the old planning id carrying the new ``item_id``.

        Args:
            material_id: Planning id

        Returns:
            Tuple of (purchased id, item_id)

        Raises:
            MaterialNotFoundError: If the planning row does not exist
        """
        try:
            planning = await self._get_row(MaterialStage.PLANNING, material_id, for_update=True)
            if planning is None:
                raise MaterialNotFoundError()
            values = _copy_columns(planning, exclude=("id", "item_id"))

            await self.session.delete(planning)
            await self.session.flush()

            item_id = await self._next_item_id()
            purchased = PurchasedMaterial(item_id=item_id, **values)
            self.session.add(purchased)
            await self.session.flush()
            purchased_id = purchased.id

            self.session.add(PlanningMaterialArchive(id=material_id, item_id=item_id, **values))
            await self.session.flush()

            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        logger.info(f"Moved planning material {material_id} to purchased {purchased_id} (item {item_id})")
        return purchased_id, item_id

    async def move_purchased_to_archive(self, material_id: int) -> None:
        """Retire a purchased material, keeping its id and item_id in the archive.

        Raises:
            MaterialNotFoundError: If the purchased row does not exist
        """
        try:
            purchased = await self._get_row(MaterialStage.PURCHASED, material_id, for_update=True)
            if purchased is None:
                raise MaterialNotFoundError()
            values = _copy_columns(purchased)

            await self.session.delete(purchased)
            await self.session.flush()

            self.session.add(PurchasedMaterialArchive(**values))
            await self.session.flush()

            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        logger.info(f"Archived purchased material {material_id}")

    async def search(self, params: MaterialParams) -> Tuple[List[MaterialSearchItem], int]:
        """Case-insensitive name prefix search over all four tables.

        Returns:
            Tuple of (page of hits tagged with their stage, total hits)
        """
        pattern = escape_like(params.query) + "%"
        selects = []
        for stage, model in TABLES.items():
            table = model.__table__
            selects.append(
                select(*[table.c[name] for name in COLUMN_NAMES], literal_column(f"'{stage.value}'").label("stage"))
                .where(table.c.company_id == params.company_id)
                .where(table.c.name.ilike(pattern, escape="\\"))
            )
        hits = union_all(*selects).subquery("material_hits")
        clause = order_by(hits.c, params, MATERIAL_SORT_FIELDS)

        total = await self.session.scalar(select(func.count()).select_from(hits))
        result = await self.session.execute(
            select(hits).order_by(clause, hits.c.stage, hits.c.id).limit(params.limit).offset(params.offset)
        )

        items = []
        for row in result.mappings().all():
            data = _decode(row, f"{row['stage']}#{row['id']}")
            data["stage"] = row["stage"]
            items.append(MaterialSearchItem.model_validate(data))
        return items, total or 0
