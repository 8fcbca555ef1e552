"""Repository for permission sections."""

from typing import Collection, List, Optional, Tuple
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from crm_api.core.errors import AlreadyExistsError, SectionNotFoundError
from crm_api.models.section import Section
from crm_api.repositories.base import order_by
from crm_api.schemas.common import ListParams

SECTION_SORT_FIELDS = frozenset({"id", "name"})


class SectionRepository:
    """Repository for Section database operations."""

    def __init__(self, session: AsyncSession):
        """Initialize the repository with a database session.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    async def get_by_id(self, section_id: int) -> Optional[Section]:
        result = await self.session.execute(select(Section).where(Section.id == section_id))
        return result.scalar_one_or_none()

    async def get_by_name(self, name: str) -> Optional[Section]:
        result = await self.session.execute(select(Section).where(Section.name == name))
        return result.scalar_one_or_none()

    async def create(self, name: str) -> Section:
        """Create a section.

        Args:
            name: Unique section name

        Returns:
            Created Section instance

        Raises:
            AlreadyExistsError: If the name is taken
        """
        section = Section(name=name)
        self.session.add(section)
        try:
            await self.session.commit()
        except IntegrityError as e:
            await self.session.rollback()
            raise AlreadyExistsError(f"section '{name}' already exists") from e
        await self.session.refresh(section)
        return section

    async def update(self, section_id: int, name: str) -> Section:
        section = await self.get_by_id(section_id)
        if section is None:
            raise SectionNotFoundError()
        section.name = name
        try:
            await self.session.commit()
        except IntegrityError as e:
            await self.session.rollback()
            raise AlreadyExistsError(f"section '{name}' already exists") from e
        await self.session.refresh(section)
        return section

    async def delete(self, section_id: int) -> None:
        section = await self.get_by_id(section_id)
        if section is None:
            raise SectionNotFoundError()
        await self.session.delete(section)
        await self.session.commit()

    async def list(
        self, params: ListParams, hidden: Collection[str] = ()
    ) -> Tuple[List[Section], int]:
        """List sections, leaving out the names in ``hidden``.

        Returns:
            Tuple of (page, total)
        """
        clause = order_by(Section.__table__.c, params, SECTION_SORT_FIELDS)
        query = select(Section)
        if hidden:
            query = query.where(Section.name.not_in(list(hidden)))

        total = await self.session.scalar(select(func.count()).select_from(query.subquery()))
        result = await self.session.execute(
            query.order_by(clause).limit(params.limit).offset(params.offset)
        )
        return list(result.scalars().all()), total or 0
