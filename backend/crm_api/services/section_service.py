# backend/crm_api/services/section_service.py
from typing import List, Tuple
import logging

from crm_api.core.errors import NotAllowedError, SectionNotFoundError
from crm_api.models.section import Section
from crm_api.repositories.section_repository import SectionRepository
from crm_api.schemas.common import ListParams
from crm_api.services.authorization import (
    CallerInfo,
    can_modify_section,
    ensure_company_admin,
    ensure_super_admin,
    hidden_sections,
)

logger = logging.getLogger(__name__)


class SectionService:
    """Section management.

    Sections are shared by every company, so only a super admin may change
    them; company admins may read them. The cross-tenant section is read-only.
    """

    def __init__(self, sections: SectionRepository):
        self.sections = sections

    async def _get(self, section_id: int) -> Section:
        section = await self.sections.get_by_id(section_id)
        if section is None:
            raise SectionNotFoundError()
        return section

    async def get_by_id(self, section_id: int, caller: CallerInfo) -> Section:
        ensure_company_admin(caller)
        return await self._get(section_id)

    async def create(self, caller: CallerInfo, name: str) -> Section:
        ensure_super_admin(caller)
        section = await self.sections.create(name)
        logger.info(f"User {caller.user_id} created section {section.name}")
        return section

    async def update(self, section_id: int, name: str, caller: CallerInfo) -> Section:
        ensure_super_admin(caller)
        section = await self._get(section_id)
        if not can_modify_section(section.name):
            logger.warning(f"Refused to rename protected section {section.name}")
            raise NotAllowedError()
        return await self.sections.update(section_id, name)

    async def delete(self, section_id: int, caller: CallerInfo) -> None:
        ensure_super_admin(caller)
        section = await self._get(section_id)
        if not can_modify_section(section.name):
            logger.warning(f"Refused to delete protected section {section.name}")
            raise NotAllowedError()
        await self.sections.delete(section_id)
        logger.info(f"User {caller.user_id} deleted section {section.name}")

    async def list(self, caller: CallerInfo, params: ListParams) -> Tuple[List[Section], int]:
        ensure_company_admin(caller)
        return await self.sections.list(params, hidden=hidden_sections(caller))
