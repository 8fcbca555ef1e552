from fastapi import APIRouter, Depends, Response, status

from crm_api.api.deps import get_caller, get_section_service, list_params
from crm_api.schemas.common import ListParams
from crm_api.schemas.section import SectionCreate, SectionListResponse, SectionResponse, SectionUpdate
from crm_api.services.authorization import CallerInfo
from crm_api.services.section_service import SectionService

router = APIRouter(prefix="/api/sections", tags=["sections"])


@router.post("", response_model=SectionResponse, status_code=status.HTTP_201_CREATED)
async def create_section(
    data: SectionCreate,
    caller: CallerInfo = Depends(get_caller),
    service: SectionService = Depends(get_section_service),
):
    """Create a section; super admins only."""
    return await service.create(caller, data.name)


@router.get("", response_model=SectionListResponse)
async def list_sections(
    params: ListParams = Depends(list_params),
    caller: CallerInfo = Depends(get_caller),
    service: SectionService = Depends(get_section_service),
):
    items, total = await service.list(caller, params)
    return SectionListResponse(items=[SectionResponse.model_validate(s) for s in items], total=total)


@router.get("/{section_id}", response_model=SectionResponse)
async def get_section(
    section_id: int,
    caller: CallerInfo = Depends(get_caller),
    service: SectionService = Depends(get_section_service),
):
    return await service.get_by_id(section_id, caller)


@router.put("/{section_id}", response_model=SectionResponse)
async def update_section(
    section_id: int,
    data: SectionUpdate,
    caller: CallerInfo = Depends(get_caller),
    service: SectionService = Depends(get_section_service),
):
    return await service.update(section_id, data.name, caller)


@router.delete("/{section_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_section(
    section_id: int,
    caller: CallerInfo = Depends(get_caller),
    service: SectionService = Depends(get_section_service),
):
    await service.delete(section_id, caller)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
