# backend/crm_api/api/materials.py
from fastapi import APIRouter, Depends, Query, Response, status

from crm_api.api.deps import get_caller, get_materials_service
from crm_api.core.config import settings
from crm_api.schemas.common import SortOrder
from crm_api.schemas.material import (
    Material,
    MaterialCreate,
    MaterialListResponse,
    MaterialParams,
    MaterialPatch,
    MaterialSearchResponse,
    PlanningCreatedResponse,
    PurchasedCreatedResponse,
)
from crm_api.services.authorization import CallerInfo
from crm_api.services.materials_service import MaterialsService

router = APIRouter(prefix="/api/materials", tags=["materials"])


def material_params(
    caller: CallerInfo = Depends(get_caller),
    limit: int = Query(settings.DEFAULT_PAGE_LIMIT, gt=0),
    offset: int = Query(0, ge=0),
    sort: SortOrder = Query("asc"),
    sort_field: str = Query("name"),
    query: str = Query(""),
) -> MaterialParams:
    # The tenant filter always comes from the token
    return MaterialParams(
        company_id=caller.company_id,
        limit=limit,
        offset=offset,
        sort=sort,
        sort_field=sort_field,
        query=query,
    )


# ---- planning ----

@router.post("/planning", response_model=PlanningCreatedResponse, status_code=status.HTTP_201_CREATED)
async def create_planning(
    data: MaterialCreate,
    caller: CallerInfo = Depends(get_caller),
    service: MaterialsService = Depends(get_materials_service),
):
    material_id = await service.create_planning(caller, data)
    return PlanningCreatedResponse(id=material_id)


@router.get("/planning", response_model=MaterialListResponse)
async def list_planning(
    params: MaterialParams = Depends(material_params),
    service: MaterialsService = Depends(get_materials_service),
):
    items, total = await service.get_planning_list(params)
    return MaterialListResponse(items=items, total=total)


@router.get("/planning/{material_id}", response_model=Material)
async def get_planning(
    material_id: int,
    caller: CallerInfo = Depends(get_caller),
    service: MaterialsService = Depends(get_materials_service),
):
    return await service.get_planning_by_id(material_id, caller)


@router.patch("/planning/{material_id}", response_model=Material)
async def update_planning(
    material_id: int,
    patch: MaterialPatch,
    caller: CallerInfo = Depends(get_caller),
    service: MaterialsService = Depends(get_materials_service),
):
    return await service.update_planning_by_id(material_id, patch, caller)


@router.delete("/planning/{material_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_planning(
    material_id: int,
    caller: CallerInfo = Depends(get_caller),
    service: MaterialsService = Depends(get_materials_service),
):
    await service.delete_planning_by_id(material_id, caller)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/planning/{material_id}/move", response_model=PurchasedCreatedResponse)
async def move_planning(
    material_id: int,
    caller: CallerInfo = Depends(get_caller),
    service: MaterialsService = Depends(get_materials_service),
):
    purchased_id, item_id = await service.move_planning_to_purchased(material_id, caller)
    return PurchasedCreatedResponse(id=purchased_id, item_id=item_id)


# ---- purchased ----

@router.post("/purchased", response_model=PurchasedCreatedResponse, status_code=status.HTTP_201_CREATED)
async def create_purchased(
    data: MaterialCreate,
    caller: CallerInfo = Depends(get_caller),
    service: MaterialsService = Depends(get_materials_service),
):
    material_id, item_id = await service.create_purchased(caller, data)
    return PurchasedCreatedResponse(id=material_id, item_id=item_id)


@router.get("/purchased", response_model=MaterialListResponse)
async def list_purchased(
    params: MaterialParams = Depends(material_params),
    service: MaterialsService = Depends(get_materials_service),
):
    items, total = await service.get_purchased_list(params)
    return MaterialListResponse(items=items, total=total)


@router.get("/purchased/{material_id}", response_model=Material)
async def get_purchased(
    material_id: int,
    caller: CallerInfo = Depends(get_caller),
    service: MaterialsService = Depends(get_materials_service),
):
    return await service.get_purchased_by_id(material_id, caller)


@router.patch("/purchased/{material_id}", response_model=Material)
async def update_purchased(
    material_id: int,
    patch: MaterialPatch,
    caller: CallerInfo = Depends(get_caller),
    service: MaterialsService = Depends(get_materials_service),
):
    return await service.update_purchased_by_id(material_id, patch, caller)


@router.delete("/purchased/{material_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_purchased(
    material_id: int,
    caller: CallerInfo = Depends(get_caller),
    service: MaterialsService = Depends(get_materials_service),
):
    await service.delete_purchased_by_id(material_id, caller)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/purchased/{material_id}/archive", status_code=status.HTTP_204_NO_CONTENT)
async def archive_purchased(
    material_id: int,
    caller: CallerInfo = Depends(get_caller),
    service: MaterialsService = Depends(get_materials_service),
):
    await service.move_purchased_to_archive(material_id, caller)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# ---- archives ----

@router.get("/planning-archive", response_model=MaterialListResponse)
async def list_planning_archive(
    params: MaterialParams = Depends(material_params),
    service: MaterialsService = Depends(get_materials_service),
):
    items, total = await service.get_planning_archive_list(params)
    return MaterialListResponse(items=items, total=total)


@router.get("/planning-archive/{material_id}", response_model=Material)
async def get_planning_archive(
    material_id: int,
    caller: CallerInfo = Depends(get_caller),
    service: MaterialsService = Depends(get_materials_service),
):
    return await service.get_planning_archive_by_id(material_id, caller)


@router.delete("/planning-archive/{material_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_planning_archive(
    material_id: int,
    caller: CallerInfo = Depends(get_caller),
    service: MaterialsService = Depends(get_materials_service),
):
    await service.delete_planning_archive_by_id(material_id, caller)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/purchased-archive", response_model=MaterialListResponse)
async def list_purchased_archive(
    params: MaterialParams = Depends(material_params),
    service: MaterialsService = Depends(get_materials_service),
):
    items, total = await service.get_purchased_archive_list(params)
    return MaterialListResponse(items=items, total=total)


@router.get("/purchased-archive/{material_id}", response_model=Material)
async def get_purchased_archive(
    material_id: int,
    caller: CallerInfo = Depends(get_caller),
    service: MaterialsService = Depends(get_materials_service),
):
    return await service.get_purchased_archive_by_id(material_id, caller)


@router.delete("/purchased-archive/{material_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_purchased_archive(
    material_id: int,
    caller: CallerInfo = Depends(get_caller),
    service: MaterialsService = Depends(get_materials_service),
):
    await service.delete_purchased_archive_by_id(material_id, caller)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# ---- search ----

@router.get("/search", response_model=MaterialSearchResponse)
async def search_materials(
    params: MaterialParams = Depends(material_params),
    service: MaterialsService = Depends(get_materials_service),
):
    items, total = await service.search(params)
    return MaterialSearchResponse(items=items, total=total)
