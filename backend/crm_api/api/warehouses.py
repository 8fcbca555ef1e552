# backend/crm_api/api/warehouses.py
from fastapi import APIRouter, Depends, Query, Response, status

from crm_api.api.deps import get_caller, get_warehouse_service, list_params
from crm_api.core.config import settings
from crm_api.schemas.common import ListParams, SortOrder, TenantListParams
from crm_api.schemas.material import MaterialListResponse
from crm_api.schemas.user import UserListResponse, UserResponse
from crm_api.schemas.warehouse import Warehouse, WarehouseCreate, WarehouseListResponse, WarehousePatch
from crm_api.services.authorization import CallerInfo
from crm_api.services.warehouse_service import WarehouseService

router = APIRouter(prefix="/api/warehouses", tags=["warehouses"])


@router.post("", response_model=Warehouse, status_code=status.HTTP_201_CREATED)
async def create_warehouse(
    data: WarehouseCreate,
    caller: CallerInfo = Depends(get_caller),
    service: WarehouseService = Depends(get_warehouse_service),
):
    return await service.create(caller, data)


@router.get("", response_model=WarehouseListResponse)
async def list_warehouses(
    params: ListParams = Depends(list_params),
    caller: CallerInfo = Depends(get_caller),
    service: WarehouseService = Depends(get_warehouse_service),
):
    items, total = await service.list(
        TenantListParams(company_id=caller.company_id, **params.model_dump())
    )
    return WarehouseListResponse(items=items, total=total)


@router.get("/responsible-person", response_model=UserListResponse)
async def responsible_users(
    params: ListParams = Depends(list_params),
    caller: CallerInfo = Depends(get_caller),
    service: WarehouseService = Depends(get_warehouse_service),
):
    """Company users holding a built-in section, candidates to run a warehouse."""
    users, total = await service.get_responsible_users(caller, params)
    return UserListResponse(items=[UserResponse.model_validate(u) for u in users], total=total)


@router.get("/{warehouse_id}", response_model=Warehouse)
async def get_warehouse(
    warehouse_id: int,
    caller: CallerInfo = Depends(get_caller),
    service: WarehouseService = Depends(get_warehouse_service),
):
    return await service.get_by_id(warehouse_id, caller)


@router.patch("/{warehouse_id}", response_model=Warehouse)
async def update_warehouse(
    warehouse_id: int,
    patch: WarehousePatch,
    caller: CallerInfo = Depends(get_caller),
    service: WarehouseService = Depends(get_warehouse_service),
):
    return await service.update(warehouse_id, patch, caller)


@router.delete("/{warehouse_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_warehouse(
    warehouse_id: int,
    caller: CallerInfo = Depends(get_caller),
    service: WarehouseService = Depends(get_warehouse_service),
):
    await service.delete(warehouse_id, caller)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{warehouse_id}/income-history", response_model=MaterialListResponse)
async def income_history(
    warehouse_id: int,
    limit: int = Query(settings.DEFAULT_PAGE_LIMIT, gt=0),
    offset: int = Query(0, ge=0),
    sort: SortOrder = Query("desc"),
    sort_field: str = Query("received_date"),
    caller: CallerInfo = Depends(get_caller),
    service: WarehouseService = Depends(get_warehouse_service),
):
    """Purchased materials received into the warehouse, newest first by default."""
    params = ListParams(limit=limit, offset=offset, sort=sort, sort_field=sort_field)
    items, total = await service.income_history(warehouse_id, caller, params)
    return MaterialListResponse(items=items, total=total)
