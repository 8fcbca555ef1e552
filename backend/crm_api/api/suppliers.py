# backend/crm_api/api/suppliers.py
from fastapi import APIRouter, Depends, Response, status

from crm_api.api.deps import get_caller, get_supplier_service, list_params
from crm_api.schemas.common import ListParams, TenantListParams
from crm_api.schemas.supplier import Supplier, SupplierCreate, SupplierListResponse, SupplierPatch
from crm_api.services.authorization import CallerInfo
from crm_api.services.supplier_service import SupplierService

router = APIRouter(prefix="/api/suppliers", tags=["suppliers"])


@router.post("", response_model=Supplier, status_code=status.HTTP_201_CREATED)
async def create_supplier(
    data: SupplierCreate,
    caller: CallerInfo = Depends(get_caller),
    service: SupplierService = Depends(get_supplier_service),
):
    return await service.create(caller, data)


@router.get("", response_model=SupplierListResponse)
async def list_suppliers(
    params: ListParams = Depends(list_params),
    caller: CallerInfo = Depends(get_caller),
    service: SupplierService = Depends(get_supplier_service),
):
    items, total = await service.list(
        TenantListParams(company_id=caller.company_id, **params.model_dump())
    )
    return SupplierListResponse(items=items, total=total)


@router.get("/{supplier_id}", response_model=Supplier)
async def get_supplier(
    supplier_id: int,
    caller: CallerInfo = Depends(get_caller),
    service: SupplierService = Depends(get_supplier_service),
):
    return await service.get_by_id(supplier_id, caller)


@router.patch("/{supplier_id}", response_model=Supplier)
async def update_supplier(
    supplier_id: int,
    patch: SupplierPatch,
    caller: CallerInfo = Depends(get_caller),
    service: SupplierService = Depends(get_supplier_service),
):
    return await service.update(supplier_id, patch, caller)


@router.delete("/{supplier_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_supplier(
    supplier_id: int,
    caller: CallerInfo = Depends(get_caller),
    service: SupplierService = Depends(get_supplier_service),
):
    await service.delete(supplier_id, caller)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
