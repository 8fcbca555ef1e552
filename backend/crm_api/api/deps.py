# backend/crm_api/api/deps.py
"""Request dependencies: caller identity, list parameters and services."""

from fastapi import Depends, HTTPException, Query, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from crm_api.core.config import settings
from crm_api.core.database import get_db
from crm_api.core.security import decode_caller
from crm_api.repositories import (
    MaterialRepository,
    SectionRepository,
    SupplierRepository,
    UserRepository,
    WarehouseRepository,
)
from crm_api.schemas.common import ListParams, SortOrder
from crm_api.services.authorization import CallerInfo
from crm_api.services.materials_service import MaterialsService
from crm_api.services.section_service import SectionService
from crm_api.services.supplier_service import SupplierService
from crm_api.services.user_service import UserService
from crm_api.services.warehouse_service import WarehouseService

security = HTTPBearer()


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_caller(credentials: HTTPAuthorizationCredentials = Depends(security)) -> CallerInfo:
    """Decode the bearer token into the caller identity."""
    try:
        return decode_caller(credentials.credentials)
    except ValueError as e:
        raise _unauthorized(str(e))


def list_params(
    limit: int = Query(settings.DEFAULT_PAGE_LIMIT, gt=0),
    offset: int = Query(0, ge=0),
    sort: SortOrder = Query("asc"),
    sort_field: str = Query("id"),
) -> ListParams:
    return ListParams(limit=limit, offset=offset, sort=sort, sort_field=sort_field)


def get_materials_service(db: AsyncSession = Depends(get_db)) -> MaterialsService:
    return MaterialsService(MaterialRepository(db), WarehouseRepository(db), SupplierRepository(db))


def get_warehouse_service(db: AsyncSession = Depends(get_db)) -> WarehouseService:
    return WarehouseService(WarehouseRepository(db), MaterialRepository(db), UserRepository(db))


def get_supplier_service(db: AsyncSession = Depends(get_db)) -> SupplierService:
    return SupplierService(SupplierRepository(db))


def get_section_service(db: AsyncSession = Depends(get_db)) -> SectionService:
    return SectionService(SectionRepository(db))


def get_user_service(db: AsyncSession = Depends(get_db)) -> UserService:
    return UserService(UserRepository(db))
