# backend/crm_api/api/users.py
from fastapi import APIRouter, Depends, Response, status

from crm_api.api.deps import get_caller, get_user_service, list_params
from crm_api.schemas.common import ListParams, TenantListParams
from crm_api.schemas.user import UserCreate, UserListResponse, UserPatch, UserProfilePatch, UserResponse
from crm_api.services.authorization import CallerInfo
from crm_api.services.user_service import UserService

router = APIRouter(prefix="/api/users", tags=["users"])


@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def create_user(
    data: UserCreate,
    caller: CallerInfo = Depends(get_caller),
    service: UserService = Depends(get_user_service),
):
    """Create a user in the caller's company."""
    user = await service.create(caller, data)
    return UserResponse.model_validate(user)


@router.get("", response_model=UserListResponse)
async def list_users(
    params: ListParams = Depends(list_params),
    caller: CallerInfo = Depends(get_caller),
    service: UserService = Depends(get_user_service),
):
    users, total = await service.list(
        caller, TenantListParams(company_id=caller.company_id, **params.model_dump())
    )
    return UserListResponse(items=[UserResponse.model_validate(u) for u in users], total=total)


@router.get("/info", response_model=UserResponse)
async def get_user_info(
    caller: CallerInfo = Depends(get_caller),
    service: UserService = Depends(get_user_service),
):
    """The authenticated user's own account."""
    user = await service.get_info(caller)
    return UserResponse.model_validate(user)


@router.put("/profile", response_model=UserResponse)
async def update_profile(
    patch: UserProfilePatch,
    caller: CallerInfo = Depends(get_caller),
    service: UserService = Depends(get_user_service),
):
    user = await service.update_profile(caller, patch)
    return UserResponse.model_validate(user)


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(
    user_id: int,
    caller: CallerInfo = Depends(get_caller),
    service: UserService = Depends(get_user_service),
):
    user = await service.get_by_id(user_id, caller)
    return UserResponse.model_validate(user)


@router.patch("/{user_id}", response_model=UserResponse)
async def update_user(
    user_id: int,
    patch: UserPatch,
    caller: CallerInfo = Depends(get_caller),
    service: UserService = Depends(get_user_service),
):
    user = await service.update(user_id, patch, caller)
    return UserResponse.model_validate(user)


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_user(
    user_id: int,
    caller: CallerInfo = Depends(get_caller),
    service: UserService = Depends(get_user_service),
):
    await service.delete(user_id, caller)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
