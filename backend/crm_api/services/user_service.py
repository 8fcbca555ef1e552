# backend/crm_api/services/user_service.py
from typing import Any, List, Tuple
import logging

from crm_api.core.errors import NotAllowedError, UserNotFoundError
from crm_api.core.security import hash_password
from crm_api.models.user import User
from crm_api.repositories.user_repository import UserRepository
from crm_api.schemas.common import TenantListParams
from crm_api.schemas.user import UserCreate, UserPatch, UserProfilePatch
from crm_api.services.authorization import (
    CallerInfo,
    ensure_allowed,
    ensure_company_admin,
    is_full_access,
)

logger = logging.getLogger(__name__)


def _hash_password_change(changes: dict[str, Any]) -> dict[str, Any]:
    if "password" in changes:
        changes["password_hash"] = hash_password(changes.pop("password"))
    return changes


class UserService:
    """User accounts.

    Managing other accounts takes a company admin; any user may read and edit
    their own profile.
    """

    def __init__(self, users: UserRepository):
        self.users = users

    def _check_grant(self, caller: CallerInfo, sections: List[str]) -> None:
        # Only a holder of the cross-tenant section may hand it out
        if is_full_access(sections) and not is_full_access(caller.sections):
            logger.warning(f"User {caller.user_id} tried to grant full access")
            raise NotAllowedError()

    async def _get(self, user_id: int) -> User:
        user = await self.users.get_by_id(user_id)
        if user is None:
            raise UserNotFoundError()
        return user

    async def create(self, caller: CallerInfo, data: UserCreate) -> User:
        """Create a user in the caller's company.

        Raises:
            AlreadyExistsError: If the username is taken
            NotAllowedError: If the caller is not a company admin or may not
                grant the requested sections
        """
        ensure_company_admin(caller)
        self._check_grant(caller, data.sections)
        user = User(
            company_id=caller.company_id,
            username=data.username,
            password_hash=hash_password(data.password),
            name=data.name,
            email=data.email,
            phone=data.phone,
            position=data.position,
            sections=list(data.sections),
        )
        user = await self.users.create(user)
        logger.info(f"User {caller.user_id} created user {user.id}")
        return user

    async def get_by_id(self, user_id: int, caller: CallerInfo) -> User:
        ensure_company_admin(caller)
        user = await self._get(user_id)
        ensure_allowed(caller, user.company_id)
        return user

    async def update(self, user_id: int, patch: UserPatch, caller: CallerInfo) -> User:
        user = await self.get_by_id(user_id, caller)
        changes = patch.model_dump(exclude_unset=True)
        if "sections" in changes:
            self._check_grant(caller, changes["sections"])
        return await self.users.update(user, _hash_password_change(changes))

    async def delete(self, user_id: int, caller: CallerInfo) -> None:
        user = await self.get_by_id(user_id, caller)
        await self.users.delete(user)
        logger.info(f"User {caller.user_id} deleted user {user_id}")

    async def list(self, caller: CallerInfo, params: TenantListParams) -> Tuple[List[User], int]:
        ensure_company_admin(caller)
        return await self.users.list(params)

    async def get_info(self, caller: CallerInfo) -> User:
        """The caller's own account."""
        user = await self._get(caller.user_id)
        ensure_allowed(caller, user.company_id)
        return user

    async def update_profile(self, caller: CallerInfo, patch: UserProfilePatch) -> User:
        user = await self.get_info(caller)
        changes = _hash_password_change(patch.model_dump(exclude_unset=True))
        user = await self.users.update(user, changes)
        logger.info(f"User {caller.user_id} updated their profile")
        return user
