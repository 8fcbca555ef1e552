"""Repository for users."""

from typing import Any, Iterable, List, Optional, Tuple
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from crm_api.core.errors import AlreadyExistsError
from crm_api.models.user import User
from crm_api.repositories.base import order_by
from crm_api.schemas.common import TenantListParams

USER_SORT_FIELDS = frozenset({"id", "username", "name", "created_at"})


class UserRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, user: User) -> User:
        """Insert a user.

        Raises:
            AlreadyExistsError: If the username is taken
        """
        self.session.add(user)
        try:
            await self.session.commit()
        except IntegrityError as e:
            await self.session.rollback()
            raise AlreadyExistsError(f"user '{user.username}' already exists") from e
        await self.session.refresh(user)
        return user

    async def get_by_id(self, user_id: int) -> Optional[User]:
        result = await self.session.execute(select(User).where(User.id == user_id))
        return result.scalar_one_or_none()

    async def update(self, user: User, changes: dict[str, Any]) -> User:
        for key, value in changes.items():
            if key in ("id", "company_id", "username"):
                continue
            setattr(user, key, value)
        await self.session.commit()
        await self.session.refresh(user)
        return user

    async def delete(self, user: User) -> None:
        await self.session.delete(user)
        await self.session.commit()

    async def list(self, params: TenantListParams) -> Tuple[List[User], int]:
        clause = order_by(User.__table__.c, params, USER_SORT_FIELDS)
        tenant = User.company_id == params.company_id

        total = await self.session.scalar(select(func.count()).select_from(User).where(tenant))
        result = await self.session.execute(
            select(User).where(tenant).order_by(clause).limit(params.limit).offset(params.offset)
        )
        return list(result.scalars().all()), total or 0

    async def list_with_sections(
        self, params: TenantListParams, sections: Iterable[str]
    ) -> Tuple[List[User], int]:
        """Company users holding at least one of ``sections``.

        Section lists are JSON, so membership is matched after loading the
        company's users in order; paging is applied to the matches.
        """
        clause = order_by(User.__table__.c, params, USER_SORT_FIELDS)
        wanted = set(sections)

        result = await self.session.execute(
            select(User).where(User.company_id == params.company_id).order_by(clause, User.id)
        )
        matched = [user for user in result.scalars().all() if wanted.intersection(user.sections or [])]
        return matched[params.offset:params.offset + params.limit], len(matched)
