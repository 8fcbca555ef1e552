# backend/crm_api/services/authorization.py
"""Tenant ownership and section rules.

Everything here is a pure function of the caller identity and the resource's
company; services call these before touching storage.

Callers fall into three tiers by section membership: any authenticated user,
a company admin (``full_company_access`` or ``full_all_access``) and a super
admin (``full_all_access``).
"""

from dataclasses import dataclass, field
from typing import FrozenSet, Iterable, Tuple
from crm_api.core.errors import NotAllowedError
import logging

logger = logging.getLogger(__name__)

# Cross-tenant grant: its holder may act on any company's data
FULL_ALL_ACCESS = "full_all_access"
FULL_COMPANY_ACCESS = "full_company_access"
PURCHASE_PLANNING_ACCESS = "purchase_planning_access"

BUILTIN_SECTIONS = (FULL_ALL_ACCESS, FULL_COMPANY_ACCESS, PURCHASE_PLANNING_ACCESS)

@dataclass(frozen=True)
class CallerInfo:
    """Identity of the authenticated caller."""
    company_id: int
    user_id: int
    sections: FrozenSet[str] = field(default_factory=frozenset)


def is_full_access(sections: Iterable[str]) -> bool:
    return FULL_ALL_ACCESS in sections


def is_allowed(caller: CallerInfo, resource_company_id: int) -> bool:
    """Whether ``caller`` may act on a resource owned by ``resource_company_id``."""
    return caller.company_id == resource_company_id or is_full_access(caller.sections)


def ensure_allowed(caller: CallerInfo, resource_company_id: int) -> None:
    """Raise NotAllowedError unless ``is_allowed`` holds."""
    if not is_allowed(caller, resource_company_id):
        logger.warning(
            f"User {caller.user_id} of company {caller.company_id} "
            f"refused access to company {resource_company_id}"
        )
        raise NotAllowedError()


def can_modify_section(section_name: str) -> bool:
    return section_name != FULL_ALL_ACCESS


def hidden_sections(caller: CallerInfo) -> Tuple[str, ...]:
    """Section names left out of listings shown to ``caller``."""
    if is_full_access(caller.sections):
        return ()
    return (FULL_ALL_ACCESS,)


def is_company_admin(caller: CallerInfo) -> bool:
    """Whether ``caller`` administers its company's users and references."""
    return FULL_COMPANY_ACCESS in caller.sections or is_full_access(caller.sections)


def ensure_company_admin(caller: CallerInfo) -> None:
    if not is_company_admin(caller):
        logger.warning(f"User {caller.user_id} of company {caller.company_id} is not a company admin")
        raise NotAllowedError()


def ensure_super_admin(caller: CallerInfo) -> None:
    if not is_full_access(caller.sections):
        logger.warning(f"User {caller.user_id} of company {caller.company_id} is not a super admin")
        raise NotAllowedError()
