# backend/crm_api/schemas/common.py
from typing import Literal
from pydantic import BaseModel, Field

SortOrder = Literal["asc", "desc"]


class ListParams(BaseModel):
    """Pagination and ordering shared by every list endpoint."""

    limit: int = Field(100, gt=0)
    offset: int = Field(0, ge=0)
    sort: SortOrder = "asc"
    sort_field: str = "id"


class TenantListParams(ListParams):
    # Always taken from the caller identity, never from request input
    company_id: int
