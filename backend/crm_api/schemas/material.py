# backend/crm_api/schemas/material.py
"""Material shapes passed between transport, service and storage."""

from datetime import datetime
from enum import Enum
from typing import Any, List, Optional
from pydantic import BaseModel, ConfigDict, Field, model_validator
from crm_api.schemas.common import TenantListParams


class MaterialStage(str, Enum):
    PLANNING = "planning"
    PURCHASED = "purchased"
    PLANNING_ARCHIVE = "planning_archive"
    PURCHASED_ARCHIVE = "purchased_archive"


# Columns a list or search request may order by
MATERIAL_SORT_FIELDS = frozenset({
    "id",
    "item_id",
    "name",
    "article",
    "total_quantity",
    "price_without_vat",
    "total_without_vat",
    "status",
    "contract_date",
    "received_date",
    "last_updated",
    "expiration_date",
    "supplier_name",
})


class MaterialFields(BaseModel):
    by_invoice: str = ""
    article: str = ""
    product_category: List[str] = Field(default_factory=list)
    unit: str = ""
    total_quantity: int = 0
    volume: int = 0
    price_without_vat: float = 0.0
    total_without_vat: float = 0.0
    location: str = ""
    contract_date: Optional[datetime] = None
    file: str = ""
    status: str = ""
    comments: str = ""
    reserve: str = ""
    received_date: Optional[datetime] = None
    min_stock_level: int = 0
    expiration_date: Optional[datetime] = None
    responsible_person: str = ""
    storage_cost: float = 0.0
    warehouse_section: str = ""
    incoming_delivery_number: str = ""
    other_fields: dict[str, Any] = Field(default_factory=dict)
    internal_name: str = ""
    units_per_package: int = 0
    supplier_name: str = ""
    contract_number: str = ""


class Material(MaterialFields):
    """A material record as stored in any of the four stage tables."""

    model_config = ConfigDict(from_attributes=True)

    id: int = 0
    item_id: int = 0
    company_id: int
    warehouse_id: int
    supplier_id: int
    name: str
    last_updated: Optional[datetime] = None


class MaterialCreate(MaterialFields):
    warehouse_id: int
    supplier_id: int
    name: str = Field(..., min_length=1)
    # Defaults to the caller's company
    company_id: Optional[int] = None


# Fields that may be cleared to null through a patch
_NULLABLE_PATCH_FIELDS = frozenset({"contract_date", "received_date", "expiration_date"})


class MaterialPatch(BaseModel):
    """Partial update: only the fields present in the request are applied.

    ``company_id``, ``item_id`` and ``id`` are not patchable; unknown keys are
    ignored.
    """

    warehouse_id: Optional[int] = None
    supplier_id: Optional[int] = None
    name: Optional[str] = Field(None, min_length=1)
    by_invoice: Optional[str] = None
    article: Optional[str] = None
    product_category: Optional[List[str]] = None
    unit: Optional[str] = None
    total_quantity: Optional[int] = None
    volume: Optional[int] = None
    price_without_vat: Optional[float] = None
    total_without_vat: Optional[float] = None
    location: Optional[str] = None
    contract_date: Optional[datetime] = None
    file: Optional[str] = None
    status: Optional[str] = None
    comments: Optional[str] = None
    reserve: Optional[str] = None
    received_date: Optional[datetime] = None
    min_stock_level: Optional[int] = None
    expiration_date: Optional[datetime] = None
    responsible_person: Optional[str] = None
    storage_cost: Optional[float] = None
    warehouse_section: Optional[str] = None
    incoming_delivery_number: Optional[str] = None
    other_fields: Optional[dict[str, Any]] = None
    internal_name: Optional[str] = None
    units_per_package: Optional[int] = None
    supplier_name: Optional[str] = None
    contract_number: Optional[str] = None

    @model_validator(mode="after")
    def reject_null_for_required_fields(self) -> "MaterialPatch":
        for field in self.model_fields_set:
            if getattr(self, field) is None and field not in _NULLABLE_PATCH_FIELDS:
                raise ValueError(f"{field} cannot be null")
        return self

    def changes(self) -> dict[str, Any]:
        """Fields explicitly present in the patch, with their new values."""
        return {field: getattr(self, field) for field in self.model_fields_set}


class MaterialParams(TenantListParams):
    sort_field: str = "name"
    query: str = ""


class MaterialSearchItem(Material):
    stage: MaterialStage


class MaterialListResponse(BaseModel):
    items: List[Material]
    total: int


class MaterialSearchResponse(BaseModel):
    items: List[MaterialSearchItem]
    total: int


class PlanningCreatedResponse(BaseModel):
    id: int


class PurchasedCreatedResponse(BaseModel):
    id: int
    item_id: int
