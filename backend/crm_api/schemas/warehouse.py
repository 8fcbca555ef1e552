# backend/crm_api/schemas/warehouse.py
from datetime import datetime
from typing import Any, List, Optional
from pydantic import BaseModel, ConfigDict, Field, model_validator

WAREHOUSE_SORT_FIELDS = frozenset({"id", "name", "address", "max_capacity", "current_occupancy", "created_at"})


class WarehouseBase(BaseModel):
    name: str = Field(..., min_length=1)
    address: str = ""
    responsible_person: int = 0
    phone: str = ""
    email: str = ""
    max_capacity: int = 0
    current_occupancy: int = 0
    other_fields: dict[str, Any] = Field(default_factory=dict)
    country: str = ""
    region: str = ""
    locality: str = ""
    comments: str = ""


class WarehouseCreate(WarehouseBase):
    pass


class Warehouse(WarehouseBase):
    model_config = ConfigDict(from_attributes=True)

    id: int = 0
    company_id: int
    created_at: Optional[datetime] = None


class WarehousePatch(BaseModel):
    name: Optional[str] = Field(None, min_length=1)
    address: Optional[str] = None
    responsible_person: Optional[int] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    max_capacity: Optional[int] = None
    current_occupancy: Optional[int] = None
    other_fields: Optional[dict[str, Any]] = None
    country: Optional[str] = None
    region: Optional[str] = None
    locality: Optional[str] = None
    comments: Optional[str] = None

    @model_validator(mode="after")
    def reject_null(self) -> "WarehousePatch":
        for field in self.model_fields_set:
            if getattr(self, field) is None:
                raise ValueError(f"{field} cannot be null")
        return self


class WarehouseListResponse(BaseModel):
    items: List[Warehouse]
    total: int
