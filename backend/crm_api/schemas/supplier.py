# backend/crm_api/schemas/supplier.py
from datetime import datetime
from typing import Any, List, Optional
from pydantic import BaseModel, ConfigDict, Field, model_validator

SUPPLIER_SORT_FIELDS = frozenset({"id", "name", "purchase_amount", "balance", "registration_date", "contract_date"})


class SupplierBase(BaseModel):
    name: str = Field(..., min_length=1)
    legal_address: str = ""
    actual_address: str = ""
    warehouse_address: str = ""
    contact_person: str = ""
    phone: str = ""
    email: str = ""
    website: str = ""
    contract_number: str = ""
    product_categories: List[str] = Field(default_factory=list)
    purchase_amount: float = 0.0
    balance: float = 0.0
    product_types: int = 0
    comments: str = ""
    files: str = ""
    country: str = ""
    region: str = ""
    locality: str = ""
    tax_id: str = ""
    bank_details: str = ""
    payment_terms: List[str] = Field(default_factory=list)
    is_active: bool = True
    other_fields: dict[str, Any] = Field(default_factory=dict)
    contract_date: Optional[datetime] = None


class SupplierCreate(SupplierBase):
    pass


class Supplier(SupplierBase):
    model_config = ConfigDict(from_attributes=True)

    id: int = 0
    company_id: int
    registration_date: Optional[datetime] = None


class SupplierPatch(BaseModel):
    name: Optional[str] = Field(None, min_length=1)
    legal_address: Optional[str] = None
    actual_address: Optional[str] = None
    warehouse_address: Optional[str] = None
    contact_person: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    website: Optional[str] = None
    contract_number: Optional[str] = None
    product_categories: Optional[List[str]] = None
    purchase_amount: Optional[float] = None
    balance: Optional[float] = None
    product_types: Optional[int] = None
    comments: Optional[str] = None
    files: Optional[str] = None
    country: Optional[str] = None
    region: Optional[str] = None
    locality: Optional[str] = None
    tax_id: Optional[str] = None
    bank_details: Optional[str] = None
    payment_terms: Optional[List[str]] = None
    is_active: Optional[bool] = None
    other_fields: Optional[dict[str, Any]] = None
    contract_date: Optional[datetime] = None

    @model_validator(mode="after")
    def reject_null(self) -> "SupplierPatch":
        for field in self.model_fields_set:
            if getattr(self, field) is None and field != "contract_date":
                raise ValueError(f"{field} cannot be null")
        return self


class SupplierListResponse(BaseModel):
    items: List[Supplier]
    total: int
