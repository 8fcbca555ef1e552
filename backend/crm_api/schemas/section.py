# backend/crm_api/schemas/section.py
from typing import List
from pydantic import BaseModel, ConfigDict, Field


class SectionCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)


class SectionUpdate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)


class SectionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str


class SectionListResponse(BaseModel):
    items: List[SectionResponse]
    total: int
