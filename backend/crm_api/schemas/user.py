# backend/crm_api/schemas/user.py
from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field, model_validator


class UserCreate(BaseModel):
    username: str = Field(..., min_length=3, max_length=50)
    password: str = Field(..., min_length=6)
    name: str = ""
    email: Optional[str] = None
    phone: str = ""
    position: str = ""
    sections: List[str] = Field(default_factory=list)


class UserResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    company_id: int
    username: str
    name: str = ""
    email: Optional[str] = None
    phone: str = ""
    position: str = ""
    sections: List[str] = Field(default_factory=list)
    is_active: bool = True
    created_at: Optional[datetime] = None


class UserPatch(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    position: Optional[str] = None
    password: Optional[str] = Field(None, min_length=6)
    sections: Optional[List[str]] = None
    is_active: Optional[bool] = None

    @model_validator(mode="after")
    def reject_null(self) -> "UserPatch":
        for field in self.model_fields_set:
            if getattr(self, field) is None and field != "email":
                raise ValueError(f"{field} cannot be null")
        return self


class UserProfilePatch(BaseModel):
    """Fields a user may change on their own account."""

    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    position: Optional[str] = None
    password: Optional[str] = Field(None, min_length=6)

    @model_validator(mode="after")
    def reject_null(self) -> "UserProfilePatch":
        for field in self.model_fields_set:
            if getattr(self, field) is None and field != "email":
                raise ValueError(f"{field} cannot be null")
        return self


class UserListResponse(BaseModel):
    items: List[UserResponse]
    total: int
