"""Admin schemas"""
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from zenovia.models import Admin


class LoginRequest(BaseModel):
    email: str = Field(..., min_length=3)
    password: str = Field(..., min_length=1)


class AdminCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    email: str = Field(..., min_length=3, max_length=254)
    password: str = Field(..., min_length=6)
    permissions: List[str] = Field(default_factory=list)

    @field_validator("email")
    @classmethod
    def _looks_like_email(cls, value: str) -> str:
        local, _, domain = value.strip().partition("@")
        if not local or "." not in domain:
            raise ValueError("must be a valid email address")
        return value.strip().lower()


class AdminResponse(BaseModel):
    """Admin as returned to clients; never includes the password hash"""

    model_config = ConfigDict(populate_by_name=True)

    id: Optional[str]
    name: str
    email: str
    role: str
    is_primary: bool = Field(serialization_alias="isPrimary")
    is_active: bool = Field(serialization_alias="isActive")
    permissions: List[str]
    created_at: datetime = Field(serialization_alias="createdAt")

    @classmethod
    def from_admin(cls, admin: Admin) -> "AdminResponse":
        return cls(
            id=admin.id,
            name=admin.name,
            email=admin.email,
            role=admin.role,
            is_primary=admin.is_primary,
            is_active=admin.is_active,
            permissions=admin.permissions,
            created_at=admin.created_at,
        )

    def public(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)
