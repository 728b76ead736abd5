"""Admin document model"""
from datetime import datetime
from typing import List, Literal

from pydantic import Field

from zenovia.models.base import Document, utcnow


class Admin(Document):
    """An administrator account.

    ``password`` always holds a hash produced by
    :func:`zenovia.utils.passwords.hash_password`.  Exactly one record is
    expected to carry ``is_primary``: the superadmin seeded from the
    environment at first boot.
    """

    name: str
    email: str
    password: str
    role: Literal["superadmin", "admin"] = "admin"
    is_primary: bool = Field(False, alias="isPrimary")
    is_active: bool = Field(True, alias="isActive")
    permissions: List[str] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=utcnow, alias="createdAt")

    def has_permission(self, key: str) -> bool:
        return self.role == "superadmin" or key in self.permissions
