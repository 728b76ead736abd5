"""Permission document model"""
from datetime import datetime

from pydantic import Field

from zenovia.models.base import Document, utcnow


class Permission(Document):
    key: str
    label: str
    created_at: datetime = Field(default_factory=utcnow, alias="createdAt")
