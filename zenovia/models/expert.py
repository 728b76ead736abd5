"""Expert document model"""
from typing import Optional

from pydantic import Field

from zenovia.models.base import Document


class Expert(Document):
    """A wellness expert profile (read-only here, owned by the booking side)"""

    name: str
    email: Optional[str] = None
    specialization: Optional[str] = None
    bio: Optional[str] = None
    experience: Optional[int] = None
    rating: Optional[float] = None
    hourly_rate: Optional[float] = Field(None, alias="hourlyRate")
    avatar: Optional[str] = None
    is_active: bool = Field(True, alias="isActive")
