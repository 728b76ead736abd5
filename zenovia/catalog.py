"""Versioned permission catalog"""
from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

BUNDLED_CATALOG = Path(__file__).resolve().parent / "data" / "permissions.json"


class PermissionEntry(BaseModel):
    key: str = Field(..., min_length=1)
    label: str = Field(..., min_length=1)


class PermissionCatalog(BaseModel):
    """The known permission keys, in seeding order"""

    version: int
    permissions: List[PermissionEntry]

    @field_validator("permissions")
    @classmethod
    def _unique_keys(cls, entries: List[PermissionEntry]) -> List[PermissionEntry]:
        seen = set()
        for entry in entries:
            if entry.key in seen:
                raise ValueError(f"duplicate permission key: {entry.key}")
            seen.add(entry.key)
        return entries

    @property
    def keys(self) -> List[str]:
        return [entry.key for entry in self.permissions]

    def __contains__(self, key: object) -> bool:
        return key in self.keys


def load_permission_catalog(path: Optional[Path] = None) -> PermissionCatalog:
    """Read and validate a catalog file, the bundled one by default.

    Raises ``pydantic.ValidationError`` on a malformed catalog.
    """
    source = Path(path) if path else BUNDLED_CATALOG
    return PermissionCatalog.model_validate_json(source.read_text(encoding="utf-8"))
