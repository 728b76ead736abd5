"""Database document models"""
from zenovia.models.admin import Admin
from zenovia.models.expert import Expert
from zenovia.models.permission import Permission

__all__ = ["Admin", "Expert", "Permission"]
