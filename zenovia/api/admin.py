"""Admin account and permission management endpoints"""
from fastapi import APIRouter, Depends, status
from pymongo.errors import DuplicateKeyError

from zenovia.api.deps import get_context, require_admin, require_permission, require_role
from zenovia.context import AppContext
from zenovia.errors import APIError
from zenovia.models import Admin
from zenovia.schemas.admin import AdminCreate, AdminResponse
from zenovia.utils.logger import logger

router = APIRouter(prefix="/api/admin", tags=["admin"])


@router.get("/permissions")
async def list_permissions(
    context: AppContext = Depends(get_context),
    _: Admin = Depends(require_admin),
):
    """List stored permissions in catalog order (any admin)"""
    stored = {permission.key: permission for permission in await context.permissions.list_all()}
    ordered = [stored[key] for key in context.catalog.keys if key in stored]
    ordered += [permission for key, permission in stored.items() if key not in context.catalog]
    return {
        "success": True,
        "version": context.catalog.version,
        "permissions": [{"key": p.key, "label": p.label} for p in ordered],
    }


@router.get("/admins")
async def list_admins(
    context: AppContext = Depends(get_context),
    _: Admin = Depends(require_permission("manage_admins")),
):
    """List every admin account, oldest first"""
    admins = await context.admins.list_all()
    return {
        "success": True,
        "count": len(admins),
        "admins": [AdminResponse.from_admin(admin).public() for admin in admins],
    }


@router.post("/admins", status_code=status.HTTP_201_CREATED)
async def create_admin(
    data: AdminCreate,
    context: AppContext = Depends(get_context),
    creator: Admin = Depends(require_role("superadmin")),
):
    """Create a non-primary admin with a set of permission keys (superadmin only)"""
    unknown = [key for key in data.permissions if key not in context.catalog]
    if unknown:
        raise APIError(
            status.HTTP_400_BAD_REQUEST,
            f"Unknown permission keys: {', '.join(unknown)}",
        )

    try:
        admin = await context.admins.create(
            name=data.name,
            email=data.email,
            password=data.password,
            role="admin",
            is_primary=False,
            permissions=dict.fromkeys(data.permissions),
        )
    except DuplicateKeyError:
        raise APIError(status.HTTP_409_CONFLICT, f"Admin with email {data.email} already exists")

    logger.info(
        f"Created admin: {admin.email} (by {creator.email})",
        extra={"email": admin.email},
    )
    return {"success": True, "admin": AdminResponse.from_admin(admin).public()}
