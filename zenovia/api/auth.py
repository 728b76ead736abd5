"""Admin authentication endpoints"""
from fastapi import APIRouter, Depends, status

from zenovia.api.deps import get_context, require_admin
from zenovia.context import AppContext
from zenovia.errors import APIError
from zenovia.models import Admin
from zenovia.schemas.admin import AdminResponse, LoginRequest
from zenovia.utils.logger import logger
from zenovia.utils.passwords import verify_password

router = APIRouter(prefix="/api/auth", tags=["authentication"])


@router.post("/admin/login")
async def admin_login(data: LoginRequest, context: AppContext = Depends(get_context)):
    """Exchange admin email and password for a signed JWT.

    Use the token as ``Authorization: Bearer <token>`` on admin endpoints.
    """
    admin = await context.admins.find_by_email(data.email)
    if not admin or not verify_password(data.password, admin.password):
        logger.warning("Admin login failed", extra={"email": data.email})
        raise APIError(status.HTTP_401_UNAUTHORIZED, "Invalid email or password")

    if not admin.is_active:
        raise APIError(status.HTTP_403_FORBIDDEN, "Admin account is deactivated")

    token = context.tokens.create_access_token(
        subject=admin.id,
        extra_claims={"role": admin.role, "email": admin.email},
    )
    logger.info(f"Admin logged in: {admin.email}", extra={"email": admin.email})

    return {
        "success": True,
        "token": token,
        "expiresIn": context.tokens.expire_seconds,
        "admin": AdminResponse.from_admin(admin).public(),
    }


@router.get("/admin/me")
async def current_admin(admin: Admin = Depends(require_admin)):
    """Return the admin behind the Bearer token"""
    return {"success": True, "admin": AdminResponse.from_admin(admin).public()}
