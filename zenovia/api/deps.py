"""API dependencies for context access, authentication and authorization.

Admin requests authenticate with ``Authorization: Bearer <JWT>`` issued by
``POST /api/auth/admin/login``.

Role hierarchy (higher level → more permissions):
    superadmin (2) > admin (1)

A superadmin passes every permission check; an admin passes a permission
check only when the key is in its ``permissions`` list.
"""
from typing import Callable, Optional

from fastapi import Depends, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from zenovia.context import AppContext
from zenovia.errors import APIError
from zenovia.models import Admin

_bearer_scheme = HTTPBearer(auto_error=False)

_ROLE_HIERARCHY: dict[str, int] = {
    "superadmin": 2,
    "admin": 1,
}


def get_context(request: Request) -> AppContext:
    return request.app.state.context


async def require_admin(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(_bearer_scheme),
    context: AppContext = Depends(get_context),
) -> Admin:
    """Resolve the active admin behind a Bearer token. Raises 401/403."""
    if not credentials:
        raise APIError(
            status.HTTP_401_UNAUTHORIZED,
            "Authentication required. Provide Authorization: Bearer <token>.",
            headers={"WWW-Authenticate": "Bearer"},
        )

    payload = context.tokens.decode_access_token(credentials.credentials)
    admin = await context.admins.find_by_id(payload["sub"])
    if not admin:
        raise APIError(status.HTTP_401_UNAUTHORIZED, "Admin no longer exists")
    if not admin.is_active:
        raise APIError(status.HTTP_403_FORBIDDEN, "Admin account is deactivated")
    return admin


def require_role(min_role: str) -> Callable:
    """Return a dependency that enforces a minimum admin role.

    Usage::

        @router.post("/admins")
        async def endpoint(admin: Admin = Depends(require_role("superadmin"))):
            ...
    """
    min_level = _ROLE_HIERARCHY.get(min_role, 0)

    async def _role_dep(admin: Admin = Depends(require_admin)) -> Admin:
        if _ROLE_HIERARCHY.get(admin.role, 0) < min_level:
            raise APIError(
                status.HTTP_403_FORBIDDEN,
                f"Role '{min_role}' or higher required (your role: '{admin.role}')",
            )
        return admin

    _role_dep.__name__ = f"require_role_{min_role}"
    return _role_dep


def require_permission(key: str) -> Callable:
    """Return a dependency that requires a permission key (superadmins always pass)"""

    async def _permission_dep(admin: Admin = Depends(require_admin)) -> Admin:
        if not admin.has_permission(key):
            raise APIError(status.HTTP_403_FORBIDDEN, f"Permission '{key}' required")
        return admin

    _permission_dep.__name__ = f"require_permission_{key}"
    return _permission_dep
