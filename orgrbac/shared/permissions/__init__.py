"""
Shared permission system for role-based access control.

This package holds the role hierarchy and role/permission table
(`models`, `services`), the authorization gate every organization-scoped
route goes through (`gate`), and the FastAPI guards wrapping it
(`dependencies`).

Usage:
    from orgrbac.shared.permissions import Permission
    from orgrbac.shared.permissions.dependencies import require_permission

    @router.get("/{org_id}/resource")
    async def get_resource(
        context: AuthorizationContext = Depends(
            require_permission(Permission.READ)
        )
    ):
        pass
"""

from .models import (
    PERMISSION_DESCRIPTIONS,
    ROLE_DESCRIPTIONS,
    ROLE_HIERARCHY,
    ROLE_PERMISSIONS,
    OrganizationRole,
    Permission,
)
from .services import (
    has_any_permission,
    has_permission,
    meets_role_level,
    permissions_of,
    rank_of,
)

__all__ = [
    "OrganizationRole",
    "PERMISSION_DESCRIPTIONS",
    "Permission",
    "ROLE_DESCRIPTIONS",
    "ROLE_HIERARCHY",
    "ROLE_PERMISSIONS",
    "has_any_permission",
    "has_permission",
    "meets_role_level",
    "permissions_of",
    "rank_of",
]
