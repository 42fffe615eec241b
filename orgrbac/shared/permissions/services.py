from typing import FrozenSet, Iterable

from .models import ROLE_HIERARCHY, ROLE_PERMISSIONS, OrganizationRole, Permission


def rank_of(role: OrganizationRole) -> int:
    """Position of a role in the viewer < member < admin < owner order."""
    return ROLE_HIERARCHY[role]


def permissions_of(role: OrganizationRole) -> FrozenSet[Permission]:
    """All permissions granted to a role."""
    return ROLE_PERMISSIONS.get(role, frozenset())


def has_permission(role: OrganizationRole, permission: Permission) -> bool:
    """
    Check if a role has a specific permission.

    Args:
        role: The organization role to check
        permission: The permission to validate

    Returns:
        True if the role has the permission, False otherwise
    """
    return permission in permissions_of(role)


def has_any_permission(
    role: OrganizationRole, permissions: Iterable[Permission]
) -> bool:
    """True if the role holds at least one of the given permissions."""
    return any(has_permission(role, permission) for permission in permissions)


def meets_role_level(role: OrganizationRole, required_role: OrganizationRole) -> bool:
    """
    Check if a role meets a minimum role level.

    Args:
        role: The caller's role
        required_role: Minimum role required

    Returns:
        True if role ranks at or above required_role
    """
    return rank_of(role) >= rank_of(required_role)
