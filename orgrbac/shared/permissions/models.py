from enum import Enum
from types import MappingProxyType
from typing import FrozenSet, Mapping


class OrganizationRole(str, Enum):
    """Privilege tier a member holds within one organization."""

    viewer = "viewer"
    member = "member"
    admin = "admin"
    owner = "owner"


class Permission(Enum):
    """
    Defines all permissions available in the system.

    Each permission gates one class of operation on an organization's
    resources. Values are the wire names used in API responses.
    """

    # Resource permissions
    READ = "read"  # View organization data and resources
    WRITE = "write"  # Create and edit resources
    DELETE = "delete"  # Delete resources

    # Administrative permissions
    MANAGE_TEAM = "manage_team"  # Create teams and manage team membership
    MANAGE_BILLING = "manage_billing"  # Access and modify billing settings
    MANAGE_ORG = "manage_org"  # Modify organization settings and structure
    INVITE_MEMBERS = "invite_members"  # Invite members and change their roles
    REMOVE_MEMBERS = "remove_members"  # Remove members from the organization


# Higher number = more privileges
ROLE_HIERARCHY: Mapping[OrganizationRole, int] = MappingProxyType(
    {
        OrganizationRole.viewer: 1,
        OrganizationRole.member: 2,
        OrganizationRole.admin: 3,
        OrganizationRole.owner: 4,
    }
)


ROLE_PERMISSIONS: Mapping[OrganizationRole, FrozenSet[Permission]] = MappingProxyType(
    {
        OrganizationRole.viewer: frozenset(
            {
                # Viewers are read-only
                Permission.READ,
            }
        ),
        OrganizationRole.member: frozenset(
            {
                Permission.READ,
                Permission.WRITE,
            }
        ),
        OrganizationRole.admin: frozenset(
            {
                # Admins have everything except billing and org settings
                Permission.READ,
                Permission.WRITE,
                Permission.DELETE,
                Permission.MANAGE_TEAM,
                Permission.INVITE_MEMBERS,
                Permission.REMOVE_MEMBERS,
            }
        ),
        OrganizationRole.owner: frozenset(
            {
                # Owners have all permissions
                Permission.READ,
                Permission.WRITE,
                Permission.DELETE,
                Permission.MANAGE_TEAM,
                Permission.MANAGE_BILLING,
                Permission.MANAGE_ORG,
                Permission.INVITE_MEMBERS,
                Permission.REMOVE_MEMBERS,
            }
        ),
    }
)


PERMISSION_DESCRIPTIONS: Mapping[Permission, str] = MappingProxyType(
    {
        Permission.READ: "View organization data and resources",
        Permission.WRITE: "Create and edit resources",
        Permission.DELETE: "Delete resources",
        Permission.MANAGE_TEAM: "Manage teams and team members",
        Permission.MANAGE_BILLING: "Access and modify billing settings",
        Permission.MANAGE_ORG: "Modify organization settings and structure",
        Permission.INVITE_MEMBERS: "Invite new members to the organization",
        Permission.REMOVE_MEMBERS: "Remove members from the organization",
    }
)


ROLE_DESCRIPTIONS: Mapping[OrganizationRole, str] = MappingProxyType(
    {
        OrganizationRole.viewer: "Can view organization data but cannot make changes",
        OrganizationRole.member: "Can view and create resources within their teams",
        OrganizationRole.admin: (
            "Can manage teams and members, full access except billing"
        ),
        OrganizationRole.owner: "Full access to all organization features and settings",
    }
)
