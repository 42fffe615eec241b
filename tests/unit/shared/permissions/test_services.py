"""
Tests for shared permissions services (role and permission predicates).
"""

import pytest

from orgrbac.shared.permissions.models import OrganizationRole, Permission
from orgrbac.shared.permissions.services import (
    has_any_permission,
    has_permission,
    meets_role_level,
    permissions_of,
    rank_of,
)

ROLES = list(OrganizationRole)


class TestRankOf:
    def test_ranks(self):
        assert rank_of(OrganizationRole.viewer) < rank_of(OrganizationRole.member)
        assert rank_of(OrganizationRole.member) < rank_of(OrganizationRole.admin)
        assert rank_of(OrganizationRole.admin) < rank_of(OrganizationRole.owner)


class TestHasPermission:
    """Test the has_permission function."""

    @pytest.mark.parametrize("permission", list(Permission))
    def test_owner_has_every_permission(self, permission: Permission):
        assert has_permission(OrganizationRole.owner, permission)

    def test_viewer_only_reads(self):
        assert has_permission(OrganizationRole.viewer, Permission.READ)
        for permission in set(Permission) - {Permission.READ}:
            assert not has_permission(OrganizationRole.viewer, permission)

    def test_admin_cannot_manage_billing(self):
        assert not has_permission(OrganizationRole.admin, Permission.MANAGE_BILLING)
        assert has_permission(OrganizationRole.admin, Permission.MANAGE_TEAM)

    def test_member_can_write_not_delete(self):
        assert has_permission(OrganizationRole.member, Permission.WRITE)
        assert not has_permission(OrganizationRole.member, Permission.DELETE)

    @pytest.mark.parametrize("role", ROLES)
    @pytest.mark.parametrize("permission", list(Permission))
    def test_higher_roles_keep_lower_role_permissions(
        self, role: OrganizationRole, permission: Permission
    ):
        if not has_permission(role, permission):
            return
        for other in ROLES:
            if rank_of(other) > rank_of(role):
                assert has_permission(other, permission)


class TestHasAnyPermission:
    def test_single_permission_held(self):
        assert has_any_permission(OrganizationRole.viewer, [Permission.READ])

    def test_any_of_set_is_enough(self):
        assert has_any_permission(
            OrganizationRole.member, {Permission.MANAGE_ORG, Permission.WRITE}
        )

    def test_none_of_set_held(self):
        assert not has_any_permission(
            OrganizationRole.viewer, {Permission.MANAGE_TEAM, Permission.DELETE}
        )

    def test_empty_set_never_satisfied(self):
        assert not has_any_permission(OrganizationRole.owner, [])


class TestMeetsRoleLevel:
    @pytest.mark.parametrize("role", ROLES)
    def test_every_role_meets_its_own_level(self, role: OrganizationRole):
        assert meets_role_level(role, role)

    @pytest.mark.parametrize("role", ROLES)
    def test_owner_meets_every_level(self, role: OrganizationRole):
        assert meets_role_level(OrganizationRole.owner, role)

    def test_lower_role_fails_higher_level(self):
        assert not meets_role_level(OrganizationRole.member, OrganizationRole.admin)
        assert not meets_role_level(OrganizationRole.viewer, OrganizationRole.member)

    def test_admin_meets_member_level(self):
        assert meets_role_level(OrganizationRole.admin, OrganizationRole.member)


class TestPermissionsOf:
    def test_returns_frozenset(self):
        assert isinstance(permissions_of(OrganizationRole.member), frozenset)

    def test_owner_permissions_are_complete(self):
        assert permissions_of(OrganizationRole.owner) == frozenset(Permission)
