# orgrbac/domains/members/routes.py
from fastapi import APIRouter, Depends, status
from supabase import AsyncClient

from orgrbac.core.database import get_db
from orgrbac.domains.members.models import (
    InviteMemberRequest,
    MemberListResponse,
    MemberMutationResponse,
    MemberRemovalResponse,
    UpdateMemberRoleRequest,
)
from orgrbac.domains.members.service import MemberService
from orgrbac.shared.permissions import Permission
from orgrbac.shared.permissions.dependencies import (
    require_member_removal,
    require_permission,
)
from orgrbac.shared.permissions.gate import AuthorizationContext

router = APIRouter(prefix="/orgs", tags=["Members"])


@router.get(
    "/{org_id}/members",
    response_model=MemberListResponse,
    operation_id="getOrganizationMembers",
)
async def get_organization_members(
    org_id: str,
    context: AuthorizationContext = Depends(require_permission(Permission.READ)),
    db: AsyncClient = Depends(get_db),
) -> MemberListResponse:
    """
    List all members of an organization.

    Requires: 'read' permission (every role).
    """
    service = MemberService(db)
    return await service.list_members(org_id)


@router.post(
    "/{org_id}/members",
    response_model=MemberMutationResponse,
    status_code=status.HTTP_201_CREATED,
    operation_id="inviteOrganizationMember",
)
async def invite_organization_member(
    org_id: str,
    invite: InviteMemberRequest,
    context: AuthorizationContext = Depends(
        require_permission(Permission.INVITE_MEMBERS)
    ),
    db: AsyncClient = Depends(get_db),
) -> MemberMutationResponse:
    """
    Invite a user to the organization by email.

    Requires: 'invite_members' permission (admin, owner). A user account is
    created for emails that are not registered yet.
    """
    service = MemberService(db)
    return await service.invite_member(org_id, invite, context.membership)


@router.put(
    "/{org_id}/members/{user_id}",
    response_model=MemberMutationResponse,
    operation_id="updateOrganizationMemberRole",
)
async def update_organization_member_role(
    org_id: str,
    user_id: str,
    update: UpdateMemberRoleRequest,
    context: AuthorizationContext = Depends(
        require_permission(Permission.INVITE_MEMBERS)
    ),
    db: AsyncClient = Depends(get_db),
) -> MemberMutationResponse:
    """
    Change a member's role.

    Requires: 'invite_members' permission (admin, owner).

    Business rules:
    - Cannot grant a role above your own
    - Cannot demote the last owner
    """
    service = MemberService(db)
    return await service.update_member_role(
        org_id, user_id, update, context.membership
    )


@router.delete(
    "/{org_id}/members/{user_id}",
    response_model=MemberRemovalResponse,
    operation_id="removeOrganizationMember",
)
async def remove_organization_member(
    org_id: str,
    user_id: str,
    context: AuthorizationContext = Depends(require_member_removal()),
    db: AsyncClient = Depends(get_db),
) -> MemberRemovalResponse:
    """
    Remove a member from the organization.

    Requires: 'remove_members' permission (admin, owner).

    Business rules:
    - Cannot remove yourself from the organization
    - Cannot remove the last owner
    """
    service = MemberService(db)
    return await service.remove_member(org_id, user_id, context.membership)
