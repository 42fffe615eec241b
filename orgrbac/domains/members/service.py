# orgrbac/domains/members/service.py
import logging
from typing import Any, Dict, Optional

import httpx
from postgrest.exceptions import APIError
from pydantic import ValidationError
from supabase import AsyncClient

from orgrbac.core.database import run_query
from orgrbac.domains.members.models import (
    InviteMemberRequest,
    MemberListResponse,
    MemberMutationResponse,
    MemberRemovalResponse,
    MemberResponse,
    Membership,
    UpdateMemberRoleRequest,
)
from orgrbac.shared.exceptions import (
    ConflictError,
    DatabaseError,
    LastOwnerError,
    MembershipLookupError,
    NotFoundError,
    RoleEscalationError,
)
from orgrbac.shared.permissions.models import OrganizationRole
from orgrbac.shared.permissions.services import meets_role_level

logger = logging.getLogger(__name__)

MEMBER_COLUMNS = "user_id, role, created_at, users(id, email)"


class MembershipResolver:
    """Looks up a user's membership of an organization in the data store."""

    def __init__(self, db: AsyncClient):
        self.db = db

    async def find_membership(
        self, user_id: str, organization_id: str
    ) -> Optional[Membership]:
        """
        Fetch the membership binding a user to an organization.

        Args:
            user_id: Identity of the caller
            organization_id: Organization the request targets

        Returns:
            Membership with the organization attached, or None when the user
            is not a member or the organization does not exist

        Raises:
            MembershipLookupError: If the store cannot be queried or returns
                a row that does not parse
        """
        try:
            response = await (
                self.db.table("organization_members")
                .select("*, organization:organizations(*)")
                .eq("user_id", user_id)
                .eq("organization_id", organization_id)
                .limit(1)
                .execute()
            )
        except (APIError, httpx.HTTPError) as e:
            logger.error(
                f"Membership query failed (user_id={user_id}, "
                f"organization_id={organization_id}): {e}"
            )
            raise MembershipLookupError(user_id, organization_id, str(e)) from e

        rows = response.data or []
        if not rows:
            return None

        try:
            membership = Membership(**rows[0])
        except ValidationError as e:
            logger.error(
                f"Unreadable membership row (user_id={user_id}, "
                f"organization_id={organization_id}): {e}"
            )
            raise MembershipLookupError(user_id, organization_id, str(e)) from e

        if membership.organization is None:
            return None
        return membership


class MemberService:
    def __init__(self, db: AsyncClient):
        self.db = db

    async def list_members(self, organization_id: str) -> MemberListResponse:
        """List all members of an organization with their email addresses."""
        response = await run_query(
            self.db.table("organization_members")
            .select(MEMBER_COLUMNS)
            .eq("organization_id", organization_id)
            .order("role"),
            f"list members of organization {organization_id}",
        )
        members = [MemberResponse.from_record(row) for row in response.data or []]
        return MemberListResponse(members=members, count=len(members))

    async def invite_member(
        self,
        organization_id: str,
        invite: InviteMemberRequest,
        requester: Membership,
    ) -> MemberMutationResponse:
        """
        Add a user to an organization, creating the user if needed.

        Args:
            organization_id: The organization ID
            invite: Email, role and optional message for the invitee
            requester: Membership of the caller issuing the invite

        Returns:
            The new member with a confirmation message

        Raises:
            RoleEscalationError: If the invite grants a role above the caller's
            ConflictError: If the user is already a member
        """
        if not meets_role_level(requester.role, invite.role):
            raise RoleEscalationError()

        user_id = await self._find_user_id(invite.email)
        if user_id:
            existing = await self._get_member(organization_id, user_id)
            if existing:
                raise ConflictError("User is already a member of this organization")
        else:
            user_id = await self._create_user(organization_id, invite, requester)

        response = await run_query(
            self.db.table("organization_members").insert(
                {
                    "organization_id": organization_id,
                    "user_id": user_id,
                    "role": invite.role.value,
                }
            ),
            f"add user {user_id} to organization {organization_id}",
        )
        created = (response.data or [{}])[0]

        logger.info(
            f"User {requester.user_id} invited {user_id} to organization "
            f"{organization_id} as {invite.role.value}"
        )
        return MemberMutationResponse(
            member=MemberResponse(
                id=user_id,
                user_id=user_id,
                email=invite.email,
                role=invite.role.value,
                created_at=created.get("created_at"),
            ),
            message="Member invited successfully",
        )

    async def update_member_role(
        self,
        organization_id: str,
        user_id: str,
        update: UpdateMemberRoleRequest,
        requester: Membership,
    ) -> MemberMutationResponse:
        """
        Change a member's role.

        Business rules:
        - Cannot grant a role above your own
        - Cannot demote the last owner
        """
        if not meets_role_level(requester.role, update.role):
            raise RoleEscalationError()

        member = await self._get_member(organization_id, user_id)
        if not member:
            raise NotFoundError("Member")

        if not meets_role_level(requester.role, OrganizationRole(member["role"])):
            raise RoleEscalationError(
                "Cannot change the role of a member above your own"
            )

        if (
            member["role"] == OrganizationRole.owner.value
            and update.role != OrganizationRole.owner
        ):
            await self._ensure_other_owner(
                organization_id, "Cannot demote the last owner"
            )

        await run_query(
            self.db.table("organization_members")
            .update({"role": update.role.value})
            .eq("organization_id", organization_id)
            .eq("user_id", user_id),
            f"update role of user {user_id} in organization {organization_id}",
        )

        logger.info(
            f"User {requester.user_id} changed role of {user_id} in organization "
            f"{organization_id} from {member['role']} to {update.role.value}"
        )
        return MemberMutationResponse(
            member=MemberResponse.from_record({**member, "role": update.role.value}),
            message="Member role updated successfully",
        )

    async def remove_member(
        self, organization_id: str, user_id: str, requester: Membership
    ) -> MemberRemovalResponse:
        """
        Remove a member from an organization.

        Self-removal is rejected before this point by the route guard.

        Raises:
            NotFoundError: If the user is not a member
            LastOwnerError: If the member is the organization's only owner
        """
        member = await self._get_member(organization_id, user_id)
        if not member:
            raise NotFoundError("Member")

        if member["role"] == OrganizationRole.owner.value:
            await self._ensure_other_owner(organization_id, "Cannot remove the last owner")

        await run_query(
            self.db.table("organization_members")
            .delete()
            .eq("organization_id", organization_id)
            .eq("user_id", user_id),
            f"remove user {user_id} from organization {organization_id}",
        )

        logger.info(
            f"User {requester.user_id} removed {user_id} from organization "
            f"{organization_id}"
        )
        return MemberRemovalResponse(
            user_id=user_id, message="Member removed successfully"
        )

    async def _get_member(
        self, organization_id: str, user_id: str
    ) -> Optional[Dict[str, Any]]:
        response = await run_query(
            self.db.table("organization_members")
            .select(MEMBER_COLUMNS)
            .eq("organization_id", organization_id)
            .eq("user_id", user_id)
            .limit(1),
            f"fetch member {user_id} of organization {organization_id}",
        )
        rows = response.data or []
        return rows[0] if rows else None

    async def _ensure_other_owner(self, organization_id: str, message: str) -> None:
        response = await run_query(
            self.db.table("organization_members")
            .select("user_id", count="exact")
            .eq("organization_id", organization_id)
            .eq("role", OrganizationRole.owner.value),
            f"count owners of organization {organization_id}",
        )
        owner_count = (
            response.count if response.count is not None else len(response.data or [])
        )
        if owner_count <= 1:
            raise LastOwnerError(message)

    async def _find_user_id(self, email: str) -> Optional[str]:
        response = await run_query(
            self.db.table("users").select("id").eq("email", email).limit(1),
            "look up user by email",
        )
        rows = response.data or []
        return rows[0]["id"] if rows else None

    async def _create_user(
        self,
        organization_id: str,
        invite: InviteMemberRequest,
        requester: Membership,
    ) -> str:
        """Create an auth user for the invitee and mirror it into `users`."""
        try:
            created = await self.db.auth.admin.create_user(
                {
                    "email": invite.email,
                    "email_confirm": True,
                    "user_metadata": {
                        "invited_to_org": organization_id,
                        "invited_by": requester.user_id,
                        "invitation_message": invite.message,
                    },
                }
            )
        except Exception as e:
            logger.error(f"Failed to create auth user for invitation: {e}")
            raise DatabaseError() from e

        user_id = created.user.id
        try:
            await run_query(
                self.db.table("users").insert({"id": user_id, "email": invite.email}),
                f"insert user {user_id}",
            )
        except DatabaseError:
            # Roll back the auth user so the email can be invited again
            await self.db.auth.admin.delete_user(user_id)
            raise

        return user_id
