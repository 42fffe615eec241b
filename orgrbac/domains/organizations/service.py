# orgrbac/domains/organizations/service.py
import logging
from datetime import datetime, timezone
from typing import Any, Dict

from supabase import AsyncClient

from orgrbac.core.database import run_query
from orgrbac.domains.organizations.models import (
    AccessSummary,
    Organization,
    OrganizationResponse,
    OrganizationUpdate,
)
from orgrbac.shared.exceptions import NotFoundError
from orgrbac.shared.permissions.gate import AuthorizationContext, OptionalAccess
from orgrbac.shared.permissions.services import permissions_of

logger = logging.getLogger(__name__)


class OrganizationService:
    def __init__(self, db: AsyncClient):
        self.db = db

    async def get_organization(self, organization_id: str) -> OrganizationResponse:
        """
        Fetch the full organization record, including settings.

        Raises:
            NotFoundError: If the organization no longer exists
        """
        organization = await self._fetch(organization_id)
        return OrganizationResponse(organization=organization)

    async def update_organization(
        self,
        organization_id: str,
        updates: OrganizationUpdate,
        context: AuthorizationContext,
    ) -> OrganizationResponse:
        """
        Update organization name, plan and/or settings.

        Only fields present in the request are written; `updated_at` is always
        bumped.
        """
        await self._fetch(organization_id)

        update_data: Dict[str, Any] = {
            "updated_at": datetime.now(timezone.utc).isoformat(),
            **updates.model_dump(exclude_unset=True),
        }

        response = await run_query(
            self.db.table("organizations")
            .update(update_data)
            .eq("id", organization_id),
            f"update organization {organization_id}",
        )
        rows = response.data or []
        if not rows:
            raise NotFoundError("Organization")

        logger.info(
            f"User {context.identity.id} updated organization {organization_id}: "
            f"{sorted(update_data)}"
        )
        return OrganizationResponse(
            organization=Organization(**rows[0]),
            message="Organization updated successfully",
        )

    async def _fetch(self, organization_id: str) -> Organization:
        response = await run_query(
            self.db.table("organizations")
            .select("*")
            .eq("id", organization_id)
            .limit(1),
            f"fetch organization {organization_id}",
        )
        rows = response.data or []
        if not rows:
            raise NotFoundError("Organization")
        return Organization(**rows[0])


def summarize_access(access: OptionalAccess) -> AccessSummary:
    """Describe what the caller may do in an organization."""
    if access.identity is None:
        return AccessSummary(authenticated=False)

    if access.membership is None:
        return AccessSummary(authenticated=True, user_id=access.identity.id)

    role = access.membership.role
    return AccessSummary(
        authenticated=True,
        user_id=access.identity.id,
        is_member=True,
        role=role.value,
        permissions=sorted(permission.value for permission in permissions_of(role)),
    )
