# orgrbac/domains/organizations/routes.py
from fastapi import APIRouter, Depends
from supabase import AsyncClient

from orgrbac.core.database import get_db
from orgrbac.domains.organizations.models import (
    AccessSummary,
    OrganizationResponse,
    OrganizationUpdate,
)
from orgrbac.domains.organizations.service import (
    OrganizationService,
    summarize_access,
)
from orgrbac.shared.permissions import Permission
from orgrbac.shared.permissions.dependencies import (
    get_optional_access,
    require_permission,
)
from orgrbac.shared.permissions.gate import AuthorizationContext, OptionalAccess

router = APIRouter(prefix="/orgs", tags=["Organizations"])


@router.get(
    "/{org_id}",
    response_model=OrganizationResponse,
    operation_id="getOrganization",
)
async def get_organization(
    org_id: str,
    context: AuthorizationContext = Depends(require_permission(Permission.READ)),
    db: AsyncClient = Depends(get_db),
) -> OrganizationResponse:
    """
    Fetch organization details.

    Requires: 'read' permission (every role).
    """
    service = OrganizationService(db)
    return await service.get_organization(org_id)


@router.put(
    "/{org_id}",
    response_model=OrganizationResponse,
    operation_id="updateOrganization",
)
async def update_organization(
    org_id: str,
    updates: OrganizationUpdate,
    context: AuthorizationContext = Depends(
        require_permission(Permission.MANAGE_ORG)
    ),
    db: AsyncClient = Depends(get_db),
) -> OrganizationResponse:
    """
    Update organization settings.

    Requires: 'manage_org' permission (owner).
    """
    service = OrganizationService(db)
    return await service.update_organization(org_id, updates, context)


@router.get(
    "/{org_id}/access",
    response_model=AccessSummary,
    operation_id="getOrganizationAccess",
)
async def get_organization_access(
    org_id: str,
    access: OptionalAccess = Depends(get_optional_access),
) -> AccessSummary:
    """
    Report the caller's authentication state and permissions.

    Anonymous callers and non-members get a response too, so clients can use
    this to decide what to show.
    """
    return summarize_access(access)
