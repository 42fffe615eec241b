# orgrbac/domains/teams/routes.py
from fastapi import APIRouter, Depends, status
from supabase import AsyncClient

from orgrbac.core.database import get_db
from orgrbac.domains.teams.models import CreateTeamResponse, TeamCreate, TeamListResponse
from orgrbac.domains.teams.service import TeamService
from orgrbac.shared.permissions import Permission
from orgrbac.shared.permissions.dependencies import require_permission
from orgrbac.shared.permissions.gate import AuthorizationContext

router = APIRouter(prefix="/orgs", tags=["Teams"])


@router.get(
    "/{org_id}/teams",
    response_model=TeamListResponse,
    operation_id="getTeams",
)
async def get_teams(
    org_id: str,
    context: AuthorizationContext = Depends(require_permission(Permission.READ)),
    db: AsyncClient = Depends(get_db),
) -> TeamListResponse:
    """
    List all teams in the organization.

    Requires: 'read' permission (viewer, member, admin, owner).
    """
    service = TeamService(db)
    return await service.list_teams(context)


@router.post(
    "/{org_id}/teams",
    response_model=CreateTeamResponse,
    status_code=status.HTTP_201_CREATED,
    operation_id="createTeam",
)
async def create_team(
    org_id: str,
    team_data: TeamCreate,
    context: AuthorizationContext = Depends(
        require_permission(Permission.MANAGE_TEAM)
    ),
    db: AsyncClient = Depends(get_db),
) -> CreateTeamResponse:
    """
    Create a new team.

    Requires: 'manage_team' permission (admin, owner).
    """
    service = TeamService(db)
    return await service.create_team(team_data, context)
