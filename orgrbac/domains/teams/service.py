# orgrbac/domains/teams/service.py
import logging
from datetime import datetime, timezone

from supabase import AsyncClient

from orgrbac.core.database import run_query
from orgrbac.domains.teams.models import (
    CreateTeamResponse,
    Team,
    TeamCaller,
    TeamCreate,
    TeamListResponse,
)
from orgrbac.shared.exceptions import DatabaseError
from orgrbac.shared.permissions.gate import AuthorizationContext

logger = logging.getLogger(__name__)


class TeamService:
    """Service for team operations within an organization"""

    def __init__(self, db: AsyncClient):
        self.db = db

    async def list_teams(self, context: AuthorizationContext) -> TeamListResponse:
        """
        List the organization's teams, newest first.

        The response also echoes the organization and the caller's role so
        clients can render the page without a second request.
        """
        organization_id = context.organization.id
        response = await run_query(
            self.db.table("teams")
            .select("*")
            .eq("organization_id", organization_id)
            .order("created_at", desc=True),
            f"list teams of organization {organization_id}",
        )

        return TeamListResponse(
            teams=[Team(**row) for row in response.data or []],
            organization=context.organization,
            user=TeamCaller(
                id=context.identity.id, role=context.membership.role.value
            ),
        )

    async def create_team(
        self, team_data: TeamCreate, context: AuthorizationContext
    ) -> CreateTeamResponse:
        organization_id = context.organization.id
        now = datetime.now(timezone.utc).isoformat()

        response = await run_query(
            self.db.table("teams").insert(
                {
                    "organization_id": organization_id,
                    "name": team_data.name,
                    "description": team_data.description,
                    "created_at": now,
                    "updated_at": now,
                }
            ),
            f"create team in organization {organization_id}",
        )
        rows = response.data or []
        if not rows:
            logger.error(f"Team insert returned no row for organization {organization_id}")
            raise DatabaseError()

        logger.info(
            f"User {context.identity.id} created team '{team_data.name}' in "
            f"organization {organization_id}"
        )
        return CreateTeamResponse(
            team=Team(**rows[0]), message="Team created successfully"
        )
