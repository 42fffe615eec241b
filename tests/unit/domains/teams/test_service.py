"""
Tests for team services in orgrbac/domains/teams/service.py
"""

import pytest
from pydantic import ValidationError

from orgrbac.domains.teams.models import TeamCreate
from orgrbac.domains.teams.service import TeamService
from orgrbac.shared.exceptions import DatabaseError
from orgrbac.shared.permissions.gate import AuthorizationContext
from tests.fixtures.organization_fixtures import TEST_ORG_ID, TEST_USER_ID
from tests.fixtures.supabase_fixtures import FakeSupabase


def team_row(team_id: str = "team-1", name: str = "Platform") -> dict:
    return {
        "id": team_id,
        "organization_id": TEST_ORG_ID,
        "name": name,
        "description": None,
        "created_at": "2024-04-01T00:00:00+00:00",
        "updated_at": "2024-04-01T00:00:00+00:00",
    }


class TestTeamCreate:
    def test_name_trimmed(self):
        assert TeamCreate(name="  Platform  ").name == "Platform"

    def test_blank_name_rejected(self):
        with pytest.raises(ValidationError, match="Team name is required"):
            TeamCreate(name="   ")


class TestTeamService:
    @pytest.mark.asyncio
    async def test_list_teams(
        self, fake_db: FakeSupabase, viewer_context: AuthorizationContext
    ):
        fake_db.queue("teams", data=[team_row("team-2", "Growth"), team_row()])

        result = await TeamService(fake_db).list_teams(viewer_context)

        assert [team.name for team in result.teams] == ["Growth", "Platform"]
        assert result.organization.id == TEST_ORG_ID
        assert result.user.id == TEST_USER_ID
        assert result.user.role == "viewer"
        (query,) = fake_db.queries_for("teams")
        assert query.called("eq") == [(("organization_id", TEST_ORG_ID), {})]
        assert query.called("order") == [(("created_at",), {"desc": True})]

    @pytest.mark.asyncio
    async def test_create_team(
        self, fake_db: FakeSupabase, admin_context: AuthorizationContext
    ):
        fake_db.queue("teams", data=[team_row()])

        result = await TeamService(fake_db).create_team(
            TeamCreate(name="Platform", description="Core infra"), admin_context
        )

        assert result.team.id == "team-1"
        assert result.message == "Team created successfully"
        (query,) = fake_db.queries_for("teams")
        ((inserted,), _) = query.called("insert")[0]
        assert inserted["organization_id"] == TEST_ORG_ID
        assert inserted["name"] == "Platform"
        assert inserted["description"] == "Core infra"
        assert inserted["created_at"] == inserted["updated_at"]

    @pytest.mark.asyncio
    async def test_create_team_without_returned_row(
        self, fake_db: FakeSupabase, admin_context: AuthorizationContext
    ):
        fake_db.queue("teams", data=[])

        with pytest.raises(DatabaseError):
            await TeamService(fake_db).create_team(TeamCreate(name="Platform"), admin_context)
