"""
Tests for team routes in orgrbac/domains/teams/routes.py
"""

from fastapi.testclient import TestClient

from tests.fixtures.organization_fixtures import TEST_ORG_ID
from tests.fixtures.supabase_fixtures import FakeSupabase
from tests.helpers.route_testing import RouteTestHelper

TEAMS_URL = f"/api/v1/orgs/{TEST_ORG_ID}/teams"


class TestTeamRoutes:
    def test_viewer_lists_teams(self, client: TestClient, fake_db: FakeSupabase):
        headers = RouteTestHelper.as_member(fake_db, role="viewer")
        fake_db.queue("teams", data=[])

        response = client.get(TEAMS_URL, headers=headers)

        assert response.status_code == 200
        assert response.json()["teams"] == []
        assert response.json()["user"]["role"] == "viewer"

    def test_viewer_cannot_create_team(self, client: TestClient, fake_db: FakeSupabase):
        headers = RouteTestHelper.as_member(fake_db, role="viewer")

        response = client.post(TEAMS_URL, json={"name": "Platform"}, headers=headers)

        error = RouteTestHelper.assert_error(
            response, 403, "PERMISSION_DENIED", "Requires permission: manage_team"
        )
        assert error["userRole"] == "viewer"
        assert error["requiredPermissions"] == ["manage_team"]
        assert fake_db.queries_for("teams") == []

    def test_admin_creates_team(self, client: TestClient, fake_db: FakeSupabase):
        headers = RouteTestHelper.as_member(fake_db, role="admin")
        fake_db.queue(
            "teams",
            data=[{"id": "team-1", "organization_id": TEST_ORG_ID, "name": "Platform"}],
        )

        response = client.post(TEAMS_URL, json={"name": "Platform"}, headers=headers)

        assert response.status_code == 201
        assert response.json()["team"]["name"] == "Platform"

    def test_blank_name_is_400(self, client: TestClient, fake_db: FakeSupabase):
        headers = RouteTestHelper.as_member(fake_db, role="admin")

        response = client.post(TEAMS_URL, json={"name": "  "}, headers=headers)

        error = RouteTestHelper.assert_error(response, 400, "VALIDATION_ERROR")
        assert "Team name is required" in error["message"]
