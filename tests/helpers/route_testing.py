"""
Helper utilities for standardized route testing across domains.
"""

from typing import Any, Dict, Optional

from httpx import Response

from tests.fixtures.auth_fixtures import AuthTestData
from tests.fixtures.organization_fixtures import (
    TEST_ORG_ID,
    TEST_USER_ID,
    membership_row,
)
from tests.fixtures.supabase_fixtures import FakeSupabase


class RouteTestHelper:
    """
    Helper class for standardized route testing patterns.

    Routes run through the real authorization gate: the caller is authenticated
    with a signed token and their membership is served by the fake database.
    """

    @staticmethod
    def as_member(
        fake_db: FakeSupabase,
        role: str = "admin",
        user_id: str = TEST_USER_ID,
        organization_id: str = TEST_ORG_ID,
    ) -> Dict[str, str]:
        """
        Queue the caller's membership lookup and return their auth headers.

        Args:
            fake_db: Fake Supabase client used by the app
            role: Role the caller holds in the organization
            user_id: Caller's user ID
            organization_id: Organization the membership belongs to

        Returns:
            Authorization headers for the caller
        """
        fake_db.queue(
            "organization_members",
            data=[membership_row(role=role, user_id=user_id, organization_id=organization_id)],
        )
        return AuthTestData.headers(user_id)

    @staticmethod
    def as_non_member(
        fake_db: FakeSupabase, user_id: str = TEST_USER_ID
    ) -> Dict[str, str]:
        """Queue an empty membership lookup and return the caller's headers."""
        fake_db.queue("organization_members", data=[])
        return AuthTestData.headers(user_id)

    @staticmethod
    def assert_error(
        response: Response,
        status_code: int,
        code: str,
        message: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Assert the response is an API error with the given status and code.

        Returns:
            The `error` object of the body, for further assertions
        """
        assert response.status_code == status_code, response.text
        error = response.json()["error"]
        assert error["code"] == code
        assert error["statusCode"] == status_code
        if message is not None:
            assert error["message"] == message
        return error
