"""
Tests for authentication dependencies in orgrbac/domains/auth/dependencies.py
"""

from typing import Dict, Optional

import pytest
from starlette.requests import Request

from orgrbac.domains.auth.dependencies import get_credential, get_identity_resolver
from orgrbac.domains.auth.service import IdentityResolver


def make_request(headers: Optional[Dict[str, str]] = None) -> Request:
    raw_headers = [
        (name.lower().encode(), value.encode()) for name, value in (headers or {}).items()
    ]
    return Request({"type": "http", "method": "GET", "path": "/", "headers": raw_headers})


class TestGetCredential:
    def test_bearer_token(self):
        request = make_request({"Authorization": "Bearer abc.def.ghi"})
        assert get_credential(request) == "abc.def.ghi"

    def test_scheme_is_case_insensitive(self):
        request = make_request({"Authorization": "bearer abc.def.ghi"})
        assert get_credential(request) == "abc.def.ghi"

    @pytest.mark.parametrize("value", ["Basic dXNlcjpwYXNz", "Bearer", "Bearer   ", "abc"])
    def test_malformed_header(self, value: str):
        assert get_credential(make_request({"Authorization": value})) is None

    def test_session_cookie(self):
        request = make_request({"Cookie": "sb-access-token=cookie-token"})
        assert get_credential(request) == "cookie-token"

    def test_header_takes_precedence_over_cookie(self):
        request = make_request(
            {"Authorization": "Bearer header-token", "Cookie": "sb-access-token=cookie-token"}
        )
        assert get_credential(request) == "header-token"

    def test_malformed_header_does_not_fall_back_to_cookie(self):
        request = make_request(
            {"Authorization": "Token x", "Cookie": "sb-access-token=cookie-token"}
        )
        assert get_credential(request) is None

    def test_no_credential(self):
        assert get_credential(make_request()) is None

    def test_other_cookies_ignored(self):
        assert get_credential(make_request({"Cookie": "theme=dark"})) is None


def test_get_identity_resolver():
    assert isinstance(get_identity_resolver(), IdentityResolver)
