# orgrbac/domains/auth/dependencies.py
from typing import Optional

from fastapi import Request

from orgrbac.core.settings import settings

from .service import IdentityResolver


def get_credential(request: Request) -> Optional[str]:
    """
    Extracts the caller's access token from the request.

    The Authorization header takes precedence; the session cookie is only
    consulted when no header is sent. A header that is not a well-formed
    Bearer credential yields None.
    """
    authorization = request.headers.get("Authorization")
    if authorization is not None:
        scheme, _, token = authorization.partition(" ")
        if scheme.lower() != "bearer" or not token.strip():
            return None
        return token.strip()

    return request.cookies.get(settings.SESSION_COOKIE_NAME) or None


def get_identity_resolver() -> IdentityResolver:
    return IdentityResolver()
