import logging
from typing import Optional

import jwt
from fastapi.concurrency import run_in_threadpool
from jwt import PyJWKClient
from pydantic import ValidationError

from orgrbac.core.settings import settings

from .models import Identity
from .types import SupabaseJwtPayload

logger = logging.getLogger(__name__)

JWKS_URL = (
    f"{settings.SUPABASE_URL}/auth/v1/.well-known/jwks.json"
    if settings.SUPABASE_URL
    else None
)

_jwks_client = PyJWKClient(JWKS_URL) if JWKS_URL else None


class IdentityProviderError(Exception):
    """The token could not be checked because no verifier is configured."""


def decode_supabase_jwt(token: str) -> SupabaseJwtPayload:
    """
    Verifies a Supabase access token and returns its claims.

    Uses JWT_SECRET (HS256) when configured, otherwise the project's JWKS
    endpoint for asymmetric keys.

    Raises:
        jwt.PyJWTError: If the token is malformed, expired, badly signed, or
            the signing key cannot be fetched
        IdentityProviderError: If neither verification method is configured
    """
    options = {"verify_aud": settings.JWT_AUDIENCE is not None}

    if settings.JWT_SECRET:
        payload = jwt.decode(
            token,
            settings.JWT_SECRET,
            algorithms=["HS256"],
            audience=settings.JWT_AUDIENCE,
            options=options,
        )
        return SupabaseJwtPayload(**dict(payload))

    if not _jwks_client:
        raise IdentityProviderError("Supabase not configured")

    signing_key = _jwks_client.get_signing_key_from_jwt(token).key
    payload = jwt.decode(
        token,
        signing_key,
        algorithms=["RS256", "ES256"],
        audience=settings.JWT_AUDIENCE,
        options=options,
    )
    return SupabaseJwtPayload(**dict(payload))


class IdentityResolver:
    """Turns request credentials into the caller's Identity."""

    async def resolve(self, credential: Optional[str]) -> Optional[Identity]:
        """
        Resolve a bearer token or session cookie value to an Identity.

        Every failure (no credential, malformed, expired or badly signed
        token, provider outage) yields None. The cause is only logged.

        Args:
            credential: Raw token taken from the request, if any

        Returns:
            Identity of the caller, or None if unauthenticated
        """
        if not credential:
            logger.debug("No credential presented")
            return None

        try:
            payload = await run_in_threadpool(decode_supabase_jwt, credential)
        except jwt.PyJWKClientError as e:
            logger.warning(f"Signing key lookup failed: {e}")
            return None
        except IdentityProviderError as e:
            logger.warning(f"Cannot verify tokens: {e}")
            return None
        except jwt.ExpiredSignatureError:
            logger.info("Rejected expired token")
            return None
        except jwt.PyJWTError as e:
            logger.info(f"Rejected invalid token: {e}")
            return None
        except ValidationError as e:
            logger.info(f"Rejected token with malformed claims: {e}")
            return None

        if not payload.sub:
            logger.info("Rejected token without subject claim")
            return None

        return Identity(id=payload.sub, email=payload.email)
