from typing import Awaitable, Callable, Optional

from fastapi import Depends
from supabase import AsyncClient

from orgrbac.core.database import get_db
from orgrbac.domains.auth.dependencies import get_credential, get_identity_resolver
from orgrbac.domains.auth.service import IdentityResolver
from orgrbac.domains.members.service import MembershipResolver
from orgrbac.shared.exceptions import AuthorizationDeniedError

from .gate import (
    AnyPermission,
    AuthorizationContext,
    AuthorizationGate,
    Decision,
    Deny,
    MinimumRole,
    OptionalAccess,
    Requirement,
    forbid_self_target,
)
from .models import OrganizationRole, Permission

Guard = Callable[..., Awaitable[AuthorizationContext]]


def get_authorization_gate(
    identity_resolver: IdentityResolver = Depends(get_identity_resolver),
    db: AsyncClient = Depends(get_db),
) -> AuthorizationGate:
    return AuthorizationGate(identity_resolver, MembershipResolver(db))


def unwrap_decision(decision: Decision) -> AuthorizationContext:
    """Return the context of an allow, or raise the deny as an HTTP error."""
    if isinstance(decision, Deny):
        raise AuthorizationDeniedError(
            status_code=decision.status_code,
            message=decision.message,
            code=decision.code,
            extra=decision.error_fields(),
        )
    return decision.context


def _guard(requirement: Requirement) -> Guard:
    async def check_access(
        org_id: str,
        credential: Optional[str] = Depends(get_credential),
        gate: AuthorizationGate = Depends(get_authorization_gate),
    ) -> AuthorizationContext:
        """
        Validate the caller meets the requirement for the organization.

        Args:
            org_id: Organization ID from path parameter
            credential: Access token from the request
            gate: Authorization gate bound to this request's collaborators

        Returns:
            AuthorizationContext if authorized

        Raises:
            AuthorizationDeniedError: If the gate denies the request
        """
        decision = await gate.evaluate(credential, org_id, requirement)
        return unwrap_decision(decision)

    return check_access


def require_role(role: OrganizationRole) -> Guard:
    """
    Dependency factory for minimum-role authorization.

    Args:
        role: Lowest role allowed to reach the endpoint

    Returns:
        Async dependency that returns the AuthorizationContext on success
    """
    return _guard(MinimumRole(role=role))


def require_permission(*permissions: Permission) -> Guard:
    """
    Dependency factory for permission-based authorization.

    The caller needs at least one of the given permissions.

    Args:
        permissions: Permissions any one of which grants access

    Returns:
        Async dependency that returns the AuthorizationContext on success
    """
    return _guard(AnyPermission(permissions=frozenset(permissions)))


def require_member_removal() -> Guard:
    """
    Dependency for removing a member: `remove_members` and not yourself.

    The target member is read from the `user_id` path parameter.
    """
    requirement = AnyPermission(permissions=frozenset({Permission.REMOVE_MEMBERS}))

    async def check_removal(
        org_id: str,
        user_id: str,
        credential: Optional[str] = Depends(get_credential),
        gate: AuthorizationGate = Depends(get_authorization_gate),
    ) -> AuthorizationContext:
        decision = await gate.evaluate(credential, org_id, requirement)
        return unwrap_decision(forbid_self_target(decision, user_id))

    return check_removal


async def get_optional_access(
    org_id: str,
    credential: Optional[str] = Depends(get_credential),
    gate: AuthorizationGate = Depends(get_authorization_gate),
) -> OptionalAccess:
    """Resolve the caller if possible without rejecting anonymous requests."""
    return await gate.inspect(credential, org_id)
