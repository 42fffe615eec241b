"""
Authorization gate.

Every protected operation goes through `AuthorizationGate.evaluate`, which
resolves the caller, resolves their membership of the target organization,
and checks it against a requirement. The result is a decision value, never an
exception: `Allow` carries the resolved context for the handler, `Deny`
carries the reason and the data needed to render an error response.

Nothing is cached between calls. A membership change in the store is seen by
the very next evaluation.
"""

import logging
from abc import ABC, abstractmethod
from enum import Enum
from types import MappingProxyType
from typing import (
    TYPE_CHECKING,
    Any,
    Dict,
    FrozenSet,
    Literal,
    Mapping,
    Optional,
    Union,
)

from fastapi import status
from pydantic import BaseModel, ConfigDict, field_validator

from orgrbac.domains.auth.models import Identity
from orgrbac.domains.members.models import Membership
from orgrbac.domains.organizations.models import Organization
from orgrbac.shared.exceptions import MembershipLookupError

from .models import OrganizationRole, Permission
from .services import has_any_permission, meets_role_level

if TYPE_CHECKING:
    from orgrbac.domains.auth.service import IdentityResolver
    from orgrbac.domains.members.service import MembershipResolver

logger = logging.getLogger(__name__)


class Requirement(BaseModel, ABC):
    """What a caller's role must satisfy for a request to proceed."""

    model_config = ConfigDict(frozen=True)

    @abstractmethod
    def is_satisfied_by(self, role: OrganizationRole) -> bool: ...

    @abstractmethod
    def describe(self) -> str: ...

    @abstractmethod
    def to_error_fields(self) -> Dict[str, Any]: ...


class MinimumRole(Requirement):
    """Caller's role must rank at or above `role`."""

    role: OrganizationRole

    def is_satisfied_by(self, role: OrganizationRole) -> bool:
        return meets_role_level(role, self.role)

    def describe(self) -> str:
        return f"Requires {self.role.value} role or higher"

    def to_error_fields(self) -> Dict[str, Any]:
        return {"requiredRole": self.role.value}


class AnyPermission(Requirement):
    """Caller's role must hold at least one of `permissions`."""

    permissions: FrozenSet[Permission]

    @field_validator("permissions")
    @classmethod
    def validate_not_empty(cls, v: FrozenSet[Permission]) -> FrozenSet[Permission]:
        if not v:
            raise ValueError("At least one permission is required")
        return v

    def is_satisfied_by(self, role: OrganizationRole) -> bool:
        return has_any_permission(role, self.permissions)

    def _names(self) -> list[str]:
        return sorted(permission.value for permission in self.permissions)

    def describe(self) -> str:
        names = self._names()
        if len(names) == 1:
            return f"Requires permission: {names[0]}"
        return f"Requires one of these permissions: {', '.join(names)}"

    def to_error_fields(self) -> Dict[str, Any]:
        return {"requiredPermissions": self._names()}


class DenyReason(str, Enum):
    UNAUTHENTICATED = "unauthenticated"
    BAD_REQUEST = "bad_request"
    NOT_A_MEMBER = "not_a_member"
    INSUFFICIENT_PRIVILEGE = "insufficient_privilege"
    RESOLVER_FAILURE = "resolver_failure"
    CANNOT_REMOVE_SELF = "cannot_remove_self"


# reason -> (HTTP status, error code)
DENY_RESPONSES: Mapping[DenyReason, tuple[int, str]] = MappingProxyType(
    {
        DenyReason.UNAUTHENTICATED: (status.HTTP_401_UNAUTHORIZED, "UNAUTHORIZED"),
        DenyReason.BAD_REQUEST: (status.HTTP_400_BAD_REQUEST, "BAD_REQUEST"),
        DenyReason.NOT_A_MEMBER: (status.HTTP_403_FORBIDDEN, "NOT_MEMBER"),
        DenyReason.INSUFFICIENT_PRIVILEGE: (
            status.HTTP_403_FORBIDDEN,
            "PERMISSION_DENIED",
        ),
        DenyReason.RESOLVER_FAILURE: (
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "SERVICE_ERROR",
        ),
        DenyReason.CANNOT_REMOVE_SELF: (status.HTTP_400_BAD_REQUEST, "CANNOT_REMOVE_SELF"),
    }
)


class AuthorizationContext(BaseModel):
    """Who is calling and in which organization, handed to allowed handlers."""

    model_config = ConfigDict(frozen=True)

    identity: Identity
    membership: Membership
    organization: Organization


class Allow(BaseModel):
    model_config = ConfigDict(frozen=True)

    allowed: Literal[True] = True
    context: AuthorizationContext


class Deny(BaseModel):
    model_config = ConfigDict(frozen=True)

    allowed: Literal[False] = False
    reason: DenyReason
    message: str
    user_role: Optional[OrganizationRole] = None
    requirement: Optional[Union[MinimumRole, AnyPermission]] = None

    @property
    def status_code(self) -> int:
        return DENY_RESPONSES[self.reason][0]

    @property
    def code(self) -> str:
        return DENY_RESPONSES[self.reason][1]

    def error_fields(self) -> Dict[str, Any]:
        """Extra fields for the error body; only set for privilege failures."""
        fields: Dict[str, Any] = {}
        if self.user_role is not None:
            fields["userRole"] = self.user_role.value
        if self.requirement is not None:
            fields.update(self.requirement.to_error_fields())
        return fields


Decision = Union[Allow, Deny]


class OptionalAccess(BaseModel):
    """Best-effort view of the caller; either part may be missing."""

    model_config = ConfigDict(frozen=True)

    identity: Optional[Identity] = None
    membership: Optional[Membership] = None


class AuthorizationGate:
    def __init__(
        self,
        identity_resolver: "IdentityResolver",
        membership_resolver: "MembershipResolver",
    ):
        self.identity_resolver = identity_resolver
        self.membership_resolver = membership_resolver

    async def evaluate(
        self,
        credential: Optional[str],
        organization_id: Optional[str],
        requirement: Requirement,
    ) -> Decision:
        """
        Decide whether the caller may act on an organization.

        Args:
            credential: Raw access token from the request, if any
            organization_id: Organization the request targets
            requirement: Minimum role or permission set to check

        Returns:
            Allow with the resolved context, or Deny with the reason
        """
        identity = await self.identity_resolver.resolve(credential)
        if identity is None:
            return Deny(
                reason=DenyReason.UNAUTHENTICATED,
                message="Unauthorized - Please log in",
            )

        if not organization_id or not organization_id.strip():
            return Deny(
                reason=DenyReason.BAD_REQUEST, message="Organization ID required"
            )

        try:
            membership = await self.membership_resolver.find_membership(
                identity.id, organization_id
            )
        except MembershipLookupError:
            # Already logged with full context by the resolver
            return Deny(
                reason=DenyReason.RESOLVER_FAILURE,
                message="Unable to verify organization membership",
            )

        if membership is None or membership.organization is None:
            logger.info(
                f"User {identity.id} denied: not a member of organization "
                f"{organization_id}"
            )
            return Deny(
                reason=DenyReason.NOT_A_MEMBER,
                message="Not a member of this organization",
            )

        if not requirement.is_satisfied_by(membership.role):
            logger.info(
                f"User {identity.id} denied in organization {organization_id}: "
                f"role {membership.role.value}, {requirement.describe()}"
            )
            return Deny(
                reason=DenyReason.INSUFFICIENT_PRIVILEGE,
                message=requirement.describe(),
                user_role=membership.role,
                requirement=requirement,
            )

        return Allow(
            context=AuthorizationContext(
                identity=identity,
                membership=membership,
                organization=membership.organization,
            )
        )

    async def inspect(
        self, credential: Optional[str], organization_id: Optional[str]
    ) -> OptionalAccess:
        """
        Resolve whatever is known about the caller without enforcing anything.

        Used by routes that serve anonymous callers too. A failed membership
        lookup is treated as no membership.
        """
        identity = await self.identity_resolver.resolve(credential)
        if identity is None:
            return OptionalAccess()

        if not organization_id or not organization_id.strip():
            return OptionalAccess(identity=identity)

        try:
            membership = await self.membership_resolver.find_membership(
                identity.id, organization_id
            )
        except MembershipLookupError:
            membership = None

        return OptionalAccess(identity=identity, membership=membership)


def forbid_self_target(decision: Decision, target_user_id: str) -> Decision:
    """
    Deny an allowed decision whose caller is also the target member.

    Layered on top of the gate for member removal: an owner or admin may not
    remove themselves, whatever their permissions.
    """
    if isinstance(decision, Allow) and decision.context.identity.id == target_user_id:
        logger.info(f"User {target_user_id} denied: attempted to remove themselves")
        return Deny(
            reason=DenyReason.CANNOT_REMOVE_SELF,
            message="Cannot remove yourself from the organization",
        )
    return decision
