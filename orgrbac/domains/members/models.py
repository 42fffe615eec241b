# orgrbac/domains/members/models.py
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, field_validator

from orgrbac.domains.organizations.models import Organization
from orgrbac.shared.permissions.models import OrganizationRole


class Membership(BaseModel):
    """A user's role in one organization, with the organization attached."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: str
    user_id: str
    organization_id: str
    role: OrganizationRole
    organization: Optional[Organization] = None


class MemberResponse(BaseModel):
    id: str
    user_id: str
    email: str
    role: str
    created_at: Optional[str]

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "MemberResponse":
        user = record.get("users") or {}
        return cls(
            id=record["user_id"],
            user_id=record["user_id"],
            email=user.get("email") or "Unknown",
            role=record["role"],
            created_at=record.get("created_at"),
        )


class MemberListResponse(BaseModel):
    members: List[MemberResponse]
    count: int


class MemberMutationResponse(BaseModel):
    member: MemberResponse
    message: str


class MemberRemovalResponse(BaseModel):
    user_id: str
    message: str


class InviteMemberRequest(BaseModel):
    email: str
    role: OrganizationRole
    message: Optional[str] = None

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str) -> str:
        local, _, domain = v.strip().partition("@")
        if not local or "." not in domain or " " in v.strip():
            raise ValueError("Invalid email format")
        return v.strip().lower()


class UpdateMemberRoleRequest(BaseModel):
    role: OrganizationRole
