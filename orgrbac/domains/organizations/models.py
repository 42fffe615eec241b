# orgrbac/domains/organizations/models.py
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

Plan = Literal["free", "pro", "enterprise"]


class Organization(BaseModel):
    """Organization row as stored in the `organizations` table."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: str
    name: str
    slug: str
    plan: str = "free"
    settings: Dict[str, Any] = Field(default_factory=dict)
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @field_validator("settings", mode="before")
    @classmethod
    def default_settings(cls, v: Optional[Dict[str, Any]]) -> Dict[str, Any]:
        return v or {}


class OrganizationUpdate(BaseModel):
    name: Optional[str] = Field(
        None, min_length=1, description="Organization name is required"
    )
    plan: Optional[Plan] = None
    settings: Optional[Dict[str, Any]] = None

    @field_validator("name", "plan", "settings")
    @classmethod
    def reject_null(cls, v: Any) -> Any:
        # Omitted fields stay unchanged; null is never a valid value
        if v is None:
            raise ValueError("Value cannot be null")
        return v


class OrganizationResponse(BaseModel):
    organization: Organization
    message: Optional[str] = None


class AccessSummary(BaseModel):
    authenticated: bool
    user_id: Optional[str] = None
    is_member: bool = False
    role: Optional[str] = None
    permissions: List[str] = Field(default_factory=list)
