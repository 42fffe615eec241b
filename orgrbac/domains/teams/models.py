# orgrbac/domains/teams/models.py
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, field_validator

from orgrbac.domains.organizations.models import Organization


class Team(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str
    organization_id: str
    name: str
    description: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class TeamCreate(BaseModel):
    name: str
    description: Optional[str] = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Team name is required")
        return v.strip()


class TeamCaller(BaseModel):
    id: str
    role: str


class TeamListResponse(BaseModel):
    teams: List[Team]
    organization: Organization
    user: TeamCaller


class CreateTeamResponse(BaseModel):
    team: Team
    message: str
