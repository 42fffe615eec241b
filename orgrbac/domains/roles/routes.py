# orgrbac/domains/roles/routes.py
from typing import List

from fastapi import APIRouter
from pydantic import BaseModel

from orgrbac.shared.permissions import (
    PERMISSION_DESCRIPTIONS,
    ROLE_DESCRIPTIONS,
    OrganizationRole,
    permissions_of,
    rank_of,
)

router = APIRouter(prefix="/roles", tags=["Roles"])


class PermissionInfo(BaseModel):
    name: str
    description: str


class RoleInfo(BaseModel):
    name: str
    rank: int
    description: str
    permissions: List[PermissionInfo]


@router.get("", response_model=List[RoleInfo], operation_id="getRoles")
async def get_roles() -> List[RoleInfo]:
    """Role catalogue for UI display, lowest privilege first."""
    roles = sorted(OrganizationRole, key=rank_of)
    return [
        RoleInfo(
            name=role.value,
            rank=rank_of(role),
            description=ROLE_DESCRIPTIONS[role],
            permissions=[
                PermissionInfo(
                    name=permission.value,
                    description=PERMISSION_DESCRIPTIONS[permission],
                )
                for permission in sorted(
                    permissions_of(role), key=lambda p: p.value
                )
            ],
        )
        for role in roles
    ]
