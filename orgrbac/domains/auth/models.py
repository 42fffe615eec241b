# orgrbac/domains/auth/models.py
from typing import Optional

from pydantic import BaseModel, ConfigDict


class Identity(BaseModel):
    """The verified caller of a request."""

    model_config = ConfigDict(frozen=True)

    id: str
    email: Optional[str] = None
