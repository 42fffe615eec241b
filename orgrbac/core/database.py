# orgrbac/core/database.py
import logging
from typing import Any

import httpx
from postgrest.exceptions import APIError
from supabase import AsyncClient, acreate_client

from orgrbac.core.settings import settings
from orgrbac.shared.exceptions import DatabaseError

logger = logging.getLogger(__name__)


class Database:
    """Holds the service-role Supabase client for the lifetime of the app."""

    def __init__(self) -> None:
        self.client: AsyncClient | None = None

    def is_connected(self) -> bool:
        return self.client is not None

    async def connect(self) -> None:
        if not settings.SUPABASE_URL or not settings.SUPABASE_SERVICE_ROLE_KEY:
            raise ValueError("Supabase configuration is required for the database")

        self.client = await acreate_client(
            settings.SUPABASE_URL, settings.SUPABASE_SERVICE_ROLE_KEY
        )
        logger.info("Connected to Supabase")

    async def disconnect(self) -> None:
        self.client = None


# Global database instance
database = Database()


async def run_query(query: Any, action: str) -> Any:
    """
    Execute a PostgREST query built on the Supabase client.

    Args:
        query: Request builder returned by `client.table(...)...`
        action: What the query does, for the log line on failure

    Returns:
        The API response (rows in `.data`, row count in `.count`)

    Raises:
        DatabaseError: If the request fails or PostgREST rejects it
    """
    try:
        return await query.execute()
    except (APIError, httpx.HTTPError) as e:
        logger.error(f"Failed to {action}: {e}")
        raise DatabaseError() from e


async def get_db() -> AsyncClient:
    """Database dependency for FastAPI dependency injection."""
    if database.client is None:
        logger.error("Database requested before the Supabase client was connected")
        raise DatabaseError()
    return database.client
