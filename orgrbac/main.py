import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from orgrbac.core.database import database
from orgrbac.core.logging import configure_logging
from orgrbac.core.middleware import RequestLoggingMiddleware
from orgrbac.core.settings import settings
from orgrbac.domains.members.routes import router as members_router
from orgrbac.domains.organizations.routes import router as organizations_router
from orgrbac.domains.roles.routes import router as roles_router
from orgrbac.domains.teams.routes import router as teams_router
from orgrbac.shared.exceptions import (
    ApiError,
    api_error_handler,
    unhandled_error_handler,
    validation_error_handler,
)

configure_logging(settings)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    # Startup
    missing = settings.missing_required()
    if missing:
        message = f"Missing required environment variables: {', '.join(missing)}"
        if settings.is_production:
            raise RuntimeError(message)
        logger.warning(f"{message}; organization routes will fail until set")
    else:
        await database.connect()
    yield
    # Shutdown
    await database.disconnect()


app = FastAPI(
    title="Organization RBAC API",
    description="Organizations, teams and members behind role-based access control",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(RequestLoggingMiddleware)

app.add_exception_handler(ApiError, api_error_handler)
app.add_exception_handler(RequestValidationError, validation_error_handler)
app.add_exception_handler(Exception, unhandled_error_handler)

# Include routers
app.include_router(organizations_router, prefix="/api/v1")
app.include_router(members_router, prefix="/api/v1")
app.include_router(teams_router, prefix="/api/v1")
app.include_router(roles_router, prefix="/api/v1")


@app.get("/")
async def root() -> dict[str, str]:
    return {"message": "Organization RBAC API is running"}


@app.get("/health")
async def health_check() -> dict[str, str]:
    return {"status": "healthy"}
