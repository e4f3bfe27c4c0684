"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from user_api.api import users
from user_api.api.errors import register_error_handlers
from user_api.config import get_settings

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Handle application startup and shutdown events."""
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    yield


app = FastAPI(
    title="User Management API",
    description="User records behind API-key authentication and admin/user roles",
    version="0.1.0",
    lifespan=lifespan,
)

register_error_handlers(app)

# Register routers
app.include_router(users.router)


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "environment": settings.environment}
