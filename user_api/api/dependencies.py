"""FastAPI dependencies for authentication and request bodies."""

import json
import logging
from typing import Annotated, Any

from fastapi import Depends, HTTPException, Request, Security, status
from fastapi.security import APIKeyHeader, APIKeyQuery
from sqlalchemy.orm import Session

from user_api.database import get_db
from user_api.models.user import User
from user_api.services.auth import get_user_by_api_key
from user_api.services.directory_sync import DirectorySyncService
from user_api.services.validation import BODY_FIELD, ValidationFailed

logger = logging.getLogger(__name__)

API_KEY_HEADER = "X-Api-Key"
API_KEY_FIELD = "api_key"

api_key_header = APIKeyHeader(name=API_KEY_HEADER, auto_error=False)
api_key_query = APIKeyQuery(name=API_KEY_FIELD, auto_error=False)


async def read_json_body(request: Request) -> Any:
    """Parse the request body as JSON; an empty body reads as an empty object."""
    body = await request.body()
    if not body.strip():
        return {}
    try:
        return json.loads(body)
    except ValueError:
        raise ValidationFailed.for_field(BODY_FIELD, "json_invalid")


async def _api_key_from_body(request: Request) -> str | None:
    if "json" not in request.headers.get("content-type", ""):
        return None
    try:
        body = await read_json_body(request)
    except ValidationFailed:
        return None
    api_key = body.get(API_KEY_FIELD) if isinstance(body, dict) else None
    return api_key if isinstance(api_key, str) else None


async def get_api_key(
    request: Request,
    header_key: Annotated[str | None, Security(api_key_header)],
    query_key: Annotated[str | None, Security(api_key_query)],
) -> str | None:
    """Get the candidate API key from the header, query string or JSON body."""
    return header_key or query_key or await _api_key_from_body(request)


def get_current_user(
    api_key: Annotated[str | None, Depends(get_api_key)],
    db: Annotated[Session, Depends(get_db)],
) -> User:
    """Get the user authenticated by the request's API key."""
    if not api_key:
        logger.debug("Rejected request without an API key")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthenticated.",
        )

    user = get_user_by_api_key(db, api_key)
    if user is None:
        logger.debug("Rejected request with an unknown API key")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthenticated.",
        )

    return user


def get_directory_sync_service() -> DirectorySyncService:
    """Get directory sync service instance."""
    return DirectorySyncService()
