"""User API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session

from user_api.api.dependencies import (
    get_current_user,
    get_directory_sync_service,
    read_json_body,
)
from user_api.database import get_db
from user_api.models.user import User
from user_api.schemas.user import UserCreate, UserUpdate
from user_api.services import users as user_service
from user_api.services.directory_sync import DirectorySyncService
from user_api.services.policy import Action, authorize
from user_api.services.validation import validate_payload

router = APIRouter(prefix="/users", tags=["users"])


@router.get("")
async def list_users(
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
):
    """List every user (admins only)."""
    authorize(Action.LIST, current_user)

    users = user_service.list_users(db)
    return {"data": [user_service.serialize_user(user, current_user) for user in users]}


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_user(
    request: Request,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
    directory: Annotated[DirectorySyncService, Depends(get_directory_sync_service)],
):
    """Create a user (admins only) and push it to the user directory."""
    authorize(Action.CREATE, current_user)

    payload = await read_json_body(request)
    data = validate_payload(UserCreate, payload, current_user)
    user = user_service.create_user(db, data)

    # Best effort: the user exists whether or not the directory accepts it
    await directory.sync_user(db, user)

    return {"data": user_service.serialize_user(user, current_user)}


@router.get("/{user_id}")
async def get_user(
    user_id: int,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
):
    """Get a user (admins, or the user themself)."""
    user = user_service.get_user(db, user_id)
    authorize(Action.VIEW, current_user, user)

    return {"data": user_service.serialize_user(user, current_user)}


@router.put("/{user_id}")
async def update_user(
    user_id: int,
    request: Request,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
):
    """Partially update a user (admins, or the user themself without role changes)."""
    user = user_service.get_user(db, user_id)
    authorize(Action.UPDATE, current_user, user)

    payload = await read_json_body(request)
    data = validate_payload(UserUpdate, payload, current_user)
    user = user_service.update_user(db, user, data)

    return {"data": user_service.serialize_user(user, current_user)}
