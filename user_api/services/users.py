"""User record store operations and response shaping."""

import logging

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from user_api.models.enums import Role
from user_api.models.user import User
from user_api.schemas.user import UserAdminResponse, UserCreate, UserResponse, UserUpdate
from user_api.services import policy
from user_api.services.auth import generate_api_key, get_password_hash
from user_api.services.validation import ValidationFailed

logger = logging.getLogger(__name__)

# Attempts at drawing an API key that is not already taken
MAX_API_KEY_ATTEMPTS = 5


def get_user(db: Session, user_id: int) -> User:
    """Get a user by ID or raise 404."""
    user = db.query(User).filter(User.id == user_id).first()
    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found.")
    return user


def list_users(db: Session) -> list[User]:
    """Get all users ordered by ID."""
    return db.query(User).order_by(User.id).all()


def get_user_by_email(db: Session, email: str) -> User | None:
    """Get a user by email."""
    return db.query(User).filter(User.email == email).first()


def ensure_email_available(db: Session, email: str, exclude_user_id: int | None = None) -> None:
    """Raise a validation failure if another user already has this email."""
    existing = get_user_by_email(db, email)
    if existing is not None and existing.id != exclude_user_id:
        raise ValidationFailed.for_field("email", "unique")


def new_api_key(db: Session) -> str:
    """Generate an API key no existing user holds."""
    for _ in range(MAX_API_KEY_ATTEMPTS):
        api_key = generate_api_key()
        if db.query(User.id).filter(User.api_key == api_key).first() is None:
            return api_key
    raise RuntimeError("Could not generate a unique API key")


def create_user(db: Session, data: UserCreate) -> User:
    """Create a new user with a freshly generated API key."""
    ensure_email_available(db, data.email)

    user = User(
        name=data.name,
        email=data.email,
        password_hash=get_password_hash(data.password),
        phone_number=data.phone_number,
        api_key=new_api_key(db),
        role=Role(data.role),
    )
    db.add(user)
    db.commit()
    db.refresh(user)

    logger.info(f"Created user {user.id} with role '{user.role.value}'")
    return user


def update_user(db: Session, user: User, data: UserUpdate) -> User:
    """Apply the fields present in a partial update."""
    changes = data.model_dump(exclude_unset=True)
    if not changes:
        return user

    if "email" in changes:
        ensure_email_available(db, changes["email"], exclude_user_id=user.id)
    if "role" in changes:
        changes["role"] = Role(changes["role"])

    for field, value in changes.items():
        setattr(user, field, value)

    db.commit()
    db.refresh(user)

    logger.info(f"Updated user {user.id}: {', '.join(sorted(changes))}")
    return user


def serialize_user(user: User, viewer: User) -> UserResponse:
    """Build the response for a user as seen by the viewer.

    api_key and role are only included for viewers allowed to see them.
    """
    if policy.can_see_privileged_fields(viewer):
        return UserAdminResponse.model_validate(user)
    return UserResponse.model_validate(user)
