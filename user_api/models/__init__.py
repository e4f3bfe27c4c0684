"""SQLAlchemy models."""

from user_api.models.enums import Role
from user_api.models.user import User

__all__ = [
    "Role",
    "User",
]
