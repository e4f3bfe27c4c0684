"""Enums for model fields."""

from enum import Enum


class Role(str, Enum):
    """Roles a user can hold."""

    ADMIN = "admin"
    USER = "user"

    def is_admin(self) -> bool:
        """Check if this role is the administrator role."""
        return self == Role.ADMIN

    def is_regular_user(self) -> bool:
        """Check if this role is the regular user role."""
        return self == Role.USER
