"""Pydantic schemas for request/response validation."""

from user_api.schemas.user import UserAdminResponse, UserCreate, UserResponse, UserUpdate

__all__ = [
    "UserCreate",
    "UserUpdate",
    "UserResponse",
    "UserAdminResponse",
]
