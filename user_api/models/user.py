"""User model."""

from sqlalchemy import Column, Enum, Integer, String

from user_api.database import Base
from user_api.models.enums import Role
from user_api.models.mixins import TimestampMixin

API_KEY_LENGTH = 20


class User(Base, TimestampMixin):
    """A user record, authenticated by its API key."""

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(50), nullable=False)
    email = Column(String(100), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    phone_number = Column(String(30), nullable=False)
    api_key = Column(String(API_KEY_LENGTH), unique=True, nullable=False, index=True)
    role = Column(
        Enum(Role, name="role", values_callable=lambda roles: [r.value for r in roles]),
        nullable=False,
        default=Role.USER,
    )
    external_id = Column(String(255), nullable=True)

    @property
    def is_admin(self) -> bool:
        """Check if the user holds the administrator role."""
        return Role(self.role).is_admin()

    @property
    def is_regular_user(self) -> bool:
        """Check if the user holds the regular user role."""
        return Role(self.role).is_regular_user()
