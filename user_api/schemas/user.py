"""User schemas."""

from datetime import datetime
from typing import Annotated, Any

from email_validator import EmailNotValidError, validate_email
from pydantic import (
    AfterValidator,
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    StringConstraints,
    ValidationInfo,
    field_validator,
)
from pydantic_core import PydanticCustomError

from user_api.models.enums import Role
from user_api.services import policy


def _required(value: Any) -> Any:
    if value is None or (isinstance(value, str) and not value.strip()):
        raise PydanticCustomError("missing", "Field required")
    return value


def _blank_to_none(value: Any) -> Any:
    if isinstance(value, str) and not value.strip():
        return None
    return value


def _email(value: str) -> str:
    try:
        validate_email(value, check_deliverability=False)
    except EmailNotValidError as e:
        raise PydanticCustomError("email", "Invalid email address: {reason}", {"reason": str(e)})
    return value


def _alpha_num(value: str) -> str:
    if not (value.isascii() and value.isalnum()):
        raise PydanticCustomError("alpha_num", "Only ASCII letters and digits are allowed")
    return value


def _role(value: str) -> str:
    if value not in {role.value for role in Role}:
        raise PydanticCustomError(
            "in", "Must be one of: {allowed}", {"allowed": ", ".join(r.value for r in Role)}
        )
    return value


# Rules run in order: presence, type, length, then format.
Name = Annotated[str, StringConstraints(max_length=50)]
Email = Annotated[str, StringConstraints(max_length=100), AfterValidator(_email)]
Password = Annotated[str, StringConstraints(max_length=20), AfterValidator(_alpha_num)]
PhoneNumber = Annotated[str, StringConstraints(max_length=30)]
RoleName = Annotated[str, AfterValidator(_role)]

Required = BeforeValidator(_required)
Sometimes = BeforeValidator(_blank_to_none)


class UserCreate(BaseModel):
    """Create a new user."""

    name: Annotated[Name, Required]
    email: Annotated[Email, Required]
    password: Annotated[Password, Required]
    phone_number: Annotated[PhoneNumber, Required]
    role: Annotated[RoleName, Required]


class UserUpdate(BaseModel):
    """Partially update a user.

    Only the fields present in the payload are validated and applied. Setting
    ``role`` requires the acting user, passed as ``actor`` in the validation
    context, to be allowed to change roles.
    """

    name: Annotated[Name, Sometimes] = Field(None)
    email: Annotated[Email, Sometimes] = Field(None)
    phone_number: Annotated[PhoneNumber, Sometimes] = Field(None)
    role: Annotated[RoleName, Sometimes] = Field(None)

    @field_validator("role", mode="before")
    @classmethod
    def check_role_permission(cls, value: Any, info: ValidationInfo) -> Any:
        """Reject any role change by an actor who may not set roles."""
        actor = (info.context or {}).get("actor")
        if actor is None or not policy.can_set_role(actor):
            raise PydanticCustomError("not_allowed", "Not allowed")
        return value


class UserResponse(BaseModel):
    """User information visible to any permitted viewer."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str
    phone_number: str
    created_at: datetime
    updated_at: datetime


class UserAdminResponse(UserResponse):
    """User information including the privileged fields."""

    api_key: str
    role: Role
