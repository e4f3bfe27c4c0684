"""Payload validation with field-scoped error messages."""

from collections.abc import Iterable, Mapping
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from user_api.models.user import User

SchemaT = TypeVar("SchemaT", bound=BaseModel)

# Message templates keyed by pydantic error type. {attribute} is the
# human-readable field name; other placeholders come from the error context.
MESSAGES: dict[str, str] = {
    "missing": "The {attribute} field is required.",
    "string_type": "The {attribute} field must be a string.",
    "string_too_long": "The {attribute} field must not be greater than {max_length} characters.",
    "email": "The {attribute} field must be a valid email address.",
    "alpha_num": "The {attribute} field must only contain letters and numbers.",
    "in": "The selected {attribute} is invalid.",
    "not_allowed": "Not allowed",
    "unique": "The {attribute} has already been taken.",
    "model_type": "The request body must be a JSON object.",
    "json_invalid": "The request body must be valid JSON.",
}

BODY_FIELD = "body"


class ValidationFailed(Exception):
    """Raised when a payload breaks one or more field rules."""

    def __init__(self, errors: dict[str, list[str]]) -> None:
        self.errors = errors
        super().__init__(self.message)

    @property
    def message(self) -> str:
        """Summary message: the first error, plus a count of the rest."""
        messages = [message for field_messages in self.errors.values() for message in field_messages]
        if not messages:
            return "The given data was invalid."
        summary = messages[0]
        remaining = len(messages) - 1
        if remaining:
            summary += f" (and {remaining} more error{'s' if remaining > 1 else ''})"
        return summary

    @classmethod
    def for_field(cls, field: str, error_type: str, **context: Any) -> "ValidationFailed":
        """Build a failure for a single field from a message template."""
        return cls({field: [render_message(error_type, field, context)]})


def attribute_name(field: str) -> str:
    """Human-readable attribute name, e.g. ``phone_number`` -> ``phone number``."""
    return field.replace("_", " ")


def render_message(error_type: str, field: str, context: Mapping[str, Any] | None = None) -> str:
    """Render the message for an error type on a field."""
    template = MESSAGES.get(error_type)
    if template is None:
        return f"The {attribute_name(field)} field is invalid."
    return template.format(attribute=attribute_name(field), **(context or {}))


def collect_errors(errors: Iterable[Mapping[str, Any]], skip: int = 0) -> dict[str, list[str]]:
    """Group pydantic error dicts into field -> messages.

    ``skip`` drops leading location parts, e.g. ``("body",)`` for request
    validation errors raised by FastAPI. Only the first error per field is kept.
    """
    grouped: dict[str, list[str]] = {}
    for error in errors:
        loc = tuple(error.get("loc", ()))[skip:]
        field = str(loc[0]) if loc else BODY_FIELD
        if field in grouped:
            continue
        if error.get("type") in MESSAGES:
            message = render_message(error["type"], field, error.get("ctx"))
        else:
            message = error.get("msg", "Invalid value.")
        grouped[field] = [message]
    return grouped


def validate_payload(schema: type[SchemaT], payload: Any, actor: User) -> SchemaT:
    """Validate a request payload against a schema on behalf of an actor.

    Raises:
        ValidationFailed: if any field rule fails
    """
    try:
        return schema.model_validate(payload, context={"actor": actor})
    except ValidationError as e:
        raise ValidationFailed(collect_errors(e.errors())) from e
