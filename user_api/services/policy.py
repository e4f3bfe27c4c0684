"""Authorization policy for user records.

Every decision function applies the administrator short-circuit first: an
admin may do anything, so the remaining rules only ever describe what a
regular user may do.
"""

import logging
from enum import Enum

from fastapi import HTTPException, status

from user_api.models.user import User

logger = logging.getLogger(__name__)

FORBIDDEN_MESSAGE = "This action is unauthorized."


class Action(str, Enum):
    """Actions the policy decides on."""

    LIST = "list"
    CREATE = "create"
    VIEW = "view"
    UPDATE = "update"


def before(principal: User) -> bool | None:
    """Pre-authorization check: admins are allowed everything, others undecided."""
    if principal.is_admin:
        return True
    return None


def can_list_all(principal: User) -> bool:
    """Check if the principal may list every user."""
    if before(principal):
        return True
    return not principal.is_regular_user


def can_create(principal: User) -> bool:
    """Check if the principal may create users."""
    if before(principal):
        return True
    return not principal.is_regular_user


def can_view(principal: User, target: User) -> bool:
    """Check if the principal may view the target user."""
    if before(principal):
        return True
    if principal.is_regular_user and principal.id != target.id:
        return False
    return True


def can_update(principal: User, target: User) -> bool:
    """Check if the principal may update the target user."""
    if before(principal):
        return True
    if principal.is_regular_user and principal.id != target.id:
        return False
    return True


def can_set_role(principal: User) -> bool:
    """Check if the principal may set the role field."""
    if before(principal):
        return True
    return not principal.is_regular_user


def can_see_privileged_fields(viewer: User) -> bool:
    """Check if the viewer may see api_key and role in responses."""
    if before(viewer):
        return True
    return not viewer.is_regular_user


def authorize(action: Action, principal: User, target: User | None = None) -> None:
    """Raise 403 unless the principal may perform the action.

    Object-level actions (view, update) require a target.
    """
    if action == Action.LIST:
        allowed = can_list_all(principal)
    elif action == Action.CREATE:
        allowed = can_create(principal)
    elif target is None:
        raise ValueError(f"Action '{action.value}' requires a target user")
    elif action == Action.VIEW:
        allowed = can_view(principal, target)
    else:
        allowed = can_update(principal, target)

    if not allowed:
        logger.info(
            f"Denied {action.value} for user {principal.id}"
            + (f" on user {target.id}" if target is not None else "")
        )
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=FORBIDDEN_MESSAGE)
