"""Synchronization of newly created users with the external user directory."""

import logging
from typing import Any

import httpx
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from user_api.config import get_settings
from user_api.models.user import User

logger = logging.getLogger(__name__)


class DirectorySyncService:
    """Service for pushing users to the external user directory.

    A sync is a single best-effort attempt: failures are logged and never
    raised, so the caller's outcome does not depend on the directory.
    """

    def __init__(self) -> None:
        """Initialize the directory sync service."""
        settings = get_settings()
        self.url = settings.user_directory_url
        self.api_key = settings.user_directory_key
        self.timeout = settings.user_directory_timeout

    @property
    def is_configured(self) -> bool:
        """Check if the user directory is configured."""
        return bool(self.url)

    @staticmethod
    def build_payload(user: User) -> dict[str, Any]:
        """Build the minimal payload the directory receives for a user."""
        return {
            "name": user.name,
            "email": user.email,
            "phone_number": user.phone_number,
        }

    def _headers(self) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        return headers

    async def sync_user(self, db: Session, user: User) -> bool:
        """Send a created user to the directory and record its external ID.

        Args:
            db: Session the user belongs to
            user: The freshly created user

        Returns:
            True if the directory accepted the user, False otherwise
        """
        if not self.is_configured:
            logger.info(f"User directory not configured - skipping sync for user ID: {user.id}")
            return False

        payload = self.build_payload(user)
        logger.info(f"Attempting user sync for user ID: {user.id}", extra={"payload": payload})

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(self.url, json=payload, headers=self._headers())
        except httpx.HTTPError as e:
            logger.error(f"Failed user sync for user ID: {user.id}: {e}")
            return False

        body = _response_body(response)
        if not response.is_success:
            logger.error(
                f"Failed user sync for user ID: {user.id} "
                f"(status {response.status_code}): {body}",
                extra={"response": body},
            )
            return False

        logger.info(f"Successfully synced user ID: {user.id}", extra={"response": body})

        external_id = body.get("id") if isinstance(body, dict) else None
        if external_id is None:
            logger.warning(f"User directory returned no id for user ID: {user.id}")
            return True

        try:
            user.external_id = str(external_id)
            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Failed user sync for user ID: {user.id}: could not store external id: {e}")
            return False
        return True


def _response_body(response: httpx.Response) -> Any:
    """Parse a JSON response body, falling back to the raw text."""
    try:
        return response.json()
    except ValueError:
        return response.text
