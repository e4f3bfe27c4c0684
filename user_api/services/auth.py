"""Authentication helpers for API keys and password hashing."""

import secrets
import string

from passlib.context import CryptContext
from sqlalchemy.orm import Session

from user_api.models.user import API_KEY_LENGTH, User

# Password hashing context
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

API_KEY_ALPHABET = string.ascii_letters + string.digits


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash."""
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    """Hash a password."""
    return pwd_context.hash(password)


def generate_api_key(length: int = API_KEY_LENGTH) -> str:
    """Generate a random alphanumeric API key."""
    return "".join(secrets.choice(API_KEY_ALPHABET) for _ in range(length))


def get_user_by_api_key(db: Session, api_key: str) -> User | None:
    """Get the user owning an API key."""
    return db.query(User).filter(User.api_key == api_key).first()
