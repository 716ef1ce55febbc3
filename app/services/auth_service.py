"""
Credential handling: bcrypt hashing, username/password verification and
user registration.

Every authentication failure carries the same message so a caller can't
tell an unknown username from a wrong password.
"""
from typing import Optional
import logging
import secrets

import bcrypt
from sqlalchemy.exc import IntegrityError

from app.config import settings
from app.models import User
from app.schemas.users import UserCreate, password_fits_bcrypt
from app.services.storage import Storage

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid credentials"


class AuthFailure(Exception):
    def __init__(self, message: str = INVALID_CREDENTIALS):
        super().__init__(message)
        self.message = message


class ConflictError(Exception):
    def __init__(self, message: str = "Username already exists"):
        super().__init__(message)
        self.message = message


def get_password_hash(password: str, rounds: Optional[int] = None) -> str:
    """Hash password using bcrypt"""
    salt = bcrypt.gensalt(rounds=rounds or settings.BCRYPT_ROUNDS)
    hashed = bcrypt.hashpw(password.encode('utf-8'), salt)
    return hashed.decode('utf-8')


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify password using bcrypt; a malformed stored hash raises ValueError"""
    return bcrypt.checkpw(
        plain_password.encode('utf-8'),
        hashed_password.encode('utf-8')
    )


# Hashed at the configured cost; checked on every failed lookup
_DUMMY_PASSWORD = secrets.token_urlsafe(16)
DUMMY_HASH = get_password_hash(_DUMMY_PASSWORD)


def verify_credentials(storage: Storage, username: str, password: str) -> User:
    """Return the matching user (hash included) or raise AuthFailure"""
    user = storage.get_user_by_username(username)
    if user is None or not password_fits_bcrypt(password):
        verify_password(_DUMMY_PASSWORD, DUMMY_HASH)
        if user is None:
            logger.info("Login failed: unknown username")
        else:
            logger.info(f"Login failed: over-long password for user id={user.id}")
        raise AuthFailure()

    if not verify_password(password, user.password):
        logger.info(f"Login failed: bad password for user id={user.id}")
        raise AuthFailure()

    return user


def register_user(storage: Storage, candidate: UserCreate) -> User:
    """Create a user from a validated candidate, storing only the password hash"""
    if storage.get_user_by_username(candidate.username) is not None:
        raise ConflictError()

    data = candidate.model_dump()
    data["password"] = get_password_hash(candidate.password)
    try:
        user = storage.create_user(data)
    except IntegrityError:
        # Lost a race with a concurrent registration of the same username
        raise ConflictError()

    logger.info(f"Registered user id={user.id} role={user.role.value}")
    return user
