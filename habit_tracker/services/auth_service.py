import hashlib
import hmac
import logging
import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional, Union

import jwt
from sqlalchemy.exc import IntegrityError

from habit_tracker import config
from habit_tracker.models.user import User
from habit_tracker.repositories.user_repository import UserRepository

logger = logging.getLogger("habit_tracker.auth_service")

# HMAC-SHA512 block size; the random salt doubles as the MAC key
SALT_BYTES = 128

TOKEN_LIFETIME = timedelta(hours=24)


class UsernameTakenError(Exception):
    """Registration with a username that already exists."""


class InvalidCredentialsError(Exception):
    """Unknown username or wrong password. Callers cannot tell which."""


@dataclass(frozen=True)
class AuthorizationError:
    """A verified token that carries no usable identity claim."""
    reason: str


# ---------------- PASSWORD HASHING ----------------

def hash_password(password: str) -> tuple[bytes, bytes]:
    """Hash a password under a fresh random salt. Returns (hash, salt)."""
    salt = secrets.token_bytes(SALT_BYTES)
    digest = hmac.new(salt, password.encode("utf-8"), hashlib.sha512).digest()
    return digest, salt


def verify_password(password: str, password_hash: bytes, password_salt: bytes) -> bool:
    """Recompute the keyed hash with the stored salt and compare in constant time."""
    computed = hmac.new(password_salt, password.encode("utf-8"), hashlib.sha512).digest()
    return hmac.compare_digest(computed, password_hash)


# ---------------- JWT TOKENS ----------------

def create_access_token(user_id: int, username: str, now: Optional[datetime] = None) -> str:
    """Generate a signed JWT carrying the user's id and username, valid for 24 hours."""
    secret, issuer, audience = config.require_jwt_settings()
    issued_at = now or datetime.now(timezone.utc)
    payload = {
        "sub": str(user_id),
        "name": username,
        "iss": issuer,
        "aud": audience,
        "iat": issued_at,
        "exp": issued_at + TOKEN_LIFETIME,
    }
    return jwt.encode(payload, secret, algorithm=config.JWT_ALGORITHM)


def decode_access_token(token: str) -> Optional[dict]:
    """Return the verified claims, or None when the signature, expiry, issuer or audience is wrong."""
    secret, issuer, audience = config.require_jwt_settings()
    try:
        return jwt.decode(
            token,
            secret,
            algorithms=[config.JWT_ALGORITHM],
            issuer=issuer,
            audience=audience,
            options={"require": ["exp", "sub"]},
        )
    except jwt.PyJWTError as e:
        logger.info(f"Rejected token: {e}")
        return None


def extract_caller_id(claims: dict) -> Union[int, AuthorizationError]:
    subject = claims.get("sub")
    if subject is None:
        return AuthorizationError("User ID not found in token")
    try:
        return int(subject)
    except (TypeError, ValueError):
        return AuthorizationError("User ID in token is not valid")


# ---------------- REGISTER / LOGIN ----------------

async def register_user(users: UserRepository, username: str, password: str) -> User:
    if await users.username_exists(username):
        raise UsernameTakenError(username)

    password_hash, password_salt = hash_password(password)
    user = User(username=username, password_hash=password_hash, password_salt=password_salt)
    try:
        return await users.add(user)
    except IntegrityError:
        # lost a race with a concurrent registration of the same name
        raise UsernameTakenError(username)


async def authenticate_user(users: UserRepository, username: str, password: str) -> str:
    """Check credentials and return a fresh access token."""
    user = await users.get_by_username(username)
    if not user:
        raise InvalidCredentialsError("Invalid username")

    if not verify_password(password, user.password_hash, user.password_salt):
        raise InvalidCredentialsError("Invalid password")

    return create_access_token(user.id, user.username)
