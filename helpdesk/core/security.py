"""
Password hashing (bcrypt) and access-token issue/verification (JWT).

The signing secret is never read from module state: callers pass the
Settings they were built with.
"""
from datetime import timedelta
from typing import Any, Dict

import bcrypt
from jose import JWTError, jwt

from helpdesk.core.config import Settings
from helpdesk.core.enums import utcnow
from helpdesk.core.errors import InvalidTokenError, ValidationError

# bcrypt only looks at the first 72 bytes of a password
MAX_PASSWORD_BYTES = 72


def hash_password(password: str) -> str:
    # hash the password for safe storage
    raw = password.encode("utf-8")
    if len(raw) > MAX_PASSWORD_BYTES:
        raise ValidationError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes")
    return bcrypt.hashpw(raw, bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    # check a login password against stored hash
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        return False


def create_access_token(claims: Dict[str, Any], settings: Settings) -> str:
    """Sign `claims` with an `exp` ACCESS_TOKEN_EXPIRE_HOURS from now."""
    payload = dict(claims)
    payload["exp"] = utcnow() + timedelta(hours=settings.ACCESS_TOKEN_EXPIRE_HOURS)
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def decode_access_token(token: str, settings: Settings) -> Dict[str, Any]:
    try:
        return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
    except JWTError as e:
        raise InvalidTokenError() from e
