"""
Security utilities for admin authentication and session tokens
"""
import hmac
import logging
import secrets
from datetime import datetime, timedelta
from typing import Dict, Optional

import bcrypt
from jose import JWTError, jwt

from app.core.config import settings
from app.utils.datetime_utils import now_utc

logger = logging.getLogger(__name__)

BCRYPT_PREFIXES = ("$2a$", "$2b$", "$2y$")


def is_bcrypt_hash(value: str) -> bool:
    return value.startswith(BCRYPT_PREFIXES)


def hash_password(password: str) -> str:
    """Hash a password with bcrypt (for generating an ADMIN_PASSWORD hash)"""
    # Bcrypt has a 72-byte limit
    password_bytes = password.encode("utf-8")[:72]
    return bcrypt.hashpw(password_bytes, bcrypt.gensalt()).decode("utf-8")


def verify_password(plain_password: str, configured_password: str) -> bool:
    """
    Check a submitted password against the configured one.

    The configured value may be a bcrypt hash or a plain string; plain
    strings are compared in constant time.
    """
    if is_bcrypt_hash(configured_password):
        try:
            return bcrypt.checkpw(
                plain_password.encode("utf-8")[:72],
                configured_password.encode("utf-8")
            )
        except ValueError:
            logger.error("Configured ADMIN_PASSWORD looks like a bcrypt hash but is malformed")
            return False
    return hmac.compare_digest(plain_password.encode("utf-8"), configured_password.encode("utf-8"))


def verify_admin_credentials(username: Optional[str], password: Optional[str]) -> bool:
    """Compare submitted credentials against ADMIN_USERNAME / ADMIN_PASSWORD"""
    if not username or not password:
        return False
    username_ok = hmac.compare_digest(username.encode("utf-8"), settings.ADMIN_USERNAME.encode("utf-8"))
    password_ok = verify_password(password, settings.ADMIN_PASSWORD)
    return username_ok and password_ok


def new_session_id() -> str:
    """Random, URL-safe server-side session identifier"""
    return secrets.token_urlsafe(32)


def create_session_token(username: str, session_id: str, expires_minutes: Optional[int] = None) -> str:
    """Create the signed token stored in the admin session cookie"""
    if expires_minutes is None:
        expires_minutes = settings.SESSION_EXPIRE_MINUTES

    expire: datetime = now_utc() + timedelta(minutes=expires_minutes)
    to_encode = {
        "sub": username,
        "sid": session_id,
        "exp": expire,
    }
    return jwt.encode(
        to_encode,
        settings.SESSION_SECRET_KEY,
        algorithm=settings.SESSION_ALGORITHM
    )


def decode_session_token(token: str) -> Dict:
    """
    Decode and verify a session token

    Raises:
        ValueError: If the token is invalid, expired, or missing claims
    """
    try:
        payload = jwt.decode(
            token,
            settings.SESSION_SECRET_KEY,
            algorithms=[settings.SESSION_ALGORITHM]
        )
    except JWTError:
        raise ValueError("Invalid session token")
    if not payload.get("sub") or not payload.get("sid"):
        raise ValueError("Invalid session token")
    return payload
