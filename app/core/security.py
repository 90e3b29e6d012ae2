"""Password hashing and JWT helpers"""

import re
import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from jose import JWTError, jwt
from passlib.context import CryptContext

from app.config import get_settings

settings = get_settings()

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

ACCESS_TOKEN_TYPE = "access"
REFRESH_TOKEN_TYPE = "refresh"

DEFAULT_EXPIRES_IN_SECONDS = 86400

_EXPIRES_IN_PATTERN = re.compile(r"^(\d+)([smhd])$")
_UNIT_SECONDS = {"s": 1, "m": 60, "h": 3600, "d": 86400}


def hash_password(password: str) -> str:
    """Hash a plain text password with bcrypt"""
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Check a plain text password against its bcrypt hash"""
    return pwd_context.verify(plain_password, hashed_password)


def parse_expiration_time(expires_in: str) -> int:
    """
    Convert a duration such as "24h" or "15m" into seconds.

    Args:
        expires_in: Number followed by one of s, m, h, d

    Returns:
        Duration in seconds, 86400 when the value can't be parsed
    """
    match = _EXPIRES_IN_PATTERN.match(expires_in or "")
    if not match:
        return DEFAULT_EXPIRES_IN_SECONDS
    return int(match.group(1)) * _UNIT_SECONDS[match.group(2)]


def _encode(data: Dict[str, Any], token_type: str, expires_delta: timedelta) -> str:
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + expires_delta
    # jti keeps tokens issued within the same second distinct
    to_encode.update({"exp": expire, "type": token_type, "jti": uuid.uuid4().hex})
    return jwt.encode(to_encode, settings.secret_key, algorithm=settings.algorithm)


def create_access_token(data: Dict[str, Any], expires_delta: Optional[timedelta] = None) -> str:
    """
    Create a signed access token.

    Args:
        data: Claims to embed (must include "sub")
        expires_delta: Optional lifetime, defaults to JWT_EXPIRES_IN

    Returns:
        Encoded JWT
    """
    if expires_delta is None:
        expires_delta = timedelta(seconds=parse_expiration_time(settings.jwt_expires_in))
    return _encode(data, ACCESS_TOKEN_TYPE, expires_delta)


def create_refresh_token(data: Dict[str, Any], expires_delta: Optional[timedelta] = None) -> str:
    """Create a signed refresh token (7 days unless overridden)"""
    if expires_delta is None:
        expires_delta = timedelta(days=settings.refresh_token_expire_days)
    return _encode(data, REFRESH_TOKEN_TYPE, expires_delta)


def verify_token(token: str, expected_type: str = ACCESS_TOKEN_TYPE) -> Dict[str, Any]:
    """
    Decode a token and check its signature, expiry and type.

    Args:
        token: Encoded JWT
        expected_type: "access" or "refresh"

    Returns:
        Token payload

    Raises:
        JWTError: If the token is invalid, expired or of the wrong type
    """
    payload = jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])
    if payload.get("type") != expected_type:
        raise JWTError(f"Expected a {expected_type} token")
    return payload
