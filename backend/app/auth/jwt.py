"""
JWT helper utilities.

Tokens are issued by the account service; this API only needs to verify
them. ``create_access_token`` exists for operators and tests.
"""

import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Dict

from jose import JWTError, jwt

from core.config import Settings


def create_access_token(
    settings: Settings, data: Dict[str, Any], expires_minutes: int | None = None
) -> str:
    """
    Create a signed JWT access token with expiration and JTI.

    Args:
        settings: Settings holding the shared secret and algorithm.
        data: Claims to include in the token (e.g., {"sub": "42"}).
        expires_minutes: Optional override for expiration window in minutes.

    Returns:
        Encoded JWT string.
    """
    to_encode = data.copy()
    expire_delta = timedelta(
        minutes=expires_minutes or settings.access_token_expire_minutes
    )
    expire = datetime.now(timezone.utc) + expire_delta
    to_encode.update({
        "exp": expire,
        "jti": str(uuid.uuid4()),
    })
    return jwt.encode(to_encode, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def decode_access_token(settings: Settings, token: str) -> Dict[str, Any]:
    """
    Decode and validate a JWT access token.

    Raises:
        ValueError: If token is invalid or signature/expiry check fails.
    """
    try:
        return jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
    except JWTError as exc:
        raise ValueError("Invalid token") from exc
