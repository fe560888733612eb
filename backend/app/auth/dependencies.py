"""
Authentication dependencies for FastAPI routes.

Accepts either:
- Bearer token in the Authorization header
- Raw token in the x-auth-token header
"""

from fastapi import Depends, Header, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from core.config import Settings
from core.db import get_db
from core.models import User

from ..dependencies import get_app_settings
from .jwt import decode_access_token

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="token", auto_error=False)

NO_TOKEN_MESSAGE = "No token, authorization denied"
INVALID_TOKEN_MESSAGE = "Token is not valid"


def get_token_from_request(
    token_header: str | None = Depends(oauth2_scheme),
    x_auth_token: str | None = Header(None, alias="x-auth-token"),
) -> str:
    """Extract the JWT, preferring the Authorization header."""
    if token_header:
        return token_header

    if x_auth_token:
        return x_auth_token

    raise HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=NO_TOKEN_MESSAGE,
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_current_user(
    token: str = Depends(get_token_from_request),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
) -> User:
    """
    Resolve the authenticated user.

    Steps:
    1) Decode JWT and extract the subject (user id).
    2) Load the user from DB or raise 401.
    """
    try:
        payload = decode_access_token(settings, token)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=INVALID_TOKEN_MESSAGE,
        ) from None

    user_id = payload.get("sub")
    try:
        user_id = int(user_id)
    except (TypeError, ValueError):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=INVALID_TOKEN_MESSAGE,
        ) from None

    user = db.get(User, user_id)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=INVALID_TOKEN_MESSAGE,
        )
    return user
