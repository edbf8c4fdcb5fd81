"""Bearer token authentication for the ledger API."""

from typing import Annotated

import jwt
import structlog
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from src.core.config import settings
from src.domain.entities import Identity

logger = structlog.get_logger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


def decode_identity(token: str) -> Identity:
    """
    Decode a signed JWT into the caller's identity.

    The user id is read from ``sub`` (or ``user_id``) and must be an integer.

    Raises:
        jwt.InvalidTokenError: If the token is invalid, expired or carries
            no usable user id
    """
    payload = jwt.decode(
        token.strip(),
        settings.jwt_secret,
        algorithms=[settings.jwt_algorithm],
    )

    raw_user_id = payload.get("sub") or payload.get("user_id")
    try:
        user_id = int(raw_user_id)
    except (TypeError, ValueError):
        raise jwt.InvalidTokenError("Token carries no user id")

    return Identity(user_id=user_id, role=payload.get("role", "admin"))


async def get_current_identity(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
) -> Identity:
    """FastAPI dependency resolving the authenticated caller."""
    if credentials is None or not credentials.credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )

    try:
        return decode_identity(credentials.credentials)
    except jwt.ExpiredSignatureError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token expired",
            headers={"WWW-Authenticate": "Bearer"},
        )
    except jwt.InvalidTokenError as e:
        logger.warning("invalid_token", error=str(e))
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token",
            headers={"WWW-Authenticate": "Bearer"},
        )
