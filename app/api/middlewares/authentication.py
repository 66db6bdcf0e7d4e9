from dataclasses import dataclass
from typing import Annotated
from uuid import UUID

import jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from settings import settings

# Create security scheme instance
security = HTTPBearer()


@dataclass(frozen=True)
class CurrentUser:
    id: UUID
    email: str | None = None


def decode_session_token(token: str) -> CurrentUser:
    """
    Decode a session token issued by the managed auth provider.

    Raises:
        HTTPException: If the token is invalid, expired or has no usable subject
    """
    try:
        claims = jwt.decode(
            token,
            settings.auth.jwt_secret,
            algorithms=["HS256"],
            audience=settings.auth.jwt_audience,
        )
        user_id = UUID(str(claims["sub"]))
    except jwt.ExpiredSignatureError:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Session expired.")
    except (jwt.InvalidTokenError, KeyError, ValueError):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid session token.")

    return CurrentUser(id=user_id, email=claims.get("email"))


async def get_current_user(credentials: Annotated[HTTPAuthorizationCredentials, Depends(security)]) -> CurrentUser:
    """
    FastAPI dependency to get the signed-in user from the Authorization header.

    Args:
        credentials: The HTTP Bearer credentials from the Authorization header

    Returns:
        The authenticated user
    """
    return decode_session_token(credentials.credentials)
