"""
JWT Authentication middleware for Supabase Auth.

Validates JWTs from Supabase and extracts the user for route handlers.
Browsing works without a token (guest mode); anything that writes on the
user's behalf needs one.
"""

from dataclasses import dataclass
from typing import Optional

import jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from babui.config import get_settings

security = HTTPBearer()
optional_security = HTTPBearer(auto_error=False)


@dataclass
class AuthenticatedUser:
    user_id: str
    access_token: str
    email: Optional[str] = None


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
) -> AuthenticatedUser:
    """
    Validate Supabase JWT and return the user.

    Raises 401 if token is missing or invalid.
    """
    return _validate_token(credentials.credentials)


async def get_optional_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(optional_security),
) -> Optional[AuthenticatedUser]:
    """Like get_current_user, but None for anonymous (guest) requests."""
    if credentials is None:
        return None
    return _validate_token(credentials.credentials)


def _validate_token(token: str) -> AuthenticatedUser:
    """
    Validate a Supabase JWT.

    Args:
        token: The JWT access token from the Authorization header

    Returns:
        AuthenticatedUser with the 'sub' claim as user_id

    Raises:
        HTTPException(401): If token is invalid, expired, or missing required claims
    """
    jwt_secret = get_settings().supabase_jwt_secret

    if not jwt_secret:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Server auth configuration error",
        )

    try:
        # Supabase uses HS256 algorithm and 'authenticated' audience
        payload = jwt.decode(
            token,
            jwt_secret,
            algorithms=["HS256"],
            audience="authenticated",
        )
    except jwt.ExpiredSignatureError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token has expired",
        )
    except jwt.InvalidAudienceError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token audience",
        )
    except jwt.InvalidTokenError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=f"Invalid token: {str(e)}",
        )

    user_id = payload.get("sub")
    if not user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token: missing user identifier",
        )

    return AuthenticatedUser(user_id=user_id, access_token=token, email=payload.get("email"))
