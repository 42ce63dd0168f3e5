"""
Bearer-token authentication for admin endpoints.

Tokens are HS256 JWTs whose ``sub`` claim holds the user's email address.
Token minting lives with the login flow; this module only verifies.
"""
from dataclasses import dataclass
from typing import Any, Dict, Optional

import jwt
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from core.config import settings
from core.database import get_db_session
from core.database.models import User
from core.errors import unauthorized, user_not_found
from utils.logger import get_logger

logger = get_logger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class AuthenticatedUser:
    """Authenticated principal; never carries the password hash"""
    id: int
    name: str
    email: str


def decode_token(token: str) -> Dict[str, Any]:
    """Verify the signature and expiry of ``token`` and return its claims."""
    try:
        return jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except jwt.InvalidTokenError as e:
        logger.debug(f"Rejected bearer token: {e}")
        raise unauthorized() from e


def resolve_user(claims: Dict[str, Any], session: Session) -> AuthenticatedUser:
    """Load the user named by the token's ``sub`` claim."""
    email = claims.get("sub")
    if not isinstance(email, str) or not email:
        raise unauthorized()

    user = session.execute(
        select(User).where(func.lower(User.email) == email.strip().lower())
    ).scalar_one_or_none()
    if user is None:
        logger.warning(f"Token subject has no matching user: {email}")
        raise user_not_found()

    return AuthenticatedUser(id=user.id, name=user.name, email=user.email)


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    session: Session = Depends(get_db_session),
) -> AuthenticatedUser:
    """FastAPI dependency resolving ``Authorization: Bearer <token>`` to a user."""
    if credentials is None or credentials.scheme.lower() != "bearer" or not credentials.credentials:
        raise unauthorized()

    user = resolve_user(decode_token(credentials.credentials), session)
    logger.debug(f"User authenticated: {user.name or user.email}")
    return user
