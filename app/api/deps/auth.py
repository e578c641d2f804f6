# app/api/deps/auth.py - Resolve the caller's session from the bearer token
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from typing import Optional
import logging

from app.core.security import SecurityError, session_from_token
from app.schemas.session import UserSession
from app.services.permissions import Capability, has_permission

logger = logging.getLogger(__name__)

# No token is not an error: the caller is anonymous and sees no data
security = HTTPBearer(auto_error=False)


def get_session(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> UserSession:
    """
    Decode the JWT into an explicit session.

    Missing credentials give an anonymous session; a present but invalid
    token is rejected with 401.
    """
    if credentials is None:
        return UserSession.anonymous()

    try:
        return session_from_token(credentials.credentials)
    except SecurityError as e:
        logger.info(f"Rejected bearer token: {e}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token",
            headers={"WWW-Authenticate": "Bearer"},
        )


def require_session(session: UserSession = Depends(get_session)) -> UserSession:
    """Require an authenticated caller"""
    if not session.is_authenticated:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return session


def require_capability(capability: Capability):
    """
    Create a dependency that requires a capability.
    Usage: @router.post("/messages", dependencies=[Depends(require_capability(Capability.SEND_MESSAGES))])
    """
    def capability_checker(session: UserSession = Depends(require_session)) -> UserSession:
        if not has_permission(session.role, capability):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Missing capability: {capability.value}",
            )
        return session
    return capability_checker
