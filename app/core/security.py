# app/core/security.py - Session tokens (JWT) carrying caller identity
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional
import secrets

import jwt

from app.core.config import settings
from app.schemas.session import UserSession


class SecurityError(Exception):
    """Custom exception for security-related errors"""
    pass


class TokenManager:
    """Manages JWT token creation and validation"""

    def __init__(
        self,
        secret_key: Optional[str] = None,
        algorithm: Optional[str] = None,
        issuer: Optional[str] = None,
        expire_minutes: Optional[int] = None,
    ):
        self.secret_key = secret_key or settings.JWT_SECRET
        self.algorithm = algorithm or settings.JWT_ALGORITHM
        self.issuer = issuer or settings.JWT_ISSUER
        self.access_token_expire_minutes = expire_minutes or settings.JWT_ACCESS_TOKEN_EXPIRE_MINUTES

    def create_access_token(
        self,
        user_id: str,
        role: Optional[str],
        school_id: Optional[str] = None,
        expires_delta: Optional[timedelta] = None,
    ) -> str:
        """
        Create a JWT access token for a session.

        Args:
            user_id: Token subject
            role: The user's role as stored on the account
            school_id: School the session is bound to, if any
            expires_delta: Custom expiration time

        Returns:
            Encoded JWT token string
        """
        now = datetime.now(timezone.utc)
        expire = now + (expires_delta or timedelta(minutes=self.access_token_expire_minutes))

        payload: Dict[str, Any] = {
            "sub": str(user_id),
            "role": role,
            "iat": now,
            "exp": expire,
            "iss": self.issuer,
            "type": "access",
            "jti": secrets.token_hex(16),
        }
        if school_id:
            payload["school_id"] = str(school_id)

        try:
            return jwt.encode(payload, self.secret_key, algorithm=self.algorithm)
        except jwt.PyJWTError as e:
            raise SecurityError(f"Failed to create access token: {e}")

    def decode_token(self, token: str) -> Dict[str, Any]:
        """
        Decode and validate an access token.

        Raises:
            SecurityError: If the token is invalid, expired or of the wrong type
        """
        try:
            payload = jwt.decode(
                token,
                self.secret_key,
                algorithms=[self.algorithm],
                issuer=self.issuer,
                options={"require": ["sub", "exp"]},
            )
        except jwt.ExpiredSignatureError:
            raise SecurityError("Token has expired")
        except jwt.InvalidTokenError as e:
            raise SecurityError(f"Invalid token: {e}")

        if payload.get("type") != "access":
            raise SecurityError("Invalid token type. Expected access")
        return payload

    def session_from_token(self, token: str) -> UserSession:
        """Turn a bearer token into the explicit session passed to the core"""
        claims = self.decode_token(token)
        return UserSession(
            user_id=claims["sub"],
            role=claims.get("role"),
            school_id=claims.get("school_id"),
        )


token_manager = TokenManager()


# Convenience functions
def create_access_token(user_id: str, role: Optional[str], school_id: Optional[str] = None) -> str:
    return token_manager.create_access_token(user_id, role, school_id)


def session_from_token(token: str) -> UserSession:
    return token_manager.session_from_token(token)


__all__ = [
    "SecurityError",
    "TokenManager",
    "token_manager",
    "create_access_token",
    "session_from_token",
]
