# rental_admin/core/security.py - JWT access token utilities
from datetime import datetime, timedelta, timezone
from typing import Dict, Any, Optional, Union, List
import secrets

import jwt
from fastapi import HTTPException, status

from rental_admin.core.config import settings


class SecurityError(Exception):
    """Custom exception for security-related errors"""
    pass


class TokenManager:
    """Manages JWT access token creation and validation"""

    RESERVED_CLAIMS = {"sub", "iat", "exp", "iss", "aud", "type", "jti", "roles"}

    def __init__(self):
        self.secret_key = settings.JWT_SECRET
        self.algorithm = settings.JWT_ALGORITHM
        self.issuer = settings.JWT_ISSUER
        self.audience = settings.JWT_AUDIENCE
        self.access_token_expire_minutes = settings.JWT_ACCESS_TOKEN_EXPIRE_MINUTES

    def create_access_token(
        self,
        subject: Union[str, Any],
        roles: Optional[List[str]] = None,
        expires_delta: Optional[timedelta] = None,
        additional_claims: Optional[Dict[str, Any]] = None,
    ) -> str:
        """
        Create a JWT access token.

        Args:
            subject: Token subject (the numeric user id)
            roles: Role names carried in the ``roles`` claim
            expires_delta: Custom expiration time
            additional_claims: Additional JWT claims

        Returns:
            Encoded JWT token string

        Raises:
            SecurityError: If token creation fails
        """
        now = datetime.now(timezone.utc)
        expire = now + (expires_delta or timedelta(minutes=self.access_token_expire_minutes))

        payload = {
            "sub": str(subject),
            "iat": now,
            "exp": expire,
            "iss": self.issuer,
            "aud": self.audience,
            "type": "access",
            "jti": secrets.token_hex(16),
            "roles": list(roles or []),
        }

        if additional_claims:
            for claim in additional_claims:
                if claim in self.RESERVED_CLAIMS:
                    raise SecurityError(f"Cannot override reserved JWT claim: {claim}")
            payload.update(additional_claims)

        try:
            return jwt.encode(payload, self.secret_key, algorithm=self.algorithm)
        except jwt.PyJWTError as e:
            raise SecurityError(f"Failed to create access token: {e}")

    def decode_token(self, token: str, expected_type: str = "access") -> Dict[str, Any]:
        """
        Decode and validate a JWT token.

        Raises:
            HTTPException: If token is invalid or expired
        """
        try:
            payload = jwt.decode(
                token,
                self.secret_key,
                algorithms=[self.algorithm],
                audience=self.audience,
                issuer=self.issuer,
            )
        except jwt.ExpiredSignatureError:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Token has expired",
                headers={"WWW-Authenticate": "Bearer"},
            )
        except jwt.InvalidTokenError as e:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail=f"Invalid token: {e}",
                headers={"WWW-Authenticate": "Bearer"},
            )

        if payload.get("type") != expected_type:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail=f"Invalid token type. Expected {expected_type}",
                headers={"WWW-Authenticate": "Bearer"},
            )

        return payload


token_manager = TokenManager()


def create_access_token(subject: Union[str, int], roles: Optional[List[str]] = None,
                        expires_delta: Optional[timedelta] = None) -> str:
    """Create access token (convenience function)"""
    return token_manager.create_access_token(subject, roles=roles, expires_delta=expires_delta)


def decode_token(token: str) -> Dict[str, Any]:
    """Decode access token (convenience function)"""
    return token_manager.decode_token(token)


__all__ = [
    "TokenManager", "token_manager",
    "create_access_token", "decode_token",
    "SecurityError"
]
