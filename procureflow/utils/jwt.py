"""Bearer Token Validation - Identity assertion from the session layer"""
import jwt
from pydantic import ValidationError as PydanticValidationError
from datetime import timedelta
from typing import Any, Dict, Optional

from ..config.settings import settings
from ..domain.errors import AuthenticationError
from ..domain.models import ActorContext
from ..domain.enums import UserRole
from .time import utc_now
from .logger import get_logger

logger = get_logger(__name__)


class JWTValidator:
    """
    Validator for HS256 tokens issued by the session layer

    Claims: sub (user id), email, name, role. The role is trusted as asserted.
    """

    def __init__(self, secret: Optional[str] = None, algorithm: Optional[str] = None):
        self.secret = secret or settings.jwt_secret
        self.algorithm = algorithm or settings.jwt_algorithm

    def validate_token(self, token: str) -> Dict[str, Any]:
        """
        Validate a bearer token

        Args:
            token: Bearer token (with or without 'Bearer ' prefix)

        Returns:
            Decoded token claims

        Raises:
            AuthenticationError: If token is invalid
        """
        if not token:
            raise AuthenticationError("Token is missing")

        if token.startswith("Bearer "):
            token = token[7:]

        try:
            return jwt.decode(
                token,
                self.secret,
                algorithms=[self.algorithm],
                options={"require": ["sub", "role"], "verify_exp": True}
            )
        except jwt.ExpiredSignatureError:
            logger.warning("Token expired")
            raise AuthenticationError("Token has expired")
        except jwt.PyJWTError as e:
            logger.warning(f"JWT validation error: {e}")
            raise AuthenticationError(f"Invalid token: {str(e)}")

    def get_actor_context(self, token: str) -> ActorContext:
        """
        Extract actor context from validated token

        Args:
            token: Bearer token

        Returns:
            ActorContext with user information
        """
        claims = self.validate_token(token)

        try:
            role = UserRole(claims.get("role"))
        except ValueError:
            logger.warning(f"Unknown role in token: {claims.get('role')}")
            raise AuthenticationError("Token carries an unknown role")

        email = claims.get("email")
        if not email:
            raise AuthenticationError("Unable to determine user email from token")

        try:
            return ActorContext(
                user_id=str(claims["sub"]),
                email=email,
                display_name=claims.get("name") or email,
                role=role
            )
        except PydanticValidationError as e:
            logger.warning(f"Malformed identity claims: {e}")
            raise AuthenticationError("Token carries malformed identity claims")

    def issue_token(
        self,
        user_id: str,
        email: str,
        role: UserRole,
        name: Optional[str] = None,
        expires_in: timedelta = timedelta(hours=8)
    ) -> str:
        """Mint a token (development tooling and tests)"""
        now = utc_now()
        claims = {
            "sub": user_id,
            "email": email,
            "name": name or email,
            "role": role.value,
            "iat": now,
            "exp": now + expires_in,
        }
        return jwt.encode(claims, self.secret, algorithm=self.algorithm)


# Global validator instance
_jwt_validator: Optional[JWTValidator] = None


def get_jwt_validator() -> JWTValidator:
    """Get global JWT validator instance"""
    global _jwt_validator
    if _jwt_validator is None:
        _jwt_validator = JWTValidator()
    return _jwt_validator


def get_current_user(authorization: str) -> ActorContext:
    """
    Get current user from authorization header

    Args:
        authorization: Authorization header value

    Returns:
        ActorContext
    """
    if not authorization:
        raise AuthenticationError("Authorization header is missing")

    return get_jwt_validator().get_actor_context(authorization)
