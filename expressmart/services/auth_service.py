# expressmart/services/auth_service.py
from uuid import UUID

import jwt
from jwt import PyJWTError

from expressmart.domain.errors import AuthenticationError
from expressmart.domain.schemas import AuthenticatedUser
from expressmart.utils.settings import Settings
from expressmart.utils.logging import get_logger

logger = get_logger(__name__)


class AuthService:
    """
    Weryfikuje JWT wydany przez dostawcę bazy (HS256, aud=authenticated).
    """

    def __init__(self, settings: Settings):
        self.secret = settings.jwt_secret
        self.audience = settings.jwt_audience
        self.algorithm = settings.jwt_algorithm

    def resolve_user(self, authorization: str | None) -> AuthenticatedUser:
        if not authorization or not authorization.lower().startswith("bearer "):
            raise AuthenticationError("Authentication required")

        if not self.secret:
            logger.error("JWT secret not configured, rejecting caller")
            raise AuthenticationError("Authentication required")

        token = authorization[7:].strip()
        try:
            claims = jwt.decode(
                token,
                self.secret,
                algorithms=[self.algorithm],
                audience=self.audience,
            )
            user_id = UUID(claims["sub"])
        except (PyJWTError, KeyError, ValueError) as e:
            logger.warning(f"Rejected access token: {e}")
            raise AuthenticationError("Authentication required") from e

        return AuthenticatedUser(id=user_id, email=claims.get("email"))
