"""Token service for issuing and verifying JWT access and refresh tokens."""

import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from jose import ExpiredSignatureError, JWTError, jwt

from hotel_cms.core.settings import Settings, get_settings

logger = logging.getLogger(__name__)

ACCESS_TOKEN_TYPE = "access"
REFRESH_TOKEN_TYPE = "refresh"


class TokenError(Exception):
    """Base exception for token verification failures."""
    pass


class TokenExpiredError(TokenError):
    """Raised when the token signature is valid but it has expired."""
    pass


class TokenInvalidError(TokenError):
    """Raised when the token is malformed, badly signed or of the wrong type."""
    pass


@dataclass
class TokenPayload:
    """Verified claims carried by a token."""
    user_id: uuid.UUID
    role: Optional[str]
    website_id: Optional[uuid.UUID]
    token_type: str
    expires_at: datetime
    raw: Dict[str, Any]


@dataclass
class TokenPair:
    access_token: str
    refresh_token: str
    expires_in: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "accessToken": self.access_token,
            "refreshToken": self.refresh_token,
            "tokenType": "bearer",
            "expiresIn": self.expires_in,
        }


class TokenService:
    """
    Signs and verifies the session tokens used by the authentication gate.

    Access and refresh tokens are signed with different secrets so that a
    refresh token can never be presented as an access token.
    """

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()

    def _secret_for(self, token_type: str) -> str:
        if token_type == REFRESH_TOKEN_TYPE:
            return self.settings.jwt_refresh_secret_key
        return self.settings.jwt_secret_key

    def _encode(
        self,
        user_id: uuid.UUID,
        role: str,
        website_id: Optional[uuid.UUID],
        token_type: str,
        expires_delta: timedelta,
    ) -> str:
        now = datetime.now(timezone.utc)
        payload = {
            "sub": str(user_id),
            "role": role,
            "website_id": str(website_id) if website_id else None,
            "type": token_type,
            "jti": uuid.uuid4().hex,
            "iat": now,
            "exp": now + expires_delta,
        }
        return jwt.encode(payload, self._secret_for(token_type), algorithm=self.settings.jwt_algorithm)

    def issue(self, user_id: uuid.UUID, role: str, website_id: Optional[uuid.UUID] = None) -> TokenPair:
        """Issue an access/refresh token pair for an identity and its scope."""
        access_delta = timedelta(minutes=self.settings.jwt_access_token_expire_minutes)
        refresh_delta = timedelta(days=self.settings.jwt_refresh_token_expire_days)

        access_token = self._encode(user_id, role, website_id, ACCESS_TOKEN_TYPE, access_delta)
        refresh_token = self._encode(user_id, role, website_id, REFRESH_TOKEN_TYPE, refresh_delta)

        logger.info(f"Issued token pair for user {user_id}")
        return TokenPair(
            access_token=access_token,
            refresh_token=refresh_token,
            expires_in=int(access_delta.total_seconds()),
        )

    def verify(self, token: str, expected_type: str = ACCESS_TOKEN_TYPE) -> TokenPayload:
        """
        Verify signature, expiry and token type.

        Raises:
            TokenExpiredError: the token has expired
            TokenInvalidError: anything else is wrong with it
        """
        try:
            payload = jwt.decode(
                token,
                self._secret_for(expected_type),
                algorithms=[self.settings.jwt_algorithm],
            )
        except ExpiredSignatureError:
            raise TokenExpiredError("Token has expired")
        except JWTError as e:
            logger.debug(f"JWT validation failed: {e}")
            raise TokenInvalidError("Invalid token")

        if payload.get("type") != expected_type:
            raise TokenInvalidError("Invalid token type")

        try:
            user_id = uuid.UUID(payload["sub"])
            website_id = uuid.UUID(payload["website_id"]) if payload.get("website_id") else None
        except (KeyError, TypeError, ValueError):
            raise TokenInvalidError("Invalid token payload")

        return TokenPayload(
            user_id=user_id,
            role=payload.get("role"),
            website_id=website_id,
            token_type=payload["type"],
            expires_at=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
            raw=payload,
        )

    def verify_access(self, token: str) -> TokenPayload:
        return self.verify(token, ACCESS_TOKEN_TYPE)

    def verify_refresh(self, token: str) -> TokenPayload:
        return self.verify(token, REFRESH_TOKEN_TYPE)


def get_token_service() -> TokenService:
    """Dependency returning a token service bound to current settings."""
    return TokenService(get_settings())
