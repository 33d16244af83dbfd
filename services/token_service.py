import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any
from jose import jwt, JWTError
from models.refresh_tokens import RefreshToken
from core.config import settings
from services.credential_store import CredentialStore
from utils.dates import utcnow, add_months
from utils.hashing import generate_random_string
from utils.logger import get_logger

logger = get_logger(__name__)

REFRESH_TOKEN_LENGTH = 32
REFRESH_TOKEN_LIFETIME_MONTHS = 1


@dataclass(frozen=True)
class MintedAccessToken:
    token: str
    payload: dict[str, Any]
    # iat + lifetime, the instant the JWT stops validating
    expires_at: datetime


class TokenService:
    """
    Mints access tokens (JWT) and refresh tokens (opaque, persisted).
    """

    @staticmethod
    def create_new_jwt(email: str, user_id: int, expires_delta: timedelta = None) -> MintedAccessToken:
        """
        Creates a signed access token.

        Args:
            email: User's email
            user_id: User's ID, also used as the subject
            expires_delta: Token lifetime (default: ACCESS_TOKEN_EXPIRE_MINUTES)

        Returns:
            MintedAccessToken with the encoded token, its claims and expiry
        """
        if expires_delta is None:
            expires_delta = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)

        # JWT timestamps have second resolution
        issued_at = utcnow().replace(microsecond=0)
        expire = issued_at + expires_delta

        payload = {
            "sub": str(user_id),
            "id": user_id,
            "email": email,
            "type": "access",
            # Unique per mint so refresh_tokens.access_token never collides
            "jti": secrets.token_urlsafe(16),
            "iat": int(issued_at.timestamp()),
            "exp": int(expire.timestamp()),
        }

        token = jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.ALGORITHM)
        return MintedAccessToken(token=token, payload=payload, expires_at=expire)

    @staticmethod
    def decode_access_token(token: str) -> dict[str, Any]:
        """
        Verifies signature and expiry of an access token.

        Raises:
            JWTError: If the token is invalid, expired or not an access token
        """
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
        if payload.get("type") != "access":
            raise JWTError("Invalid token type. Access token required.")
        if payload.get("id") is None or payload.get("email") is None:
            raise JWTError("Invalid token payload")
        return payload

    @staticmethod
    def generate_refresh_token_string(length: int = REFRESH_TOKEN_LENGTH) -> str:
        return generate_random_string(length)

    @staticmethod
    def create_new_refresh_token(store: CredentialStore, access_token: str, user_id: int) -> RefreshToken:
        """
        Creates and stores a refresh token paired with an access token.

        expired_at is exactly one calendar month after created_at.
        """
        now = utcnow()
        expired_at = add_months(now, REFRESH_TOKEN_LIFETIME_MONTHS)

        refresh = store.insert_refresh_token(
            token=TokenService.generate_refresh_token_string(),
            access_token=access_token,
            user_id=user_id,
            created_at=now,
            expired_at=expired_at,
        )

        logger.debug(
            "Refresh token stored",
            extra={"user_id": user_id, "refresh_token_id": refresh.id, "expired_at": expired_at.isoformat()}
        )

        return refresh
