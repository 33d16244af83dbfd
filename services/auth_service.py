from dataclasses import dataclass, field
from typing import Literal, Optional
from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from core.exceptions import ConflictError, InvalidRefreshTokenError, INTERNAL_SERVER_ERROR
from models.users import User
from schemas.auth_schemas import (ResultCode, LoginRequest, SignupRequest, SessionTokens,
AuthResponse)
from services.credential_store import CredentialStore
from services.token_service import TokenService
from services.cookie_service import CookieDirective, build_session_cookies
from services.google_oauth import GoogleOAuthClient
from utils.dates import utcnow
from utils.hashing import PasswordHasher, BcryptHasher, generate_random_string
from utils.logger import get_logger, sanitize_log_data

logger = get_logger(__name__)

GOOGLE_ACCOUNT_PASSWORD_LENGTH = 10


@dataclass
class IssuedSession:
    access_token: str
    refresh_token: str
    cookies: list[CookieDirective] = field(default_factory=list)

    def tokens(self) -> SessionTokens:
        return SessionTokens(access_token=self.access_token, refresh_token=self.refresh_token)


@dataclass
class AuthResult:
    type: Literal["success", "error"]
    result_code: ResultCode
    session: Optional[IssuedSession] = None

    @classmethod
    def error(cls, result_code: ResultCode) -> "AuthResult":
        return cls(type="error", result_code=result_code)

    def to_response(self) -> AuthResponse:
        tokens = {}
        if self.session is not None:
            tokens = self.session.tokens().model_dump()
        return AuthResponse(type=self.type, result_code=self.result_code, **tokens)


@dataclass
class GoogleAuthOutcome:
    code: int
    session: Optional[IssuedSession] = None
    error: Optional[str] = None

    def to_body(self) -> dict:
        if self.session is None:
            return {"code": self.code, "error": self.error}
        return {"code": self.code, "data": self.session.tokens().model_dump()}


class AuthService:
    """
    Issues sessions for credential and Google logins.

    Both entry points converge on login(), which mints a fresh access token
    and refresh token, persists the refresh token and returns the cookies the
    HTTP layer must set.
    """

    def __init__(
        self,
        store: CredentialStore,
        hasher: PasswordHasher = None,
        google: Optional[GoogleOAuthClient] = None,
    ):
        self.store = store
        self.hasher = hasher or BcryptHasher()
        self.google = google

    def login(self, email: str, user_id: int) -> IssuedSession:
        access = TokenService.create_new_jwt(email=email, user_id=user_id)
        refresh = TokenService.create_new_refresh_token(
            self.store, access_token=access.token, user_id=user_id
        )

        logger.info(
            "Session issued",
            extra={"user_id": user_id, "refresh_token_id": refresh.id}
        )

        return IssuedSession(
            access_token=access.token,
            refresh_token=refresh.token,
            cookies=build_session_cookies(access, refresh),
        )

    def authenticate_with_credentials(self, email, password) -> AuthResult:
        """
        Credential login. Never raises.

        Flow:
        1. Validate email format and password length
        2. Look up the user and verify the password hash
        3. Issue a session
        """
        try:
            credentials = LoginRequest(email=email, password=password)
        except ValidationError:
            logger.warning("Login rejected - malformed credentials")
            return AuthResult.error(ResultCode.INVALID_CREDENTIALS)

        try:
            user = self.store.get_user_by_email(credentials.email)

            if not user:
                logger.warning(
                    "Login failed - user not found",
                    extra={"email": credentials.email}
                )
                return AuthResult.error(ResultCode.INVALID_CREDENTIALS)

            if not self.hasher.verify(credentials.password, user.hash):
                logger.warning(
                    "Login failed - invalid password",
                    extra={"user_id": user.id, "email": credentials.email}
                )
                return AuthResult.error(ResultCode.INVALID_CREDENTIALS)

            session = self.login(user.email, user.id)

        except Exception as e:
            logger.error(
                f"Login failed - unexpected error: {str(e)}",
                extra={"email": credentials.email, "error_type": type(e).__name__},
                exc_info=True
            )
            return AuthResult.error(ResultCode.UNKNOWN_ERROR)

        return AuthResult(type="success", result_code=ResultCode.USER_LOGGED_IN, session=session)

    def create_user(self, email, password) -> AuthResult:
        """
        Credential signup: creates the account and logs it in.
        """
        try:
            request = SignupRequest(email=email, password=password)
        except ValidationError:
            return AuthResult.error(ResultCode.INVALID_SUBMISSION)

        if self.store.get_user_by_email(request.email):
            logger.warning(
                "Registration attempt with existing email",
                extra={"email": request.email}
            )
            return AuthResult.error(ResultCode.USER_ALREADY_EXISTS)

        try:
            user_id = self.store.insert_user(request.email, self.hasher.hash(request.password))
        except ConflictError:
            # Lost a race with a concurrent signup for the same email
            return AuthResult.error(ResultCode.USER_ALREADY_EXISTS)

        logger.info("User registered successfully", extra={"user_id": user_id, "email": request.email})

        try:
            session = self.login(request.email, user_id)
        except (SQLAlchemyError, ConflictError) as e:
            logger.error(
                f"Session issue after signup failed: {str(e)}",
                extra={"user_id": user_id, "error_type": type(e).__name__},
                exc_info=True
            )
            return AuthResult.error(ResultCode.UNKNOWN_ERROR)

        return AuthResult(type="success", result_code=ResultCode.USER_CREATED, session=session)

    def create_google_account(self, email: str, picture: str) -> int:
        # Google users never type this password; it only fills the hash column
        password = generate_random_string(GOOGLE_ACCOUNT_PASSWORD_LENGTH)
        return self.store.insert_user(email, self.hasher.hash(password), profile_picture_url=picture)

    async def authenticate_with_google(self, code: str) -> GoogleAuthOutcome:
        """
        Google login or signup. Never raises.

        Returns code 201 when a new account was created, 200 for an existing
        account and 500 for any failure along the way.
        """
        try:
            if self.google is None:
                raise RuntimeError("Google OAuth client is not configured")

            info = await self.google.exchange_code(code)
            user = self.store.get_user_by_email(info.email)

            if user is None:
                try:
                    user_id = self.create_google_account(info.email, info.picture)
                except ConflictError:
                    user = self.store.get_user_by_email(info.email)
                    if user is None:
                        raise
                    logger.info(
                        "Concurrent Google signup resolved to existing user",
                        extra={"user_id": user.id, "email": info.email}
                    )
                else:
                    logger.info(
                        "User registered with Google",
                        extra={"user_id": user_id, "email": info.email}
                    )
                    return GoogleAuthOutcome(code=201, session=self.login(info.email, user_id))

            return GoogleAuthOutcome(code=200, session=self.login(user.email, user.id))

        except Exception as e:
            logger.error(
                f"Google authentication failed: {str(e)}",
                extra={"error_type": type(e).__name__},
                exc_info=True
            )
            return GoogleAuthOutcome(code=500, error=INTERNAL_SERVER_ERROR)

    def refresh_session(self, refresh_token: str) -> IssuedSession:
        """
        Exchanges a valid refresh token for a new session.
        The old token is soft-deleted (rotation).

        Raises:
            InvalidRefreshTokenError: If the token is unknown, revoked or expired
        """
        now = utcnow()
        model = self.store.get_valid_refresh_token(refresh_token, now)
        if model is None:
            logger.warning(
                "Refresh rejected - invalid token",
                extra=sanitize_log_data({"refresh_token": refresh_token})
            )
            raise InvalidRefreshTokenError("Refresh token not found, revoked or expired")

        user: Optional[User] = self.store.get_user_by_id(model.user_id)
        if user is None:
            raise InvalidRefreshTokenError("Refresh token owner no longer exists")

        # Conditional update: of two concurrent refreshes with one token, only one wins
        if not self.store.soft_delete_refresh_token(model, now, commit=False):
            self.store.rollback()
            raise InvalidRefreshTokenError("Refresh token was already used")

        # The revocation commits together with the new token, or not at all
        try:
            return self.login(user.email, user.id)
        except Exception:
            self.store.rollback()
            raise

    def logout(self, refresh_token: str) -> bool:
        model = self.store.get_refresh_token(refresh_token)
        if model is None or not self.store.soft_delete_refresh_token(model, utcnow()):
            return False

        logger.info("Refresh token revoked", extra={"user_id": model.user_id})
        return True
