"""
Google OAuth code exchange.

Trades a one-time authorization code for a Google access token, then reads
the user's profile from the userinfo endpoint. Every failure (non-2xx,
transport error, timeout, unexpected body) is raised as OAuthExchangeError.
"""

from typing import Optional
import httpx
from pydantic import ValidationError
from core.config import settings
from core.exceptions import OAuthExchangeError, OAuthErrorCode
from schemas.auth_schemas import GoogleUserInfo
from utils.logger import get_logger

logger = get_logger(__name__)


class GoogleOAuthClient:
    """
    Thin async client for Google's token and userinfo endpoints.

    One instance is created at startup and closed with aclose() at shutdown.
    """

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        redirect_uri: str,
        token_url: str = "https://oauth2.googleapis.com/token",
        userinfo_url: str = "https://www.googleapis.com/oauth2/v2/userinfo",
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.client_id = client_id
        self.client_secret = client_secret
        self.redirect_uri = redirect_uri
        self.token_url = token_url
        self.userinfo_url = userinfo_url
        self._client = httpx.AsyncClient(timeout=timeout, transport=transport)

    @classmethod
    def from_settings(cls, transport: Optional[httpx.AsyncBaseTransport] = None) -> "GoogleOAuthClient":
        return cls(
            client_id=settings.GOOGLE_CLIENT_ID,
            client_secret=settings.GOOGLE_CLIENT_SECRET,
            redirect_uri=settings.GOOGLE_REDIRECT_URI,
            token_url=settings.GOOGLE_TOKEN_URL,
            userinfo_url=settings.GOOGLE_USERINFO_URL,
            timeout=settings.OAUTH_TIMEOUT_SECONDS,
            transport=transport,
        )

    async def aclose(self):
        await self._client.aclose()

    async def get_google_access_token_from_code(self, code: str) -> str:
        form = {
            "code": code,
            "grant_type": "authorization_code",
            "client_id": self.client_id,
            "client_secret": self.client_secret,
            "redirect_uri": self.redirect_uri,
        }

        try:
            # data= sends application/x-www-form-urlencoded
            response = await self._client.post(self.token_url, data=form)
        except httpx.HTTPError as e:
            logger.warning(
                "Google token request failed",
                extra={"error": str(e), "error_type": type(e).__name__}
            )
            raise OAuthExchangeError(OAuthErrorCode.FAILED_TO_GET_ACCESS_TOKEN) from e

        if not response.is_success:
            logger.warning(
                "Google token endpoint rejected code",
                extra={"status_code": response.status_code}
            )
            raise OAuthExchangeError(OAuthErrorCode.FAILED_TO_GET_ACCESS_TOKEN)

        try:
            access_token = response.json().get("access_token")
        except (ValueError, AttributeError) as e:
            raise OAuthExchangeError(OAuthErrorCode.FAILED_TO_GET_ACCESS_TOKEN) from e

        if not isinstance(access_token, str) or not access_token:
            raise OAuthExchangeError(OAuthErrorCode.FAILED_TO_GET_ACCESS_TOKEN)

        return access_token

    async def get_google_user_info(self, access_token: str) -> GoogleUserInfo:
        try:
            response = await self._client.get(
                self.userinfo_url,
                headers={"Authorization": f"Bearer {access_token}"},
            )
        except httpx.HTTPError as e:
            logger.warning(
                "Google userinfo request failed",
                extra={"error": str(e), "error_type": type(e).__name__}
            )
            raise OAuthExchangeError(OAuthErrorCode.FAILED_TO_GET_USER_INFO) from e

        if not response.is_success:
            logger.warning(
                "Google userinfo endpoint returned an error",
                extra={"status_code": response.status_code}
            )
            raise OAuthExchangeError(OAuthErrorCode.FAILED_TO_GET_USER_INFO)

        try:
            return GoogleUserInfo.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            logger.warning("Google userinfo did not match expected shape", extra={"error": str(e)})
            raise OAuthExchangeError(OAuthErrorCode.FAILED_TO_PARSE_USER_INFO) from e

    async def exchange_code(self, code: str) -> GoogleUserInfo:
        access_token = await self.get_google_access_token_from_code(code)
        return await self.get_google_user_info(access_token)
