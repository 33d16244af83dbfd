from dataclasses import dataclass
from datetime import datetime
from starlette.responses import Response
from core.config import settings
from models.refresh_tokens import RefreshToken
from services.token_service import MintedAccessToken
from utils.dates import as_utc

ACCESS_TOKEN_COOKIE = "access_token"
REFRESH_TOKEN_COOKIE = "refresh_token"


@dataclass(frozen=True)
class CookieDirective:
    """A cookie the HTTP layer should set on the outgoing response."""
    name: str
    value: str
    expires: datetime
    secure: bool = True
    httponly: bool = True
    samesite: str = "strict"
    path: str = "/"


def build_session_cookies(access: MintedAccessToken, refresh: RefreshToken) -> list[CookieDirective]:
    return [
        CookieDirective(
            name=ACCESS_TOKEN_COOKIE,
            value=access.token,
            expires=access.expires_at,
            secure=settings.COOKIE_SECURE,
        ),
        CookieDirective(
            name=REFRESH_TOKEN_COOKIE,
            value=refresh.token,
            expires=as_utc(refresh.expired_at),
            secure=settings.COOKIE_SECURE,
        ),
    ]


def apply_cookies(response: Response, directives: list[CookieDirective]):
    for cookie in directives:
        response.set_cookie(
            key=cookie.name,
            value=cookie.value,
            expires=cookie.expires,
            path=cookie.path,
            secure=cookie.secure,
            httponly=cookie.httponly,
            samesite=cookie.samesite,
        )


def clear_session_cookies(response: Response):
    for name in (ACCESS_TOKEN_COOKIE, REFRESH_TOKEN_COOKIE):
        response.delete_cookie(
            key=name,
            path="/",
            secure=settings.COOKIE_SECURE,
            httponly=True,
            samesite="strict",
        )
