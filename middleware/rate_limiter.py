from slowapi import Limiter
from slowapi.util import get_remote_address
from fastapi import Request
from jose import JWTError
from core.config import settings
from services.token_service import TokenService
from services.cookie_service import ACCESS_TOKEN_COOKIE


def get_access_token(request: Request):
    """Access token from the Authorization header, else from the cookie."""
    header = request.headers.get("Authorization")
    if header and header.startswith("Bearer "):
        return header[len("Bearer "):]
    return request.cookies.get(ACCESS_TOKEN_COOKIE)


def get_user_id(request: Request):
    token = get_access_token(request)
    if token:
        try:
            payload = TokenService.decode_access_token(token)
            return f"user:{payload['id']}"
        except JWTError:
            pass

    return get_remote_address(request)

limiter = Limiter(
    key_func=get_user_id,
    default_limits=["200/hour"],
    enabled=settings.ENV != "testing"
)
