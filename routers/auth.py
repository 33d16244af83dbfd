from typing import Optional
from fastapi import APIRouter, HTTPException, Request, Response
from fastapi.responses import JSONResponse
from starlette import status
from core.exceptions import InvalidRefreshTokenError
from schemas.auth_schemas import (AuthResponse, CredentialsBody, GoogleAuthRequest, RefreshTokenRequest,
ResultCode, SessionTokens)
from services.auth_service import AuthResult
from services.cookie_service import REFRESH_TOKEN_COOKIE, apply_cookies, clear_session_cookies
from middleware.rate_limiter import limiter
from utils.deps import auth_service_dependency
from utils.logger import get_logger

# Setup logger
logger = get_logger(__name__)


router = APIRouter(
    prefix="/auth",
    tags=["auth"]
)

ERROR_STATUS = {
    ResultCode.INVALID_CREDENTIALS: status.HTTP_401_UNAUTHORIZED,
    ResultCode.INVALID_SUBMISSION: status.HTTP_400_BAD_REQUEST,
    ResultCode.USER_ALREADY_EXISTS: status.HTTP_400_BAD_REQUEST,
    ResultCode.UNKNOWN_ERROR: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def _error_response(result: AuthResult) -> JSONResponse:
    return JSONResponse(
        status_code=ERROR_STATUS.get(result.result_code, status.HTTP_500_INTERNAL_SERVER_ERROR),
        content=result.to_response().model_dump(mode="json"),
    )


def _refresh_token_from(request: Request, body: Optional[RefreshTokenRequest]) -> Optional[str]:
    if body is not None and body.refresh_token:
        return body.refresh_token
    return request.cookies.get(REFRESH_TOKEN_COOKIE)


@router.post("/login", response_model=AuthResponse)
@limiter.limit("5/minute")
async def login_with_credentials(request: Request, response: Response, body: CredentialsBody,
    auth: auth_service_dependency):
    result = auth.authenticate_with_credentials(body.email, body.password)

    if result.session is None:
        return _error_response(result)

    apply_cookies(response, result.session.cookies)
    logger.info("User logged in successfully", extra={"email": body.email})

    return result.to_response()


@router.post("/signup", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit("3/minute")
async def signup(request: Request, response: Response, body: CredentialsBody,
    auth: auth_service_dependency):
    result = auth.create_user(body.email, body.password)

    if result.session is None:
        return _error_response(result)

    apply_cookies(response, result.session.cookies)
    return result.to_response()


@router.post("/google")
@limiter.limit("10/minute")
async def login_with_google(request: Request, response: Response, body: GoogleAuthRequest,
    auth: auth_service_dependency):
    """
    Redeems a Google authorization code.

    201 when the account was created, 200 when it already existed,
    500 with INTERNAL_SERVER_ERROR for any failure.
    """
    outcome = await auth.authenticate_with_google(body.code)

    response.status_code = outcome.code
    if outcome.session is not None:
        apply_cookies(response, outcome.session.cookies)

    return outcome.to_body()


@router.post("/refresh", response_model=SessionTokens)
@limiter.limit("10/minute")
async def refresh_token(request: Request, response: Response, auth: auth_service_dependency,
    body: Optional[RefreshTokenRequest] = None):
    """
    Rotate the refresh token (body or cookie) into a new session.
    """
    token = _refresh_token_from(request, body)
    if not token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Refresh token missing")

    try:
        session = auth.refresh_session(token)
    except InvalidRefreshTokenError as e:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=str(e))

    apply_cookies(response, session.cookies)
    logger.info("Session refreshed")

    return session.tokens()


@router.post("/logout", status_code=status.HTTP_200_OK)
@limiter.limit("10/minute")
async def logout(request: Request, response: Response, auth: auth_service_dependency,
    body: Optional[RefreshTokenRequest] = None):
    """
    Revoke the refresh token and clear both cookies.
    """
    token = _refresh_token_from(request, body)
    revoked = auth.logout(token) if token else False

    clear_session_cookies(response)
    logger.info("User logged out", extra={"revoked": revoked})

    return {"message": "Logged out successfully"}
