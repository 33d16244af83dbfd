from typing import Annotated
from fastapi import Depends, HTTPException, Request
from sqlalchemy.orm import Session
from jose import JWTError
from starlette import status
from services.auth_service import AuthService
from services.credential_store import CredentialStore
from services.google_oauth import GoogleOAuthClient
from services.token_service import TokenService
from middleware.rate_limiter import get_access_token


def get_db(request: Request):
    # Database is opened in main.lifespan and lives on app.state
    yield from request.app.state.database.session()

db_dependency = Annotated[Session, Depends(get_db)]


def get_google_client(request: Request) -> GoogleOAuthClient:
    return request.app.state.google_oauth


def get_auth_service(
    db: db_dependency,
    google: Annotated[GoogleOAuthClient, Depends(get_google_client)],
) -> AuthService:
    return AuthService(CredentialStore(db), google=google)

auth_service_dependency = Annotated[AuthService, Depends(get_auth_service)]


def get_current_user(request: Request):
    token = get_access_token(request)
    if not token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED,
                            detail="Not authenticated.")
    try:
        payload = TokenService.decode_access_token(token)
    except JWTError:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED,
                            detail="Could not validate credentials.")

    return {"email": payload["email"], "user_id": payload["id"]}


user_dependency = Annotated[dict, Depends(get_current_user)]
