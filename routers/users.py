from fastapi import APIRouter, HTTPException, status, Request
from utils.deps import user_dependency, db_dependency
from schemas.auth_schemas import UserResponse
from services.credential_store import CredentialStore
from middleware.rate_limiter import limiter


router = APIRouter(
    prefix="/users",
    tags=["users"]
)

@router.get("/me", status_code=status.HTTP_200_OK, response_model=UserResponse)
@limiter.limit("30/minute")
async def get_user_info(request: Request, user: user_dependency, db: db_dependency):
    """
    Get current user info (protected endpoint).
    """
    model = CredentialStore(db).get_user_by_id(user.get("user_id"))

    if not model:
        raise HTTPException(status_code=404, detail="User not found")

    return UserResponse(id=model.id, email=model.email, profile_picture_url=model.profile_picture_url)
