from enum import Enum
from typing import Literal, Optional
from pydantic import BaseModel, EmailStr, Field, field_validator


class ResultCode(str, Enum):
    USER_LOGGED_IN = "USER_LOGGED_IN"
    USER_CREATED = "USER_CREATED"
    USER_ALREADY_EXISTS = "USER_ALREADY_EXISTS"
    INVALID_CREDENTIALS = "INVALID_CREDENTIALS"
    INVALID_SUBMISSION = "INVALID_SUBMISSION"
    UNKNOWN_ERROR = "UNKNOWN_ERROR"


class CredentialsBody(BaseModel):
    """Raw login/signup form; validated by the service so bad input maps to a result code."""
    email: str = ""
    password: str = ""


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=6)

    @field_validator('email')
    @classmethod
    def normalize_email(cls, value):
        return value.lower().strip()


class SignupRequest(LoginRequest):
    pass


class GoogleAuthRequest(BaseModel):
    code: str

    @field_validator('code')
    @classmethod
    def validate_code(cls, value):
        if not value or not value.strip():
            raise ValueError('Authorization code cannot be empty')
        return value


class RefreshTokenRequest(BaseModel):
    refresh_token: Optional[str] = None

    @field_validator('refresh_token')
    @classmethod
    def validate_token(cls, value):
        if value is not None and not value.strip():
            raise ValueError('Refresh token cannot be empty')
        return value


class GoogleUserInfo(BaseModel):
    """Profile returned by Google's userinfo endpoint."""
    name: str
    email: EmailStr
    picture: str

    @field_validator('email')
    @classmethod
    def normalize_email(cls, value):
        return value.lower().strip()


class SessionTokens(BaseModel):
    access_token: str
    refresh_token: str


class AuthResponse(BaseModel):
    type: Literal["success", "error"]
    result_code: ResultCode
    access_token: Optional[str] = None
    refresh_token: Optional[str] = None


class UserResponse(BaseModel):
    id: int
    email: EmailStr
    profile_picture_url: Optional[str] = None
