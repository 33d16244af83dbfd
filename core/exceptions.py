"""
Application exceptions.

Services raise these; the auth pipeline converts them into typed results
(credential login) or a 500 outcome (Google login), and the routers map the
rest to HTTP errors.
"""

from enum import Enum


INTERNAL_SERVER_ERROR = "INTERNAL_SERVER_ERROR"


class OAuthErrorCode(str, Enum):
    FAILED_TO_GET_ACCESS_TOKEN = "FAILED_TO_GET_ACCESS_TOKEN"
    FAILED_TO_GET_USER_INFO = "FAILED_TO_GET_USER_INFO"
    FAILED_TO_PARSE_USER_INFO = "FAILED_TO_PARSE_USER_INFO"


class AppError(Exception):
    """Base class for errors raised by the service layer."""


class ConflictError(AppError):
    """A unique or foreign-key constraint rejected a write."""

    def __init__(self, table: str, detail: str = ""):
        self.table = table
        self.detail = detail
        super().__init__(f"Conflict on {table}: {detail}" if detail else f"Conflict on {table}")


class OAuthExchangeError(AppError):
    """Google code exchange or profile lookup failed."""

    def __init__(self, error_code: OAuthErrorCode):
        self.error_code = error_code
        super().__init__(error_code.value)


class InvalidRefreshTokenError(AppError):
    """Refresh token is unknown, soft-deleted or expired."""
