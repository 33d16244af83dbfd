from contextlib import asynccontextmanager
from fastapi import FastAPI, Request, status, HTTPException
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from core.config import settings
from core.database import Database
from core.exceptions import ConflictError
from core.logging_config import setup_logging, get_logger
from middleware import RequestIDMiddleware, get_request_id
from middleware.access_log import AccessLogMiddleware
from middleware.rate_limiter import limiter
from routers import auth, users
from services.google_oauth import GoogleOAuthClient

setup_logging(
    log_level=settings.LOG_LEVEL,
    log_dir=settings.LOG_DIR
)

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Storage and the OAuth client are owned by the app, not by module globals
    database = Database(settings.DATABASE_URL)
    if settings.DB_CREATE_TABLES:
        database.create_all()
    google_oauth = GoogleOAuthClient.from_settings()

    app.state.database = database
    app.state.google_oauth = google_oauth
    logger.info("Application startup complete", extra={"event": "startup", "env": settings.ENV})

    try:
        yield
    finally:
        await google_oauth.aclose()
        database.dispose()
        logger.info("Application shutting down", extra={"event": "shutdown"})


app = FastAPI(
    title="Chat Auth API",
    description="Credential and Google login with JWT sessions",
    version="1.0.0",
    lifespan=lifespan
)

# Cookies carry the session, so CORS must allow credentials
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(AccessLogMiddleware)
# Outermost, so the access log line already carries the request id
app.add_middleware(RequestIDMiddleware)


@app.get("/health")
async def health_check():
    return {"status": "Healthy"}


@app.exception_handler(ConflictError)
async def conflict_exception_handler(request: Request, exc: ConflictError):
    logger.warning(
        "Write rejected by a unique constraint",
        extra={"table": exc.table, "path": request.url.path}
    )
    return JSONResponse(
        status_code=status.HTTP_409_CONFLICT,
        content={"detail": "Resource already exists"}
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """
    Log unhandled exceptions with request context and hide internals from the client.
    """
    if isinstance(exc, (HTTPException, RequestValidationError)):
        raise exc

    logger.error(
        f"Unhandled exception: {str(exc)}",
        extra={
            "path": request.url.path,
            "method": request.method,
            "error_type": type(exc).__name__,
            "request_id": get_request_id(request)
        },
        exc_info=True
    )

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"}
    )


app.include_router(auth.router)
app.include_router(users.router)

app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
