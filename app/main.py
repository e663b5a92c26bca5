"""FastAPI entrypoint for the bookstore service."""
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.config import settings
from app.db.connection import close_pool
from app.errors import (
    GENERIC_ERROR_MESSAGE,
    ForbiddenError,
    NotFoundError,
    ServiceError,
    UnauthorizedError,
    ValidationFailure,
)
from app.routers import auth, authors, books, categories, checkout, comments, ratings, users
from app.services.login_attempt_service import LoginAttemptService
from app.utils.logger import configure_logging, get_logger

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging(settings.log_level)
    logger.info("Starting bookstore API (%s)", settings.app_env)
    yield
    await close_pool()


app = FastAPI(
    title="Bookstore API",
    version="0.1.0",
    description="Books, authors, categories, reader feedback, accounts and checkout.",
    lifespan=lifespan,
)

app.state.login_attempts = LoginAttemptService(
    max_attempts=settings.login_attempt_max,
    maxsize=settings.login_attempt_cache_size,
    ttl_seconds=settings.login_attempt_ttl_seconds,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"detail": message})


@app.exception_handler(NotFoundError)
async def not_found_handler(request: Request, exc: NotFoundError):
    return error_response(status.HTTP_404_NOT_FOUND, exc.message)


@app.exception_handler(ValidationFailure)
async def validation_failure_handler(request: Request, exc: ValidationFailure):
    return error_response(status.HTTP_400_BAD_REQUEST, exc.message)


@app.exception_handler(UnauthorizedError)
async def unauthorized_handler(request: Request, exc: UnauthorizedError):
    return error_response(status.HTTP_401_UNAUTHORIZED, exc.message)


@app.exception_handler(ForbiddenError)
async def forbidden_handler(request: Request, exc: ForbiddenError):
    return error_response(status.HTTP_403_FORBIDDEN, exc.message)


@app.exception_handler(ServiceError)
async def service_error_handler(request: Request, exc: ServiceError):
    # Cause already logged where it was wrapped
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, GENERIC_ERROR_MESSAGE)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    messages = []
    for error in exc.errors():
        field = ".".join(str(part) for part in error["loc"] if part != "body")
        messages.append(f"{field}: {error['msg']}" if field else error["msg"])
    return error_response(status.HTTP_400_BAD_REQUEST, "; ".join(messages))


@app.get("/health", tags=["health"])
async def healthcheck():
    """Basic health check."""
    return {"status": "ok", "env": settings.app_env}


app.include_router(auth.router, prefix="/auth", tags=["auth"])
app.include_router(users.router, prefix="/users", tags=["users"])
app.include_router(books.router, prefix="/books", tags=["books"])
app.include_router(authors.router, prefix="/authors", tags=["authors"])
app.include_router(categories.router, prefix="/category", tags=["categories"])
app.include_router(comments.router, prefix="/comments", tags=["comments"])
app.include_router(ratings.router, prefix="/ratings", tags=["ratings"])
app.include_router(checkout.router, prefix="/checkout", tags=["checkout"])
