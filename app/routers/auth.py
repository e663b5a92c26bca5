"""Authentication endpoints."""
from fastapi import APIRouter, Depends, status

from app.models.user_model import LoginRequest, SignupRequest, Token, User
from app.services import auth_service, user_service
from app.services.login_attempt_service import LoginAttemptService
from app.utils.dependencies import get_login_attempts

router = APIRouter()


@router.post("/signup", response_model=User, status_code=status.HTTP_201_CREATED)
async def signup(payload: SignupRequest):
    """Register a new user. The account stays inactive until the emailed link is opened."""
    return User.model_validate(await user_service.register_user(payload))


@router.post("/login", response_model=Token)
async def login(
    payload: LoginRequest,
    login_attempts: LoginAttemptService = Depends(get_login_attempts),
):
    """Login with username or email and return an access token."""
    return await auth_service.login_user(payload.username, payload.password, login_attempts)
