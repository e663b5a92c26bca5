"""Authentication helpers."""
from datetime import datetime, timezone

from app.errors import (
    AccountDisabledError,
    AccountLockedError,
    BadCredentialsError,
    wrap_persistence_errors,
)
from app.models.user_model import Token
from app.repositories import user_repository
from app.services.login_attempt_service import LoginAttemptService
from app.utils.logger import get_logger
from app.utils.security import create_access_token, verify_password

logger = get_logger(__name__)

BAD_CREDENTIALS_MESSAGE = "Username or password is incorrect"
ACCOUNT_LOCKED_MESSAGE = "Your account has been locked. Please contact administration"
ACCOUNT_DISABLED_MESSAGE = "Your account has not been activated yet"


@wrap_persistence_errors("An error occurred during logging in")
async def login_user(login: str, password: str, login_attempts: LoginAttemptService) -> Token:
    user = await user_repository.find_by_username_or_email(login)
    if user is None:
        login_attempts.add_failed_attempt(login)
        raise BadCredentialsError(BAD_CREDENTIALS_MESSAGE)

    attempts_key = user.login_name
    if user.is_not_locked and login_attempts.exceeded_max_attempts(attempts_key):
        user.is_not_locked = False
        await user_repository.update_login_state(user)
        logger.warning("Locked user %s after too many failed logins", user.id)
    if not user.is_not_locked:
        login_attempts.evict(attempts_key)
        raise AccountLockedError(ACCOUNT_LOCKED_MESSAGE)

    if not verify_password(password, user.password_hash):
        login_attempts.add_failed_attempt(attempts_key)
        raise BadCredentialsError(BAD_CREDENTIALS_MESSAGE)
    if not user.is_active:
        raise AccountDisabledError(ACCOUNT_DISABLED_MESSAGE)

    login_attempts.evict(attempts_key)
    user.last_login_date = datetime.now(timezone.utc)
    await user_repository.update_login_state(user)
    logger.info("User %s logged in", user.id)
    return Token(access_token=create_access_token(subject=user.id, authorities=user.authorities))
