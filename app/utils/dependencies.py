"""FastAPI dependencies for authentication and shared services."""
from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.models.user_model import TokenData
from app.services.login_attempt_service import LoginAttemptService
from app.utils.security import decode_access_token

FORBIDDEN_MESSAGE = "You need to login to access this page"
ACCESS_DENIED_MESSAGE = "You do not have permission to access this resource"

security = HTTPBearer(auto_error=False)


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
) -> TokenData:
    """Extract and validate JWT token from Authorization header."""
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=FORBIDDEN_MESSAGE,
            headers={"WWW-Authenticate": "Bearer"},
        )
    claims = decode_access_token(credentials.credentials)
    if claims is None or not claims.get("sub"):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token cannot be verified",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return TokenData(subject=claims["sub"], authorities=claims.get("authorities", []))


def require_authority(authority: str):
    """Dependency factory: the caller's token must carry ``authority``."""

    async def checker(current_user: TokenData = Depends(get_current_user)) -> TokenData:
        if authority not in current_user.authorities:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=ACCESS_DENIED_MESSAGE)
        return current_user

    return checker


def get_login_attempts(request: Request) -> LoginAttemptService:
    return request.app.state.login_attempts
