"""User endpoints: account lifecycle for everyone, administration for moderators."""
from fastapi import APIRouter, Depends, HTTPException, Query, status

from app.config import settings
from app.models.page_model import Page
from app.models.user_model import AccountDetails, MessageResponse, ResetPasswordRequest, TokenData, User, UserCreate
from app.services import user_service
from app.services.login_attempt_service import LoginAttemptService
from app.utils.dependencies import ACCESS_DENIED_MESSAGE, get_current_user, get_login_attempts, require_authority

router = APIRouter()


def user_not_found(user_id: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=f"User with id: {user_id} cannot be found",
    )


@router.get("", response_model=Page[User], dependencies=[Depends(require_authority("user:read"))])
async def list_users(
    page: int = Query(0, ge=0),
    size: int = Query(settings.users_page_size, ge=1, le=100),
):
    """All users ordered by last name."""
    return Page[User].from_slice(await user_service.find_users(page, size), User)


@router.post(
    "",
    response_model=User,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_authority("user:update"))],
)
async def add_user(
    payload: UserCreate,
    role: str = Query(..., description="user, moderator or admin"),
    is_active: bool = Query(True, alias="isActive"),
    is_not_locked: bool = Query(True, alias="isNonLocked"),
):
    return User.model_validate(await user_service.add_new_user(payload, role, is_active, is_not_locked))


@router.get("/activate", response_model=MessageResponse)
async def activate(user_id: str = Query(..., alias="userId")):
    """Target of the link sent in the activation email."""
    if not await user_service.activate_user(user_id):
        raise user_not_found(user_id)
    return MessageResponse(message="Your account has been activated")


@router.post("/reset-password", response_model=MessageResponse)
async def reset_password(payload: ResetPasswordRequest):
    await user_service.reset_password(payload.email)
    return MessageResponse(message=f"A new password has been sent to {payload.email}")


@router.get("/me", response_model=User)
async def read_current_user(current_user: TokenData = Depends(get_current_user)):
    """Get current authenticated user's profile."""
    user = await user_service.find_user_by_id(current_user.subject)
    if user is None:
        raise user_not_found(current_user.subject)
    return User.model_validate(user)


@router.get("/search", response_model=Page[User], dependencies=[Depends(require_authority("user:read"))])
async def search_users(
    keyword: str = Query(""),
    page: int = Query(0, ge=0),
    size: int = Query(settings.default_page_size, ge=1, le=100),
):
    """Users whose names, email or username contain the keyword, newest first."""
    return Page[User].from_slice(await user_service.search_users(keyword, page, size), User)


@router.get(
    "/username/{username}",
    response_model=User,
    dependencies=[Depends(require_authority("user:read"))],
)
async def get_user_by_username(username: str):
    user = await user_service.find_user_by_login(username)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"User with username: {username} cannot be found",
        )
    return User.model_validate(user)


@router.put("/own/{user_id}", response_model=User)
async def update_own_account(
    user_id: str,
    payload: AccountDetails,
    current_user: TokenData = Depends(get_current_user),
):
    """Profile update by the account owner; role and status stay as they are."""
    if current_user.subject != user_id:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=ACCESS_DENIED_MESSAGE)
    return User.model_validate(await user_service.update_user(user_id, payload))


@router.get(
    "/{user_id}",
    response_model=User,
    dependencies=[Depends(require_authority("user:read"))],
)
async def get_user(user_id: str):
    user = await user_service.find_user_by_id(user_id)
    if user is None:
        raise user_not_found(user_id)
    return User.model_validate(user)


@router.put("/{user_id}", response_model=User, dependencies=[Depends(require_authority("user:update"))])
async def update_user(
    user_id: str,
    payload: AccountDetails,
    role: str = Query(..., description="user, moderator or admin"),
    is_active: bool = Query(True, alias="isActive"),
    is_not_locked: bool = Query(True, alias="isNonLocked"),
):
    user = await user_service.update_user(user_id, payload, role, is_active, is_not_locked)
    return User.model_validate(user)


@router.put(
    "/{user_id}/activation",
    response_model=User,
    dependencies=[Depends(require_authority("user:activate"))],
)
async def update_activation(user_id: str, active: bool = Query(...)):
    user = await user_service.update_status(user_id, is_active=active)
    if user is None:
        raise user_not_found(user_id)
    return User.model_validate(user)


@router.put("/{user_id}/lock", response_model=User, dependencies=[Depends(require_authority("user:lock"))])
async def update_lock(
    user_id: str,
    locked: bool = Query(...),
    login_attempts: LoginAttemptService = Depends(get_login_attempts),
):
    """Lock or unlock an account; unlocking also clears its failed login attempts."""
    user = await user_service.update_status(user_id, is_not_locked=not locked)
    if user is None:
        raise user_not_found(user_id)
    if not locked:
        login_attempts.evict(user.login_name)
    return User.model_validate(user)


@router.delete(
    "/{username}",
    response_model=MessageResponse,
    dependencies=[Depends(require_authority("user:delete"))],
)
async def delete_user(username: str):
    await user_service.delete_user(username)
    return MessageResponse(message=f"User with username: {username} successfully deleted")
