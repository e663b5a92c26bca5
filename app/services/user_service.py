"""User account service."""
from typing import Optional

import asyncpg

from app.config import settings
from app.db.connection import transaction
from app.entities import Address, User
from app.entities.account import Role
from app.errors import (
    EmailExistsError,
    NotFoundError,
    UsernameExistsError,
    ValidationFailure,
    wrap_persistence_errors,
)
from app.models.user_model import AccountDetails, SignupRequest, UserCreate
from app.repositories import address_repository, user_repository
from app.services import email_service
from app.utils.logger import get_logger
from app.utils.pagination import PageSlice
from app.utils.password_generator import generate_password
from app.utils.security import hash_password

logger = get_logger(__name__)


def activation_link(user_id: str) -> str:
    return f"{settings.app_base_link.rstrip('/')}/users/activate?userId={user_id}"


def parse_role(name: str) -> Role:
    try:
        return Role.from_name(name)
    except ValueError as exc:
        raise ValidationFailure(f"Unknown role: {name}") from exc


async def _check_available(dto: AccountDetails, conn: asyncpg.Connection, current: Optional[User] = None) -> None:
    """Email and username must not belong to anyone but ``current``."""
    owner = await user_repository.find_by_email(dto.email, conn=conn)
    if owner is not None and (current is None or owner.id != current.id):
        raise EmailExistsError(f"Email {dto.email} is already taken")
    if dto.username:
        owner = await user_repository.find_by_username(dto.username, conn=conn)
        if owner is not None and (current is None or owner.id != current.id):
            raise UsernameExistsError(f"Username {dto.username} is already taken")


async def _attach_address(user: User, dto: AccountDetails, conn: asyncpg.Connection) -> None:
    if dto.address is not None:
        address = Address.from_dto(dto.address)
        user.set_address(await address_repository.find_matching(address, conn=conn) or address)


@wrap_persistence_errors("An error occurred during checking user existence")
async def exists_by_id(user_id: str) -> bool:
    return await user_repository.exists_by_id(user_id)


@wrap_persistence_errors("An error occurred during retrieving user")
async def find_user_by_id(user_id: str) -> Optional[User]:
    return await user_repository.find_by_id(user_id)


@wrap_persistence_errors("An error occurred during retrieving user by username or email")
async def find_user_by_login(login: str) -> Optional[User]:
    return await user_repository.find_by_username_or_email(login)


@wrap_persistence_errors("An error occurred during retrieving users")
async def find_users(page: int, size: int) -> PageSlice[User]:
    users, total = await user_repository.find_page(size, page * size)
    return PageSlice(page=page, size=size, total_elements=total, content=users)


@wrap_persistence_errors("An error occurred during searching users")
async def search_users(keyword: str, page: int, size: int) -> PageSlice[User]:
    users, total = await user_repository.search_by_keyword(keyword.strip(), size, page * size)
    return PageSlice(page=page, size=size, total_elements=total, content=users)


@wrap_persistence_errors("An error occurred during registering user")
async def register_user(signup: SignupRequest) -> User:
    """Store a new inactive user and mail them the activation link.

    If the email cannot be delivered the registration is rolled back.
    """
    async with transaction() as conn:
        await _check_available(signup, conn)
        user = User.from_signup(signup, hash_password(signup.password), Role.USER)
        await _attach_address(user, signup, conn)

        await user_repository.save(user, conn=conn)
        await email_service.send_activation_email(user.first_name, activation_link(user.id), user.email)
    logger.info("Registered user %s", user.id)
    return user


@wrap_persistence_errors("An error occurred during adding new user")
async def add_new_user(dto: UserCreate, role_name: str, is_active: bool = True, is_not_locked: bool = True) -> User:
    """Open an account with the given role and mail the password to its owner."""
    role = parse_role(role_name)
    async with transaction() as conn:
        await _check_available(dto, conn)
        password = dto.password or generate_password()
        user = User.from_signup(dto, hash_password(password), role)
        user.is_active = is_active
        user.is_not_locked = is_not_locked
        await _attach_address(user, dto, conn)

        await user_repository.save(user, conn=conn)
        await email_service.send_new_account_email(user.first_name, activation_link(user.id), password, user.email)
    logger.info("Added user %s with role %s", user.id, user.role)
    return user


@wrap_persistence_errors("An error occurred during updating user")
async def update_user(
    user_id: str,
    dto: AccountDetails,
    role_name: Optional[str] = None,
    is_active: Optional[bool] = None,
    is_not_locked: Optional[bool] = None,
) -> User:
    """Replace the profile of a user; role and flags change only when given."""
    role = parse_role(role_name) if role_name is not None else None
    async with transaction() as conn:
        user = await user_repository.find_by_id(user_id, conn=conn)
        if user is None:
            raise NotFoundError(f"User with id: {user_id} cannot be found")
        await _check_available(dto, conn, current=user)

        user.apply_details(dto)
        if role is not None:
            user.grant_role(role)
        if is_active is not None:
            user.is_active = is_active
        if is_not_locked is not None:
            user.is_not_locked = is_not_locked
        await _attach_address(user, dto, conn)
        await user_repository.update(user, conn=conn)
    logger.info("Updated user %s", user.id)
    return user


@wrap_persistence_errors("An error occurred during changing user status")
async def update_status(
    user_id: str, is_active: Optional[bool] = None, is_not_locked: Optional[bool] = None
) -> Optional[User]:
    user = await user_repository.update_status(user_id, is_active=is_active, is_not_locked=is_not_locked)
    if user is not None:
        logger.info("User %s is now active=%s, not locked=%s", user.id, user.is_active, user.is_not_locked)
    return user


@wrap_persistence_errors("An error occurred during deleting user")
async def delete_user(login: str) -> None:
    """Delete the user with ``login`` as username or email, with their comments and ratings."""
    user = await user_repository.find_by_username_or_email(login)
    if user is None:
        raise NotFoundError(f"User with username: {login} cannot be found")
    await user_repository.delete(user.id)
    logger.info("Deleted user %s", user.id)


@wrap_persistence_errors("An error occurred during activating user")
async def activate_user(user_id: str) -> bool:
    activated = await user_repository.activate(user_id)
    if activated:
        logger.info("Activated user %s", user_id)
    return activated


@wrap_persistence_errors("An error occurred during resetting password")
async def reset_password(email: str) -> None:
    """Replace the user's password with a generated one and mail it to them."""
    async with transaction() as conn:
        user = await user_repository.find_by_email(email, conn=conn)
        if user is None:
            raise NotFoundError(f"User with email: {email} cannot be found")
        password = generate_password()
        await user_repository.update_password(user.id, hash_password(password), conn=conn)
        await email_service.send_password_reset_email(user.first_name, password, user.email)
    logger.info("Reset password of user %s", user.id)
