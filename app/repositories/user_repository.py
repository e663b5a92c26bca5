"""User persistence."""
from typing import List, Optional, Tuple

import asyncpg

from app.db.connection import connection
from app.entities import User
from app.repositories import address_repository


async def exists_by_id(user_id: str) -> bool:
    async with connection() as conn:
        return await conn.fetchval("SELECT EXISTS(SELECT 1 FROM users WHERE id=$1)", user_id)


async def find_by_id(user_id: str, conn: Optional[asyncpg.Connection] = None) -> Optional[User]:
    async with connection(conn) as conn:
        record = await conn.fetchrow("SELECT * FROM users WHERE id=$1", user_id)
        if record is None:
            return None
        user = User.from_record(record)
        if user.address_id:
            user.address = await address_repository.find_by_id(user.address_id, conn=conn)
    return user


async def find_by_email(email: str, conn: Optional[asyncpg.Connection] = None) -> Optional[User]:
    async with connection(conn) as conn:
        record = await conn.fetchrow("SELECT * FROM users WHERE lower(email) = lower($1)", email)
    return User.from_record(record) if record else None


async def find_by_username(username: str, conn: Optional[asyncpg.Connection] = None) -> Optional[User]:
    async with connection(conn) as conn:
        record = await conn.fetchrow("SELECT * FROM users WHERE username=$1", username)
    return User.from_record(record) if record else None


async def find_by_username_or_email(login: str) -> Optional[User]:
    async with connection() as conn:
        record = await conn.fetchrow(
            "SELECT * FROM users WHERE username=$1 OR lower(email) = lower($1) LIMIT 1",
            login,
        )
    return User.from_record(record) if record else None


async def save(user: User, conn: Optional[asyncpg.Connection] = None) -> User:
    """Insert ``user`` together with its address, if it has a new one."""
    async with connection(conn) as conn:
        if user.address is not None:
            await address_repository.save(user.address, conn=conn)
        record = await conn.fetchrow(
            """
            INSERT INTO users (id, first_name, last_name, username, email, password_hash, role,
                               authorities, is_active, is_not_locked, address_id)
            VALUES ($1, $2, $3, $4, $5, $6, $7, $8, $9, $10, $11)
            RETURNING created_at, updated_at
            """,
            user.id,
            user.first_name,
            user.last_name,
            user.username,
            user.email,
            user.password_hash,
            user.role,
            user.authorities,
            user.is_active,
            user.is_not_locked,
            user.address_id,
        )
    user.created_at = record["created_at"]
    user.updated_at = record["updated_at"]
    return user


async def update_login_state(user: User) -> None:
    async with connection() as conn:
        await conn.execute(
            """
            UPDATE users SET last_login_date=$1, is_not_locked=$2, updated_at=now()
            WHERE id=$3
            """,
            user.last_login_date,
            user.is_not_locked,
            user.id,
        )


async def update_password(user_id: str, password_hash: str, conn: Optional[asyncpg.Connection] = None) -> None:
    async with connection(conn) as conn:
        await conn.execute(
            "UPDATE users SET password_hash=$1, updated_at=now() WHERE id=$2",
            password_hash,
            user_id,
        )


async def activate(user_id: str) -> bool:
    async with connection() as conn:
        updated = await conn.fetchval(
            "UPDATE users SET is_active=TRUE, updated_at=now() WHERE id=$1 RETURNING id",
            user_id,
        )
    return updated is not None


async def find_page(limit: int, offset: int) -> Tuple[List[User], int]:
    """Users ordered by last name."""
    async with connection() as conn:
        total = await conn.fetchval("SELECT count(*) FROM users")
        rows = await conn.fetch(
            "SELECT * FROM users ORDER BY last_name ASC, first_name ASC, id LIMIT $1 OFFSET $2",
            limit,
            offset,
        )
    return [User.from_record(row) for row in rows], total


async def search_by_keyword(keyword: str, limit: int, offset: int) -> Tuple[List[User], int]:
    """Users whose names, email or username contain ``keyword``, newest first."""
    where = """
        WHERE first_name ILIKE '%' || $1 || '%'
           OR last_name ILIKE '%' || $1 || '%'
           OR email ILIKE '%' || $1 || '%'
           OR username ILIKE '%' || $1 || '%'
    """
    async with connection() as conn:
        total = await conn.fetchval(f"SELECT count(*) FROM users {where}", keyword)
        rows = await conn.fetch(
            f"SELECT * FROM users {where} ORDER BY created_at DESC, id LIMIT $2 OFFSET $3",
            keyword,
            limit,
            offset,
        )
    return [User.from_record(row) for row in rows], total


async def update(user: User, conn: Optional[asyncpg.Connection] = None) -> User:
    """Write back profile, role and status fields; a new address is inserted first."""
    async with connection(conn) as conn:
        if user.address is not None:
            await address_repository.save(user.address, conn=conn)
        user.updated_at = await conn.fetchval(
            """
            UPDATE users SET first_name=$1, last_name=$2, username=$3, email=$4, role=$5,
                             authorities=$6, is_active=$7, is_not_locked=$8, address_id=$9,
                             updated_at=now()
            WHERE id=$10
            RETURNING updated_at
            """,
            user.first_name,
            user.last_name,
            user.username,
            user.email,
            user.role,
            user.authorities,
            user.is_active,
            user.is_not_locked,
            user.address_id,
            user.id,
        )
    return user


async def update_status(user_id: str, *, is_active: Optional[bool] = None,
                        is_not_locked: Optional[bool] = None) -> Optional[User]:
    """Set the given flags, leaving the others untouched; ``None`` when no such user."""
    async with connection() as conn:
        record = await conn.fetchrow(
            """
            UPDATE users SET is_active=COALESCE($1, is_active),
                             is_not_locked=COALESCE($2, is_not_locked),
                             updated_at=now()
            WHERE id=$3
            RETURNING *
            """,
            is_active,
            is_not_locked,
            user_id,
        )
    return User.from_record(record) if record else None


async def delete(user_id: str) -> None:
    async with connection() as conn:
        await conn.execute("DELETE FROM users WHERE id=$1", user_id)
