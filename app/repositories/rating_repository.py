"""Rating persistence."""
from typing import List, Optional

import asyncpg

from app.db.connection import connection
from app.entities import Rating


async def find_by_book_id(book_id: str) -> List[Rating]:
    async with connection() as conn:
        rows = await conn.fetch("SELECT * FROM ratings WHERE book_id=$1", book_id)
    return [Rating.from_record(row) for row in rows]


async def find_by_book_and_user(book_id: str, user_id: str) -> Optional[Rating]:
    async with connection() as conn:
        record = await conn.fetchrow(
            "SELECT * FROM ratings WHERE book_id=$1 AND user_id=$2",
            book_id,
            user_id,
        )
    return Rating.from_record(record) if record else None


async def insert(rating: Rating) -> Rating:
    """Insert a new rating; the (book_id, user_id) unique constraint rejects duplicates."""
    async with connection() as conn:
        record = await conn.fetchrow(
            """
            INSERT INTO ratings (id, vote, book_id, user_id)
            VALUES ($1, $2, $3, $4)
            RETURNING created_at, updated_at
            """,
            rating.id,
            rating.vote,
            rating.book_id,
            rating.user_id,
        )
    rating.created_at = record["created_at"]
    rating.updated_at = record["updated_at"]
    return rating


async def update_vote(rating: Rating) -> Rating:
    async with connection() as conn:
        rating.updated_at = await conn.fetchval(
            "UPDATE ratings SET vote=$1, updated_at=now() WHERE id=$2 RETURNING updated_at",
            rating.vote,
            rating.id,
        )
    return rating


async def delete(rating_id: str) -> None:
    async with connection() as conn:
        await conn.execute("DELETE FROM ratings WHERE id=$1", rating_id)


async def delete_by_book_id(book_id: str, conn: Optional[asyncpg.Connection] = None) -> None:
    async with connection(conn) as conn:
        await conn.execute("DELETE FROM ratings WHERE book_id=$1", book_id)
