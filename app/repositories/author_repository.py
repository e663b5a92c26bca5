"""Author persistence."""
from typing import Optional

import asyncpg

from app.db.connection import connection
from app.entities import Author


async def exists_by_id(author_id: str) -> bool:
    async with connection() as conn:
        return await conn.fetchval("SELECT EXISTS(SELECT 1 FROM authors WHERE id=$1)", author_id)


async def find_by_id(author_id: str) -> Optional[Author]:
    async with connection() as conn:
        record = await conn.fetchrow("SELECT * FROM authors WHERE id=$1", author_id)
    return Author.from_record(record) if record else None


async def find_by_name(
    first_name: str, last_name: str, conn: Optional[asyncpg.Connection] = None
) -> Optional[Author]:
    """Case-insensitive lookup on the trimmed first and last name."""
    async with connection(conn) as conn:
        record = await conn.fetchrow(
            """
            SELECT * FROM authors
            WHERE lower(trim(first_name)) = lower(trim($1))
              AND lower(trim(last_name)) = lower(trim($2))
            ORDER BY created_at
            LIMIT 1
            """,
            first_name,
            last_name,
        )
    return Author.from_record(record) if record else None


async def save(author: Author, conn: Optional[asyncpg.Connection] = None) -> Author:
    async with connection(conn) as conn:
        record = await conn.fetchrow(
            """
            INSERT INTO authors (id, first_name, last_name)
            VALUES ($1, $2, $3)
            ON CONFLICT (id) DO UPDATE SET
                first_name = EXCLUDED.first_name,
                last_name = EXCLUDED.last_name,
                updated_at = now()
            RETURNING created_at, updated_at
            """,
            author.id,
            author.first_name,
            author.last_name,
        )
    author.created_at = record["created_at"]
    author.updated_at = record["updated_at"]
    return author
