"""Category persistence."""
from typing import List, Optional, Sequence

import asyncpg

from app.db.connection import connection
from app.entities import Category


async def exists_by_id(category_id: str) -> bool:
    async with connection() as conn:
        return await conn.fetchval("SELECT EXISTS(SELECT 1 FROM categories WHERE id=$1)", category_id)


async def find_by_id(category_id: str) -> Optional[Category]:
    async with connection() as conn:
        record = await conn.fetchrow("SELECT * FROM categories WHERE id=$1", category_id)
    return Category.from_record(record) if record else None


async def find_by_ids(category_ids: Sequence[str], conn: Optional[asyncpg.Connection] = None) -> List[Category]:
    async with connection(conn) as conn:
        rows = await conn.fetch(
            "SELECT * FROM categories WHERE id = ANY($1::varchar[]) ORDER BY name",
            list(category_ids),
        )
    return [Category.from_record(row) for row in rows]


async def find_by_name(name: str) -> Optional[Category]:
    async with connection() as conn:
        record = await conn.fetchrow("SELECT * FROM categories WHERE lower(name) = lower($1)", name)
    return Category.from_record(record) if record else None


async def find_all_sorted_by_name() -> List[Category]:
    async with connection() as conn:
        rows = await conn.fetch("SELECT * FROM categories ORDER BY name ASC")
    return [Category.from_record(row) for row in rows]


async def save(category: Category, conn: Optional[asyncpg.Connection] = None) -> Category:
    async with connection(conn) as conn:
        await conn.execute(
            """
            INSERT INTO categories (id, name) VALUES ($1, $2)
            ON CONFLICT (id) DO UPDATE SET name = EXCLUDED.name
            """,
            category.id,
            category.name,
        )
    return category
