"""Book persistence."""
from typing import Dict, List, Optional, Sequence, Tuple

import asyncpg

from app.db.connection import connection
from app.entities import Author, Book, Category

BOOK_SELECT = """
    SELECT b.*, a.first_name AS author_first_name, a.last_name AS author_last_name
    FROM books b
    JOIN authors a ON a.id = b.author_id
"""
BOOK_COUNT = "SELECT COUNT(*) FROM books b JOIN authors a ON a.id = b.author_id"


def _to_book(record: asyncpg.Record) -> Book:
    book = Book.from_record(record)
    book.author = Author(
        id=record["author_id"],
        first_name=record["author_first_name"],
        last_name=record["author_last_name"],
    )
    return book


async def _attach_categories(conn: asyncpg.Connection, books: List[Book]) -> List[Book]:
    if not books:
        return books
    by_id: Dict[str, Book] = {book.id: book for book in books}
    rows = await conn.fetch(
        """
        SELECT bc.book_id, c.id, c.name
        FROM books_categories bc
        JOIN categories c ON c.id = bc.category_id
        WHERE bc.book_id = ANY($1::varchar[])
        ORDER BY c.name
        """,
        list(by_id),
    )
    for row in rows:
        by_id[row["book_id"]].categories.append(Category(id=row["id"], name=row["name"]))
    return books


async def _fetch_books(conn: asyncpg.Connection, query: str, *params) -> List[Book]:
    rows = await conn.fetch(query, *params)
    return await _attach_categories(conn, [_to_book(row) for row in rows])


async def _find_page(where: str, params: Sequence, limit: int, offset: int) -> Tuple[List[Book], int]:
    next_param = len(params) + 1
    async with connection() as conn:
        total = await conn.fetchval(f"{BOOK_COUNT} {where}", *params)
        books = await _fetch_books(
            conn,
            f"{BOOK_SELECT} {where} ORDER BY b.updated_at DESC, b.id "
            f"LIMIT ${next_param} OFFSET ${next_param + 1}",
            *params,
            limit,
            offset,
        )
    return books, total


async def exists_by_id(book_id: str, conn: Optional[asyncpg.Connection] = None) -> bool:
    async with connection(conn) as conn:
        return await conn.fetchval("SELECT EXISTS(SELECT 1 FROM books WHERE id=$1)", book_id)


async def find_by_id(book_id: str, conn: Optional[asyncpg.Connection] = None) -> Optional[Book]:
    async with connection(conn) as conn:
        books = await _fetch_books(conn, f"{BOOK_SELECT} WHERE b.id=$1", book_id)
    return books[0] if books else None


async def find_page(limit: int, offset: int) -> Tuple[List[Book], int]:
    return await _find_page("", (), limit, offset)


async def search_by_keyword(keyword: str, limit: int, offset: int) -> Tuple[List[Book], int]:
    where = """
        WHERE b.title ILIKE $1 OR b.subtitle ILIKE $1
           OR a.first_name ILIKE $1 OR a.last_name ILIKE $1
    """
    return await _find_page(where, (f"%{keyword}%",), limit, offset)


async def find_with_promo(limit: int, offset: int) -> Tuple[List[Book], int]:
    return await _find_page("WHERE b.promo_price IS NOT NULL", (), limit, offset)


async def find_active(limit: int, offset: int) -> Tuple[List[Book], int]:
    return await _find_page("WHERE b.active", (), limit, offset)


async def find_by_author_id(author_id: str, conn: Optional[asyncpg.Connection] = None) -> List[Book]:
    async with connection(conn) as conn:
        return await _fetch_books(conn, f"{BOOK_SELECT} WHERE b.author_id=$1", author_id)


async def find_by_category_id(category_id: str) -> List[Book]:
    async with connection() as conn:
        return await _fetch_books(
            conn,
            f"""
            {BOOK_SELECT}
            JOIN books_categories bc ON bc.book_id = b.id
            WHERE bc.category_id=$1
            """,
            category_id,
        )


async def find_by_title(title: str) -> List[Book]:
    async with connection() as conn:
        return await _fetch_books(conn, f"{BOOK_SELECT} WHERE lower(b.title) = lower($1)", title)


async def lock_units_in_stock(book_id: str, conn: asyncpg.Connection) -> Optional[int]:
    """Read the stock level and hold a row lock until the transaction ends."""
    return await conn.fetchval("SELECT units_in_stock FROM books WHERE id=$1 FOR UPDATE", book_id)


async def update_units_in_stock(book_id: str, units_in_stock: int, conn: asyncpg.Connection) -> None:
    await conn.execute(
        "UPDATE books SET units_in_stock=$1, updated_at=now() WHERE id=$2",
        units_in_stock,
        book_id,
    )


async def save(book: Book, conn: Optional[asyncpg.Connection] = None) -> Book:
    """Insert or update ``book`` and replace its category links."""
    async with connection(conn) as conn:
        record = await conn.fetchrow(
            """
            INSERT INTO books (id, title, subtitle, description, image_url, issue_year, pages,
                               is_hardcover, author_id, base_price, promo_price, active, units_in_stock)
            VALUES ($1, $2, $3, $4, $5, $6, $7, $8, $9, $10, $11, $12, $13)
            ON CONFLICT (id) DO UPDATE SET
                title = EXCLUDED.title,
                subtitle = EXCLUDED.subtitle,
                description = EXCLUDED.description,
                image_url = EXCLUDED.image_url,
                issue_year = EXCLUDED.issue_year,
                pages = EXCLUDED.pages,
                is_hardcover = EXCLUDED.is_hardcover,
                author_id = EXCLUDED.author_id,
                base_price = EXCLUDED.base_price,
                promo_price = EXCLUDED.promo_price,
                active = EXCLUDED.active,
                units_in_stock = EXCLUDED.units_in_stock,
                updated_at = now()
            RETURNING created_at, updated_at
            """,
            book.id,
            book.title,
            book.subtitle,
            book.description,
            book.image_url,
            book.issue_year,
            book.pages,
            book.is_hardcover,
            book.author_id,
            book.base_price,
            book.promo_price,
            book.active,
            book.units_in_stock,
        )
        await conn.execute("DELETE FROM books_categories WHERE book_id=$1", book.id)
        if book.categories:
            await conn.executemany(
                "INSERT INTO books_categories (book_id, category_id) VALUES ($1, $2)",
                [(book.id, category.id) for category in book.categories],
            )
    book.created_at = record["created_at"]
    book.updated_at = record["updated_at"]
    return book


async def update_active(book_id: str, active: bool) -> Optional[Book]:
    async with connection() as conn:
        updated = await conn.fetchval(
            "UPDATE books SET active=$1, updated_at=now() WHERE id=$2 RETURNING id",
            active,
            book_id,
        )
        if updated is None:
            return None
        return await find_by_id(book_id, conn=conn)


async def delete(book_id: str, conn: Optional[asyncpg.Connection] = None) -> None:
    async with connection(conn) as conn:
        await conn.execute("DELETE FROM books WHERE id=$1", book_id)
