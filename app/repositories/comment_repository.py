"""Comment persistence."""
from typing import List

from app.db.connection import connection
from app.entities import Comment, User


async def find_by_book_id(book_id: str) -> List[Comment]:
    """All comments of a book in insertion order (by ``seq``), each with its commenting user attached."""
    async with connection() as conn:
        rows = await conn.fetch(
            """
            SELECT c.*, u.first_name AS user_first_name, u.last_name AS user_last_name,
                   u.email AS user_email
            FROM comments c
            JOIN users u ON u.id = c.user_id
            WHERE c.book_id=$1
            ORDER BY c.seq
            """,
            book_id,
        )
    comments = []
    for row in rows:
        comment = Comment.from_record(row)
        comment.user = User(
            id=row["user_id"],
            first_name=row["user_first_name"],
            last_name=row["user_last_name"],
            email=row["user_email"],
        )
        comments.append(comment)
    return comments


async def save(comment: Comment) -> Comment:
    async with connection() as conn:
        record = await conn.fetchrow(
            """
            INSERT INTO comments (id, content, book_id, user_id)
            VALUES ($1, $2, $3, $4)
            RETURNING created_at, updated_at
            """,
            comment.id,
            comment.content,
            comment.book_id,
            comment.user_id,
        )
    comment.created_at = record["created_at"]
    comment.updated_at = record["updated_at"]
    return comment


async def delete(comment_id: str) -> bool:
    async with connection() as conn:
        deleted = await conn.fetchval("DELETE FROM comments WHERE id=$1 RETURNING id", comment_id)
    return deleted is not None
