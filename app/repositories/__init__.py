"""Persistence access layer: SQL over the asyncpg pool, returning entities."""
from . import (
    address_repository,
    author_repository,
    book_repository,
    category_repository,
    comment_repository,
    order_repository,
    rating_repository,
    user_repository,
)

__all__ = [
    "address_repository",
    "author_repository",
    "book_repository",
    "category_repository",
    "comment_repository",
    "order_repository",
    "rating_repository",
    "user_repository",
]
