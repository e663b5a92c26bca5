"""Services package."""
from . import (
    auth_service,
    author_service,
    book_service,
    category_service,
    checkout_service,
    comment_service,
    email_service,
    login_attempt_service,
    rating_service,
    user_service,
)

__all__ = [
    "auth_service",
    "author_service",
    "book_service",
    "category_service",
    "checkout_service",
    "comment_service",
    "email_service",
    "login_attempt_service",
    "rating_service",
    "user_service",
]
