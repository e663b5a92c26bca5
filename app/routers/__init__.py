"""API routers package."""
from . import auth, authors, books, categories, checkout, comments, ratings, users

__all__ = ["auth", "authors", "books", "categories", "checkout", "comments", "ratings", "users"]
