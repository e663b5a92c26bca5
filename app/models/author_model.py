"""Author models."""
from pydantic import BaseModel

from app.models.book_model import Book
from app.models.page_model import Page


class AuthorWrapper(BaseModel):
    """Author display fields plus one page of the author's books."""

    id: str
    first_name: str
    last_name: str
    books: Page[Book]
