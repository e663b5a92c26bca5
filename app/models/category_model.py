"""Category models."""
from pydantic import BaseModel, Field

from app.models.book_model import Book
from app.models.page_model import Page


class CategoryCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)


class Category(BaseModel):
    id: str
    name: str

    model_config = {"from_attributes": True}


class CategoryWrapper(BaseModel):
    """Category display fields plus one page of the category's books."""

    id: str
    name: str
    books: Page[Book]
