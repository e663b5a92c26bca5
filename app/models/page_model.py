"""Generic paginated response."""
from typing import Generic, List, Type, TypeVar

from pydantic import BaseModel

from app.utils.pagination import PageSlice

T = TypeVar("T")


class Page(BaseModel, Generic[T]):
    content: List[T]
    page: int
    size: int
    total_elements: int
    total_pages: int

    @classmethod
    def from_slice(cls, page_slice: PageSlice, item_model: Type[BaseModel]) -> "Page":
        return cls(
            content=[item_model.model_validate(item) for item in page_slice.content],
            page=page_slice.page,
            size=page_slice.size,
            total_elements=page_slice.total_elements,
            total_pages=page_slice.total_pages,
        )
