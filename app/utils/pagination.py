"""In-memory pagination helpers."""
import math
from dataclasses import dataclass, field
from typing import Callable, Generic, List, Sequence, TypeVar

T = TypeVar("T")
U = TypeVar("U")


def count_pages(total_elements: int, size: int) -> int:
    return math.ceil(total_elements / size) if size > 0 else 0


@dataclass
class PageSlice(Generic[T]):
    """One page of a larger collection plus the metadata needed to navigate it."""

    page: int
    size: int
    total_elements: int
    content: List[T] = field(default_factory=list)

    @property
    def total_pages(self) -> int:
        return count_pages(self.total_elements, self.size)

    def map(self, func: Callable[[T], U]) -> "PageSlice[U]":
        return PageSlice(
            page=self.page,
            size=self.size,
            total_elements=self.total_elements,
            content=[func(item) for item in self.content],
        )


def paginate(items: Sequence[T], page: int, size: int) -> PageSlice[T]:
    """Slice ``items`` to the requested page; out-of-range pages are empty, not errors."""
    if page < 0:
        raise ValueError("Page number cannot be negative")
    if size < 1:
        raise ValueError("Page size must be at least 1")
    start = page * size
    return PageSlice(
        page=page,
        size=size,
        total_elements=len(items),
        content=list(items[start:start + size]),
    )
