"""Category service."""
from typing import List, Optional

from app.config import settings
from app.entities import Category
from app.errors import NotFoundError, ValidationFailure, wrap_persistence_errors
from app.models.book_model import Book
from app.models.category_model import CategoryCreate, CategoryWrapper
from app.models.page_model import Page
from app.repositories import book_repository, category_repository
from app.utils.logger import get_logger
from app.utils.pagination import paginate

logger = get_logger(__name__)


@wrap_persistence_errors("An error occurred during checking category existence")
async def exists_by_id(category_id: str) -> bool:
    return await category_repository.exists_by_id(category_id)


@wrap_persistence_errors("An error occurred during retrieving categories")
async def get_all_categories() -> List[Category]:
    return await category_repository.find_all_sorted_by_name()


@wrap_persistence_errors("An error occurred during retrieving category")
async def find_category_wrapper(
    category_id: str, page: int = 0, size: Optional[int] = None
) -> Optional[CategoryWrapper]:
    category = await category_repository.find_by_id(category_id)
    if category is None:
        return None
    category.books = await book_repository.find_by_category_id(category_id)

    books = sorted(category.books or [], key=lambda book: book.updated_at, reverse=True)
    page_slice = paginate(books, page, size or settings.default_page_size)
    return CategoryWrapper(
        id=category.id,
        name=category.name,
        books=Page[Book].from_slice(page_slice, Book),
    )


@wrap_persistence_errors("An error occurred during saving category")
async def save_category(dto: CategoryCreate, category_id: Optional[str] = None) -> Category:
    """Create a category, or rename the one with ``category_id``. Names are unique ignoring case."""
    name = dto.name.strip()
    if category_id is None:
        category = Category(name=name)
    else:
        category = await category_repository.find_by_id(category_id)
        if category is None:
            raise NotFoundError(f"Category with id: {category_id} cannot be found")
        category.name = name

    existing = await category_repository.find_by_name(name)
    if existing is not None and existing.id != category.id:
        raise ValidationFailure(f"Category {name} already exists")
    await category_repository.save(category)
    logger.info("Saved category %s (%s)", category.id, category.name)
    return category
