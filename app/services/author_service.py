"""Author service."""
from typing import Optional

from app.config import settings
from app.entities import Author
from app.errors import NotFoundError, ValidationFailure, wrap_persistence_errors
from app.models.author_model import AuthorWrapper
from app.models.book_model import AuthorCreate, Book
from app.models.page_model import Page
from app.repositories import author_repository, book_repository
from app.utils.logger import get_logger
from app.utils.pagination import paginate

logger = get_logger(__name__)


@wrap_persistence_errors("An error occurred during checking author existence")
async def exists_by_id(author_id: str) -> bool:
    return await author_repository.exists_by_id(author_id)


@wrap_persistence_errors("An error occurred during retrieving author")
async def find_author_wrapper(
    author_id: str, page: int = 0, size: Optional[int] = None
) -> Optional[AuthorWrapper]:
    """Author with one page of their books, most recently updated first."""
    author = await author_repository.find_by_id(author_id)
    if author is None:
        return None
    author.books = await book_repository.find_by_author_id(author_id)

    books = sorted(author.books or [], key=lambda book: book.updated_at, reverse=True)
    page_slice = paginate(books, page, size or settings.default_page_size)
    return AuthorWrapper(
        id=author.id,
        first_name=author.first_name,
        last_name=author.last_name,
        books=Page[Book].from_slice(page_slice, Book),
    )


@wrap_persistence_errors("An error occurred during updating author")
async def update_author(author_id: str, dto: AuthorCreate) -> Author:
    author = await author_repository.find_by_id(author_id)
    if author is None:
        raise NotFoundError(f"Author with id: {author_id} cannot be found")
    namesake = await author_repository.find_by_name(dto.first_name, dto.last_name)
    if namesake is not None and namesake.id != author.id:
        raise ValidationFailure(f"Author {dto.first_name} {dto.last_name} already exists")

    author.first_name = dto.first_name.strip()
    author.last_name = dto.last_name.strip()
    await author_repository.save(author)
    logger.info("Updated author %s", author.id)
    return author
