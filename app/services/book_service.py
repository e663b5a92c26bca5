"""Book service."""
from decimal import ROUND_CEILING, Decimal
from typing import List, Optional

from app.db.connection import transaction
from app.entities import Author, Book
from app.errors import NotFoundError, wrap_persistence_errors
from app.models.book_model import Book as BookResponse
from app.models.book_model import BookCreate, BookDetail
from app.repositories import author_repository, book_repository, category_repository, rating_repository
from app.utils.logger import get_logger
from app.utils.pagination import PageSlice

logger = get_logger(__name__)

CENT = Decimal("0.01")


def round_price(price: Optional[Decimal]) -> Optional[Decimal]:
    """Prices with more than two decimal places are rounded up to the next cent."""
    if price is None:
        return None
    return price.quantize(CENT, rounding=ROUND_CEILING)


def to_detail(book: Book) -> BookDetail:
    fields = BookResponse.model_validate(book).model_dump()
    fields["description"] = book.description_paragraphs()
    return BookDetail(**fields)


def _page(books: List[Book], total: int, page: int, size: int) -> PageSlice[Book]:
    return PageSlice(page=page, size=size, total_elements=total, content=books)


@wrap_persistence_errors("An error occurred during checking book existence")
async def exists_by_id(book_id: str) -> bool:
    return await book_repository.exists_by_id(book_id)


@wrap_persistence_errors("An error occurred during retrieving books")
async def list_books(page: int, size: int) -> PageSlice[Book]:
    books, total = await book_repository.find_page(size, page * size)
    return _page(books, total, page, size)


@wrap_persistence_errors("An error occurred during retrieving book")
async def find_book(book_id: str) -> Optional[BookDetail]:
    book = await book_repository.find_by_id(book_id)
    return to_detail(book) if book else None


@wrap_persistence_errors("An error occurred during searching books")
async def search_books(keyword: str, page: int, size: int) -> PageSlice[Book]:
    books, total = await book_repository.search_by_keyword(keyword.strip(), size, page * size)
    return _page(books, total, page, size)


@wrap_persistence_errors("An error occurred during retrieving books with promo price")
async def find_books_with_promo(page: int, size: int) -> PageSlice[Book]:
    books, total = await book_repository.find_with_promo(size, page * size)
    return _page(books, total, page, size)


@wrap_persistence_errors("An error occurred during retrieving active books")
async def find_active_books(page: int, size: int) -> PageSlice[Book]:
    books, total = await book_repository.find_active(size, page * size)
    return _page(books, total, page, size)


@wrap_persistence_errors("An error occurred during checking for duplicated book")
async def find_duplicate(dto: BookCreate) -> Optional[Book]:
    """An existing book with the same title by the same author, ignoring case."""
    first_name = dto.author.first_name.strip().casefold()
    last_name = dto.author.last_name.strip().casefold()
    for book in await book_repository.find_by_title(dto.title):
        author = book.author
        if (
            author is not None
            and author.first_name.strip().casefold() == first_name
            and author.last_name.strip().casefold() == last_name
        ):
            return book
    return None


@wrap_persistence_errors("An error occurred during saving book")
async def save_book(dto: BookCreate, book_id: Optional[str] = None) -> List[Book]:
    """Insert a new book, or update ``book_id``, and return all books of its author.

    The author is matched by name ignoring case and created when unknown.
    """
    async with transaction() as conn:
        existing = None
        if book_id is not None:
            existing = await book_repository.find_by_id(book_id, conn=conn)
            if existing is None:
                raise NotFoundError(f"Book with id: {book_id} cannot be found")

        author = await author_repository.find_by_name(dto.author.first_name, dto.author.last_name, conn=conn)
        if author is None:
            author = await author_repository.save(Author.from_dto(dto.author), conn=conn)
            logger.info("Created author %s %s", author.first_name, author.last_name)
        author.books = await book_repository.find_by_author_id(author.id, conn=conn)

        book = Book.from_dto(dto)
        if existing is not None:
            book.id = existing.id
            book.created_at = existing.created_at
        book.base_price = round_price(book.base_price)
        book.promo_price = round_price(book.promo_price)

        for category in await category_repository.find_by_ids(dto.category_ids, conn=conn):
            book.add_category(category)
        author.add_book(book)

        await book_repository.save(book, conn=conn)
    logger.info("Saved book %s '%s'", book.id, book.title)
    return author.books


@wrap_persistence_errors("An error occurred during changing book activation")
async def update_activation(book_id: str, active: bool) -> Optional[Book]:
    book = await book_repository.update_active(book_id, active)
    if book is not None:
        logger.info("Book %s active=%s", book_id, active)
    return book


@wrap_persistence_errors("An error occurred during deleting book")
async def delete_book(book_id: str) -> None:
    async with transaction() as conn:
        await rating_repository.delete_by_book_id(book_id, conn=conn)
        await book_repository.delete(book_id, conn=conn)
    logger.info("Deleted book %s", book_id)
