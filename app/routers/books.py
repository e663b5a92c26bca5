"""Book endpoints."""
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from app.config import settings
from app.models.book_model import Book, BookCreate, BookDetail
from app.models.page_model import Page
from app.services import book_service
from app.utils.dependencies import require_authority
from app.utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter()


def book_not_found(book_id: str) -> HTTPException:
    logger.info("Book with id %s not found", book_id)
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=f"Book with id: {book_id} cannot be found",
    )


@router.get("", response_model=Page[Book])
async def list_books(
    page: int = Query(0, ge=0, description="Page number, starting from 0"),
    size: int = Query(settings.default_page_size, ge=1, le=100, description="Number of books per page"),
):
    """List books, most recently updated first."""
    return Page[Book].from_slice(await book_service.list_books(page, size), Book)


@router.get("/search", response_model=Page[Book])
async def search_books(
    keyword: str = Query(..., min_length=1, description="Matches title, subtitle or author name"),
    page: int = Query(0, ge=0),
    size: int = Query(settings.default_page_size, ge=1, le=100),
):
    return Page[Book].from_slice(await book_service.search_books(keyword, page, size), Book)


@router.get("/promos", response_model=Page[Book])
async def list_books_with_promo(
    page: int = Query(0, ge=0),
    size: int = Query(settings.default_page_size, ge=1, le=100),
):
    return Page[Book].from_slice(await book_service.find_books_with_promo(page, size), Book)


@router.get("/active", response_model=Page[Book])
async def list_active_books(
    page: int = Query(0, ge=0),
    size: int = Query(settings.default_page_size, ge=1, le=100),
):
    return Page[Book].from_slice(await book_service.find_active_books(page, size), Book)


@router.get("/{book_id}", response_model=BookDetail)
async def get_book(book_id: str):
    """Get book details by ID; the description comes back as a list of paragraphs."""
    book = await book_service.find_book(book_id)
    if book is None:
        raise book_not_found(book_id)
    return book


@router.post(
    "",
    response_model=List[Book],
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_authority("book:create"))],
)
async def create_book(payload: BookCreate):
    """Create a book and return every book of its author."""
    if await book_service.find_duplicate(payload) is not None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Book '{payload.title}' by {payload.author.first_name} {payload.author.last_name} already exists",
        )
    return [Book.model_validate(book) for book in await book_service.save_book(payload)]


@router.put(
    "/{book_id}",
    response_model=List[Book],
    dependencies=[Depends(require_authority("book:update"))],
)
async def update_book(book_id: str, payload: BookCreate):
    if not await book_service.exists_by_id(book_id):
        raise book_not_found(book_id)
    books = await book_service.save_book(payload, book_id=book_id)
    return [Book.model_validate(book) for book in books]


@router.put(
    "/{book_id}/activation",
    response_model=Book,
    dependencies=[Depends(require_authority("book:activate"))],
)
async def update_book_activation(book_id: str, active: bool = Query(...)):
    book = await book_service.update_activation(book_id, active)
    if book is None:
        raise book_not_found(book_id)
    return Book.model_validate(book)


@router.delete(
    "/{book_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=[Depends(require_authority("book:delete"))],
)
async def delete_book(book_id: str):
    if not await book_service.exists_by_id(book_id):
        raise book_not_found(book_id)
    await book_service.delete_book(book_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
