"""Rating service: one rating per user and book, created or updated in place."""
from typing import List, Optional

from app.entities import Book, Rating
from app.errors import ValidationFailure, wrap_persistence_errors
from app.repositories import book_repository, rating_repository
from app.utils.logger import get_logger

logger = get_logger(__name__)

MIN_VOTE = 1
MAX_VOTE = 5


@wrap_persistence_errors("An error occurred during retrieving book ratings")
async def get_ratings_for_book(book_id: str) -> List[Rating]:
    return await rating_repository.find_by_book_id(book_id)


@wrap_persistence_errors("An error occurred during retrieving single book rating")
async def get_rating(book_id: str, user_id: str) -> Optional[Rating]:
    return await rating_repository.find_by_book_and_user(book_id, user_id)


@wrap_persistence_errors("An error occurred during saving book rating")
async def save_rating(vote: int, book_id: str, user_id: str) -> Optional[List[Rating]]:
    """Create or update the user's rating of a book.

    Returns the book's ratings after the write, or None when ``vote`` equals
    the stored vote and nothing was written.
    """
    if not MIN_VOTE <= vote <= MAX_VOTE:
        raise ValidationFailure(f"Vote must be between {MIN_VOTE} and {MAX_VOTE}")

    current = await rating_repository.find_by_book_and_user(book_id, user_id)
    if current is not None:
        if current.vote == vote:
            return None
        current.vote = vote
        await rating_repository.update_vote(current)
        logger.info("Changed rating to %d for book %s by user %s", vote, book_id, user_id)
    else:
        rating = Rating(vote=vote, book_id=book_id, user_id=user_id)
        await rating_repository.insert(rating)
        logger.info("Added rating %d for book %s by user %s", vote, book_id, user_id)
    return await rating_repository.find_by_book_id(book_id)


@wrap_persistence_errors("An error occurred during deleting book rating")
async def delete_rating(book: Book, rating: Rating) -> None:
    book.remove_rating(rating)
    await rating_repository.delete(rating.id)
    logger.info("Removed rating %s from book %s", rating.id, book.id)


@wrap_persistence_errors("An error occurred during deleting book rating")
async def remove_user_rating(book_id: str, user_id: str) -> bool:
    """Delete the user's rating of a book; False when there was none."""
    book = await book_repository.find_by_id(book_id)
    if book is None:
        return False
    book.ratings = await rating_repository.find_by_book_id(book_id)
    rating = next((item for item in book.ratings if item.user_id == user_id), None)
    if rating is None:
        return False
    await delete_rating(book, rating)
    return True
