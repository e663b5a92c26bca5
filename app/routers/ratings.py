"""Rating endpoints."""
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import JSONResponse

from app.models.rating_model import Rating, RatingCreate
from app.models.user_model import TokenData
from app.services import book_service, rating_service, user_service
from app.utils.dependencies import ACCESS_DENIED_MESSAGE, require_authority
from app.utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter()

RATING_UNCHANGED_MESSAGE = "Rating has not been changed"


async def ensure_book_and_user(book_id: str, user_id: str) -> None:
    if not await book_service.exists_by_id(book_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Book with id: {book_id} cannot be found",
        )
    if not await user_service.exists_by_id(user_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"User with id: {user_id} cannot be found",
        )


@router.get("/{book_id}", response_model=List[Rating])
async def list_ratings(book_id: str):
    if not await book_service.exists_by_id(book_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Book with id: {book_id} cannot be found",
        )
    return [Rating.model_validate(rating) for rating in await rating_service.get_ratings_for_book(book_id)]


@router.get("/{book_id}/user/{user_id}", response_model=Rating)
async def get_rating(book_id: str, user_id: str):
    """The user's rating of a book, or a zero vote when they have not rated it."""
    await ensure_book_and_user(book_id, user_id)
    rating = await rating_service.get_rating(book_id, user_id)
    return Rating.model_validate(rating) if rating is not None else Rating.placeholder()


@router.post(
    "/{book_id}/user/{user_id}",
    response_model=List[Rating],
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_authority("rating:create"))],
)
async def save_rating(book_id: str, user_id: str, payload: RatingCreate):
    await ensure_book_and_user(book_id, user_id)
    ratings = await rating_service.save_rating(payload.vote, book_id, user_id)
    if ratings is None:
        logger.info("Rating of book %s by user %s unchanged", book_id, user_id)
        return JSONResponse(status_code=status.HTTP_200_OK, content=RATING_UNCHANGED_MESSAGE)
    return [Rating.model_validate(rating) for rating in ratings]


@router.delete("/{book_id}/user/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_rating(
    book_id: str,
    user_id: str,
    current_user: TokenData = Depends(require_authority("rating:create")),
):
    """Withdraw the caller's own rating of a book."""
    if current_user.subject != user_id:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=ACCESS_DENIED_MESSAGE)
    if not await rating_service.remove_user_rating(book_id, user_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Rating of book {book_id} by user {user_id} cannot be found",
        )
