"""Comment endpoints."""
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query, status

from app.config import settings
from app.models.comment_model import Comment, CommentCreate, CommentView
from app.models.page_model import Page
from app.services import book_service, comment_service, user_service
from app.utils.dependencies import require_authority
from app.utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter()


@router.get("/{book_id}", response_model=Page[CommentView])
async def list_comments(
    book_id: str,
    page_number: int = Query(0, ge=0, alias="pageNumber"),
    page_size: int = Query(settings.comments_page_size, ge=1, le=100, alias="pageSize"),
):
    """Comments of a book, most recently updated first."""
    if not await book_service.exists_by_id(book_id):
        logger.info("Comments requested for missing book %s", book_id)
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Book with id: {book_id} cannot be found",
        )
    comments = await comment_service.list_comments_for_book(book_id, page_number, page_size)
    return Page[CommentView].from_slice(comments, CommentView)


@router.post(
    "/{book_id}/user/{user_id}",
    response_model=List[Comment],
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_authority("comment:create"))],
)
async def add_comment(book_id: str, user_id: str, payload: CommentCreate):
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
    comments = await comment_service.add_comment(payload.content, book_id, user_id)
    return [Comment.model_validate(comment) for comment in comments]


@router.delete(
    "/{comment_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=[Depends(require_authority("comment:delete"))],
)
async def delete_comment(comment_id: str):
    """Moderation: remove a single comment."""
    if not await comment_service.delete_comment(comment_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Comment with id: {comment_id} cannot be found",
        )
