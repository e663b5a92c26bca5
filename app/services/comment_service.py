"""Comment service."""
from typing import List

from app.entities import Comment, User
from app.errors import NotFoundError, wrap_persistence_errors
from app.models.comment_model import CommentView
from app.repositories import book_repository, comment_repository
from app.utils.logger import get_logger
from app.utils.pagination import PageSlice, paginate

logger = get_logger(__name__)


def display_name(user: User) -> str:
    return f"{user.first_name or ''} {user.last_name or ''}"


def to_view(comment: Comment) -> CommentView:
    return CommentView(
        id=comment.id,
        content=comment.content,
        created_at=comment.created_at,
        updated_at=comment.updated_at,
        username_to_display=display_name(comment.user),
    )


@wrap_persistence_errors("An error occurred during retrieving comments by book id")
async def list_comments_for_book(book_id: str, page_number: int, page_size: int) -> PageSlice[CommentView]:
    """Newest first by last update; equal timestamps keep insertion order."""
    comments = await comment_repository.find_by_book_id(book_id) or []
    ordered = sorted(comments, key=lambda comment: comment.updated_at, reverse=True)
    return paginate(ordered, page_number, page_size).map(to_view)


@wrap_persistence_errors("An error occurred during attempt to save comment to database")
async def add_comment(content: str, book_id: str, user_id: str) -> List[Comment]:
    """Store a comment and return every comment of the book, the new one last."""
    book = await book_repository.find_by_id(book_id)
    if book is None:
        raise NotFoundError(f"Book with id: {book_id} cannot be found")
    book.comments = await comment_repository.find_by_book_id(book_id)

    comment = Comment(content=content, user_id=user_id)
    book.add_comment(comment)
    await comment_repository.save(comment)
    logger.info("Added new comment for book %s by user %s", book_id, user_id)
    return book.comments


@wrap_persistence_errors("An error occurred during deleting comment")
async def delete_comment(comment_id: str) -> bool:
    deleted = await comment_repository.delete(comment_id)
    if deleted:
        logger.info("Deleted comment %s", comment_id)
    return deleted
