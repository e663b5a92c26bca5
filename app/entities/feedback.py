"""Reader feedback entities: comments and ratings."""
from dataclasses import dataclass, field
from datetime import datetime
from typing import TYPE_CHECKING, Optional

from app.utils.ids import new_id

if TYPE_CHECKING:
    from app.entities.account import User
    from app.entities.catalog import Book
    from app.models.comment_model import CommentCreate
    from app.models.rating_model import RatingCreate


@dataclass
class Comment:
    content: str
    book_id: Optional[str] = None
    user_id: Optional[str] = None
    id: str = field(default_factory=new_id)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    book: Optional["Book"] = field(default=None, repr=False, compare=False)
    user: Optional["User"] = field(default=None, repr=False, compare=False)

    @classmethod
    def from_dto(cls, dto: "CommentCreate") -> "Comment":
        return cls(content=dto.content)

    @classmethod
    def from_record(cls, record) -> "Comment":
        return cls(
            id=record["id"],
            content=record["content"],
            book_id=record["book_id"],
            user_id=record["user_id"],
            created_at=record["created_at"],
            updated_at=record["updated_at"],
        )


@dataclass
class Rating:
    vote: int
    book_id: Optional[str] = None
    user_id: Optional[str] = None
    id: str = field(default_factory=new_id)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    book: Optional["Book"] = field(default=None, repr=False, compare=False)
    user: Optional["User"] = field(default=None, repr=False, compare=False)

    @classmethod
    def from_dto(cls, dto: "RatingCreate") -> "Rating":
        return cls(vote=dto.vote)

    @classmethod
    def from_record(cls, record) -> "Rating":
        return cls(
            id=record["id"],
            vote=record["vote"],
            book_id=record["book_id"],
            user_id=record["user_id"],
            created_at=record["created_at"],
            updated_at=record["updated_at"],
        )
