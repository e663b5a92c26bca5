"""Comment models."""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class CommentCreate(BaseModel):
    content: str = Field(
        ...,
        min_length=3,
        max_length=255,
        description="Content cannot be shorter than 3 characters and longer than 255 characters",
    )


class Comment(BaseModel):
    id: str
    content: str
    book_id: Optional[str] = None
    user_id: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class CommentView(BaseModel):
    """Comment as listed under a book, with the commenter's display name."""

    id: str
    content: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    username_to_display: str

    model_config = {"from_attributes": True}
