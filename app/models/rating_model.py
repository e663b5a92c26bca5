"""Rating models."""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class RatingCreate(BaseModel):
    vote: int = Field(..., ge=0, le=5, description="Vote between 0 and 5")


class Rating(BaseModel):
    id: Optional[str] = None
    vote: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}

    @classmethod
    def placeholder(cls) -> "Rating":
        """Zero vote returned when a user has not rated a book yet."""
        return cls(vote=0)
