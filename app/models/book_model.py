"""Book models."""
from datetime import datetime
from decimal import Decimal
from typing import List, Optional
from urllib.parse import urlparse

from pydantic import BaseModel, Field, field_validator, model_validator

MAX_PRICE = Decimal("999.99")


class AuthorCreate(BaseModel):
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)


class BookCreate(BaseModel):
    title: str = Field(..., min_length=1)
    subtitle: Optional[str] = None
    description: Optional[str] = None
    image_url: Optional[str] = None
    issue_year: Optional[int] = None
    pages: Optional[int] = Field(None, ge=1)
    is_hardcover: bool = False
    author: AuthorCreate
    base_price: Decimal = Field(..., ge=0, le=MAX_PRICE)
    promo_price: Optional[Decimal] = Field(None, ge=0, le=MAX_PRICE)
    active: bool = True
    units_in_stock: int = Field(0, ge=0)
    category_ids: List[str] = Field(default_factory=list)

    @field_validator("image_url")
    @classmethod
    def validate_image_url(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value
        parsed = urlparse(value)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ValueError(f"Incorrect format of image url: {value}")
        return value

    @model_validator(mode="after")
    def check_promo_price(self) -> "BookCreate":
        if self.promo_price is not None and self.promo_price > self.base_price:
            raise ValueError("Promo price cannot be greater than base price")
        return self


class AuthorSummary(BaseModel):
    id: str
    first_name: str
    last_name: str

    model_config = {"from_attributes": True}


class CategorySummary(BaseModel):
    id: str
    name: str

    model_config = {"from_attributes": True}


class Book(BaseModel):
    id: str
    title: str
    subtitle: Optional[str] = None
    description: Optional[str] = None
    image_url: Optional[str] = None
    issue_year: Optional[int] = None
    pages: Optional[int] = None
    is_hardcover: bool = False
    author: Optional[AuthorSummary] = None
    base_price: Decimal
    promo_price: Optional[Decimal] = None
    active: bool = True
    units_in_stock: int = 0
    categories: List[CategorySummary] = Field(default_factory=list)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class BookDetail(Book):
    """Single-book view; the description is split into display paragraphs."""

    description: List[str] = Field(default_factory=list)
