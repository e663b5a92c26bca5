"""Catalogue entities: authors, categories and books."""
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING, List, Optional

from app.utils.ids import new_id

if TYPE_CHECKING:
    from app.entities.feedback import Comment, Rating
    from app.models.book_model import AuthorCreate, BookCreate


def _contains(items: List, entity) -> bool:
    return any(item.id == entity.id for item in items)


def _replace_or_append(items: List, entity) -> None:
    for index, item in enumerate(items):
        if item.id == entity.id:
            items[index] = entity
            return
    items.append(entity)


@dataclass
class Author:
    first_name: str
    last_name: str
    id: str = field(default_factory=new_id)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    books: Optional[List["Book"]] = field(default=None, repr=False, compare=False)

    @classmethod
    def from_dto(cls, dto: "AuthorCreate") -> "Author":
        return cls(first_name=dto.first_name, last_name=dto.last_name)

    @classmethod
    def from_record(cls, record) -> "Author":
        return cls(
            id=record["id"],
            first_name=record["first_name"],
            last_name=record["last_name"],
            created_at=record["created_at"],
            updated_at=record["updated_at"],
        )

    def add_book(self, book: "Book") -> None:
        """Make this author the owner of ``book`` on both sides of the link."""
        previous = book.author
        if previous is not None and previous is not self and previous.books:
            previous.books = [item for item in previous.books if item.id != book.id]
        if self.books is None:
            self.books = []
        _replace_or_append(self.books, book)
        book.author_id = self.id
        book.author = self


@dataclass
class Category:
    name: str
    id: str = field(default_factory=new_id)
    books: Optional[List["Book"]] = field(default=None, repr=False, compare=False)

    @classmethod
    def from_record(cls, record) -> "Category":
        return cls(id=record["id"], name=record["name"])

    def add_book(self, book: "Book") -> None:
        book.add_category(self)


@dataclass
class Book:
    title: str
    base_price: Decimal
    subtitle: Optional[str] = None
    description: Optional[str] = None
    image_url: Optional[str] = None
    issue_year: Optional[int] = None
    pages: Optional[int] = None
    is_hardcover: bool = False
    promo_price: Optional[Decimal] = None
    active: bool = True
    units_in_stock: int = 0
    author_id: Optional[str] = None
    id: str = field(default_factory=new_id)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    author: Optional[Author] = field(default=None, repr=False, compare=False)
    categories: List[Category] = field(default_factory=list, repr=False, compare=False)
    comments: Optional[List["Comment"]] = field(default=None, repr=False, compare=False)
    ratings: Optional[List["Rating"]] = field(default=None, repr=False, compare=False)

    @classmethod
    def from_dto(cls, dto: "BookCreate") -> "Book":
        return cls(
            title=dto.title,
            subtitle=dto.subtitle,
            description=dto.description,
            image_url=dto.image_url,
            issue_year=dto.issue_year,
            pages=dto.pages,
            is_hardcover=dto.is_hardcover,
            base_price=dto.base_price,
            promo_price=dto.promo_price,
            active=dto.active,
            units_in_stock=dto.units_in_stock,
        )

    @classmethod
    def from_record(cls, record) -> "Book":
        return cls(
            id=record["id"],
            title=record["title"],
            subtitle=record["subtitle"],
            description=record["description"],
            image_url=record["image_url"],
            issue_year=record["issue_year"],
            pages=record["pages"],
            is_hardcover=record["is_hardcover"],
            base_price=record["base_price"],
            promo_price=record["promo_price"],
            active=record["active"],
            units_in_stock=record["units_in_stock"],
            author_id=record["author_id"],
            created_at=record["created_at"],
            updated_at=record["updated_at"],
        )

    def add_category(self, category: Category) -> None:
        if not _contains(self.categories, category):
            self.categories.append(category)
        if category.books is None:
            category.books = []
        if not _contains(category.books, self):
            category.books.append(self)

    def add_comment(self, comment: "Comment") -> None:
        if self.comments is None:
            self.comments = []
        if not _contains(self.comments, comment):
            self.comments.append(comment)
        comment.book_id = self.id
        comment.book = self

    def add_rating(self, rating: "Rating") -> None:
        if self.ratings is None:
            self.ratings = []
        if not _contains(self.ratings, rating):
            self.ratings.append(rating)
        rating.book_id = self.id
        rating.book = self

    def remove_rating(self, rating: "Rating") -> None:
        if self.ratings:
            self.ratings = [item for item in self.ratings if item.id != rating.id]
        rating.book = None

    def description_paragraphs(self) -> List[str]:
        if not self.description:
            return []
        return [paragraph for paragraph in self.description.split("\n") if paragraph.strip()]
