"""User accounts, roles and authorities."""
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING, List, Optional

from app.utils.ids import new_id

if TYPE_CHECKING:
    from app.entities.checkout import Address
    from app.entities.feedback import Comment, Rating
    from app.models.user_model import AccountDetails


class Role(str, Enum):
    USER = "ROLE_USER"
    MODERATOR = "ROLE_MODERATOR"
    ADMIN = "ROLE_ADMIN"

    @classmethod
    def from_name(cls, name: str) -> "Role":
        """Accepts ``moderator`` as well as ``ROLE_MODERATOR``, in any case."""
        value = name.strip().upper()
        if not value.startswith("ROLE_"):
            value = f"ROLE_{value}"
        return cls(value)


USER_AUTHORITIES = ["comment:create", "rating:create", "order:read"]
MODERATOR_AUTHORITIES = USER_AUTHORITIES + [
    "comment:delete",
    "book:create",
    "book:update",
    "book:activate",
    "book:delete",
    "category:create",
    "category:update",
    "author:update",
    "user:read",
    "user:update",
    "user:activate",
    "user:lock",
]
ADMIN_AUTHORITIES = MODERATOR_AUTHORITIES + ["user:delete"]

ROLE_AUTHORITIES = {
    Role.USER: USER_AUTHORITIES,
    Role.MODERATOR: MODERATOR_AUTHORITIES,
    Role.ADMIN: ADMIN_AUTHORITIES,
}


@dataclass
class User:
    first_name: str
    last_name: str
    email: str
    username: Optional[str] = None
    password_hash: str = field(default="", repr=False)
    role: str = Role.USER.value
    authorities: List[str] = field(default_factory=lambda: list(USER_AUTHORITIES))
    is_active: bool = False
    is_not_locked: bool = True
    address_id: Optional[str] = None
    last_login_date: Optional[datetime] = None
    id: str = field(default_factory=new_id)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    address: Optional["Address"] = field(default=None, repr=False, compare=False)
    comments: Optional[List["Comment"]] = field(default=None, repr=False, compare=False)
    ratings: Optional[List["Rating"]] = field(default=None, repr=False, compare=False)

    @classmethod
    def from_signup(cls, dto: "AccountDetails", password_hash: str, role: Role = Role.USER) -> "User":
        return cls(
            first_name=dto.first_name,
            last_name=dto.last_name,
            email=dto.email,
            username=dto.username,
            password_hash=password_hash,
            role=role.value,
            authorities=list(ROLE_AUTHORITIES[role]),
        )

    @classmethod
    def from_record(cls, record) -> "User":
        return cls(
            id=record["id"],
            first_name=record["first_name"],
            last_name=record["last_name"],
            email=record["email"],
            username=record["username"],
            password_hash=record["password_hash"],
            role=record["role"],
            authorities=list(record["authorities"] or []),
            is_active=record["is_active"],
            is_not_locked=record["is_not_locked"],
            address_id=record["address_id"],
            last_login_date=record["last_login_date"],
            created_at=record["created_at"],
            updated_at=record["updated_at"],
        )

    def grant_role(self, role: Role) -> None:
        self.role = role.value
        self.authorities = list(ROLE_AUTHORITIES[role])

    def apply_details(self, dto: "AccountDetails") -> None:
        self.first_name = dto.first_name
        self.last_name = dto.last_name
        self.username = dto.username
        self.email = dto.email

    @property
    def login_name(self) -> str:
        return self.username or self.email

    def set_address(self, address: "Address") -> None:
        self.address = address
        self.address_id = address.id

    def add_comment(self, comment: "Comment") -> None:
        if self.comments is None:
            self.comments = []
        if all(item.id != comment.id for item in self.comments):
            self.comments.append(comment)
        comment.user_id = self.id
        comment.user = self

    def add_rating(self, rating: "Rating") -> None:
        if self.ratings is None:
            self.ratings = []
        if all(item.id != rating.id for item in self.ratings):
            self.ratings.append(rating)
        rating.user_id = self.id
        rating.user = self
