"""Pytest configuration: environment, an in-memory store standing in for PostgreSQL, and helpers."""
import asyncio
import copy
import itertools
import os
from contextlib import asynccontextmanager
from datetime import datetime, timedelta, timezone
from decimal import Decimal

os.environ.setdefault("PGHOST", "localhost")
os.environ.setdefault("PGUSER", "bookstore")
os.environ.setdefault("PGDATABASE", "bookstore_test")
os.environ.setdefault("JWT_SECRET", "test-secret")
os.environ["SMTP_ENABLED"] = "false"

import asyncpg
import pytest

from app.entities import Address, Author, Book, Category, User
from app.entities.account import MODERATOR_AUTHORITIES, Role
from app.repositories import (
    address_repository,
    author_repository,
    book_repository,
    category_repository,
    comment_repository,
    order_repository,
    rating_repository,
    user_repository,
)
from app.services import book_service, checkout_service, user_service
from app.utils.security import create_access_token

BASE_TIME = datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)


def run(coro):
    return asyncio.run(coro)


class FakeDatabase:
    """Keeps entities in dictionaries and mimics the repository functions."""

    def __init__(self):
        self.authors = {}
        self.books = {}
        self.categories = {}
        self.comments = []
        self.ratings = []
        self.users = {}
        self.addresses = {}
        self.customers = {}
        self.orders = {}
        self.order_items = {}
        self.writes = 0
        self.fail_on = set()
        self._clock = itertools.count(1)

    def now(self) -> datetime:
        return BASE_TIME + timedelta(seconds=next(self._clock))

    def _check(self, operation: str) -> None:
        if operation in self.fail_on:
            raise asyncpg.PostgresError(f"{operation} failed")

    # transactions

    @asynccontextmanager
    async def transaction(self):
        tables = ("authors", "books", "categories", "comments", "ratings", "users",
                  "addresses", "customers", "orders", "order_items")
        snapshot = copy.deepcopy({name: getattr(self, name) for name in tables})
        try:
            yield None
        except BaseException:
            for name, value in snapshot.items():
                setattr(self, name, value)
            raise

    # seeding

    def add_author(self, first_name="Stanisław", last_name="Lem") -> Author:
        author = Author(first_name=first_name, last_name=last_name, created_at=self.now())
        author.updated_at = author.created_at
        self.authors[author.id] = author
        return author

    def add_category(self, name="Science fiction") -> Category:
        category = Category(name=name)
        self.categories[category.id] = category
        return category

    def add_book(self, author=None, title="Solaris", units_in_stock=10, categories=(), **fields) -> Book:
        author = author or self.add_author()
        book = Book(title=title, base_price=fields.pop("base_price", Decimal("39.90")),
                    units_in_stock=units_in_stock, **fields)
        book.created_at = book.updated_at = self.now()
        author.add_book(book)
        for category in categories:
            book.add_category(category)
        self.books[book.id] = book
        return book

    def add_user(self, first_name="Jan", last_name="Kowalski", email=None, password_hash="",
                 is_active=True, role=Role.USER, username=None) -> User:
        user = User(
            first_name=first_name,
            last_name=last_name,
            username=username,
            email=email or f"{first_name.lower()}.{len(self.users)}@bookstore.pl",
            password_hash=password_hash,
            role=role.value,
            is_active=is_active,
        )
        user.created_at = user.updated_at = self.now()
        self.users[user.id] = user
        return user

    # books

    async def book_exists(self, book_id, conn=None):
        return book_id in self.books

    async def find_book(self, book_id, conn=None):
        return self.books.get(book_id)

    def _book_page(self, books, limit, offset):
        ordered = sorted(books, key=lambda book: book.updated_at, reverse=True)
        return ordered[offset:offset + limit], len(ordered)

    async def find_book_page(self, limit, offset):
        return self._book_page(self.books.values(), limit, offset)

    async def search_books(self, keyword, limit, offset):
        needle = keyword.casefold()
        matches = [
            book for book in self.books.values()
            if needle in book.title.casefold()
            or needle in (book.subtitle or "").casefold()
            or needle in book.author.first_name.casefold()
            or needle in book.author.last_name.casefold()
        ]
        return self._book_page(matches, limit, offset)

    async def find_books_with_promo(self, limit, offset):
        return self._book_page([b for b in self.books.values() if b.promo_price is not None], limit, offset)

    async def find_active_books(self, limit, offset):
        return self._book_page([b for b in self.books.values() if b.active], limit, offset)

    async def find_books_by_author(self, author_id, conn=None):
        return [book for book in self.books.values() if book.author_id == author_id]

    async def find_books_by_category(self, category_id):
        return [
            book for book in self.books.values()
            if any(category.id == category_id for category in book.categories)
        ]

    async def find_books_by_title(self, title):
        return [book for book in self.books.values() if book.title.casefold() == title.casefold()]

    async def lock_units_in_stock(self, book_id, conn):
        book = self.books.get(book_id)
        return book.units_in_stock if book else None

    async def update_units_in_stock(self, book_id, units_in_stock, conn):
        self._check("update_units_in_stock")
        self.writes += 1
        self.books[book_id].units_in_stock = units_in_stock

    async def save_book(self, book, conn=None):
        self._check("save_book")
        self.writes += 1
        book.updated_at = self.now()
        book.created_at = book.created_at or book.updated_at
        book.author = self.authors.get(book.author_id, book.author)
        self.books[book.id] = book
        return book

    async def update_book_active(self, book_id, active):
        book = self.books.get(book_id)
        if book is not None:
            book.active = active
        return book

    async def delete_book(self, book_id, conn=None):
        self.writes += 1
        if any(rating.book_id == book_id for rating in self.ratings):
            raise AssertionError("ratings must be removed before their book")
        self.books.pop(book_id, None)
        self.comments = [comment for comment in self.comments if comment.book_id != book_id]

    # authors and categories

    async def author_exists(self, author_id):
        return author_id in self.authors

    async def find_author(self, author_id):
        author = self.authors.get(author_id)
        return copy.copy(author) if author else None

    async def find_author_by_name(self, first_name, last_name, conn=None):
        for author in self.authors.values():
            if (author.first_name.strip().casefold(), author.last_name.strip().casefold()) == (
                first_name.strip().casefold(), last_name.strip().casefold()
            ):
                return author
        return None

    async def save_author(self, author, conn=None):
        self.writes += 1
        author.created_at = author.updated_at = self.now()
        self.authors[author.id] = author
        return author

    async def category_exists(self, category_id):
        return category_id in self.categories

    async def find_category(self, category_id):
        category = self.categories.get(category_id)
        return Category(id=category.id, name=category.name) if category else None

    async def find_categories(self, category_ids, conn=None):
        return sorted(
            (self.categories[category_id] for category_id in category_ids if category_id in self.categories),
            key=lambda category: category.name,
        )

    async def find_category_by_name(self, name):
        return next((c for c in self.categories.values() if c.name.casefold() == name.casefold()), None)

    async def find_all_categories(self):
        return sorted(self.categories.values(), key=lambda category: category.name)

    async def save_category(self, category, conn=None):
        self.categories[category.id] = category
        return category

    # comments and ratings

    async def find_comments(self, book_id):
        self._check("find_comments")
        comments = []
        for comment in self.comments:
            if comment.book_id == book_id:
                comment.user = self.users.get(comment.user_id)
                comments.append(comment)
        return comments

    async def save_comment(self, comment):
        self._check("save_comment")
        self.writes += 1
        comment.created_at = comment.updated_at = self.now()
        self.comments.append(comment)
        return comment

    async def delete_comment(self, comment_id):
        remaining = [comment for comment in self.comments if comment.id != comment_id]
        deleted = len(remaining) != len(self.comments)
        self.comments = remaining
        return deleted

    async def find_ratings(self, book_id):
        self._check("find_ratings")
        return [rating for rating in self.ratings if rating.book_id == book_id]

    async def find_rating(self, book_id, user_id):
        self._check("find_rating")
        return next(
            (r for r in self.ratings if r.book_id == book_id and r.user_id == user_id),
            None,
        )

    async def insert_rating(self, rating):
        self._check("insert_rating")
        if await self.find_rating(rating.book_id, rating.user_id) is not None:
            raise asyncpg.UniqueViolationError("duplicate key value violates unique constraint")
        self.writes += 1
        rating.created_at = rating.updated_at = self.now()
        self.ratings.append(rating)
        return rating

    async def update_rating_vote(self, rating):
        self._check("update_rating_vote")
        self.writes += 1
        stored = next(r for r in self.ratings if r.id == rating.id)
        stored.vote = rating.vote
        stored.updated_at = rating.updated_at = self.now()
        return rating

    async def delete_rating(self, rating_id):
        self.writes += 1
        self.ratings = [rating for rating in self.ratings if rating.id != rating_id]

    async def delete_ratings_of_book(self, book_id, conn=None):
        self.writes += 1
        self.ratings = [rating for rating in self.ratings if rating.book_id != book_id]

    # users and addresses

    async def user_exists(self, user_id):
        return user_id in self.users

    async def find_user(self, user_id, conn=None):
        return self.users.get(user_id)

    async def find_user_page(self, limit, offset):
        ordered = sorted(self.users.values(), key=lambda u: (u.last_name, u.first_name, u.id))
        return ordered[offset:offset + limit], len(ordered)

    async def search_users(self, keyword, limit, offset):
        needle = keyword.casefold()
        matches = [
            u for u in self.users.values()
            if any(needle in (value or "").casefold() for value in (u.first_name, u.last_name, u.email, u.username))
        ]
        ordered = sorted(matches, key=lambda u: u.created_at, reverse=True)
        return ordered[offset:offset + limit], len(ordered)

    async def update_user(self, user, conn=None):
        self._check("update_user")
        self.writes += 1
        if user.address is not None:
            self.addresses.setdefault(user.address.id, user.address)
        user.updated_at = self.now()
        self.users[user.id] = user
        return user

    async def update_user_status(self, user_id, *, is_active=None, is_not_locked=None):
        user = self.users.get(user_id)
        if user is None:
            return None
        if is_active is not None:
            user.is_active = is_active
        if is_not_locked is not None:
            user.is_not_locked = is_not_locked
        return user

    async def delete_user(self, user_id):
        self.writes += 1
        self.users.pop(user_id, None)
        self.comments = [comment for comment in self.comments if comment.user_id != user_id]
        self.ratings = [rating for rating in self.ratings if rating.user_id != user_id]

    async def find_user_by_email(self, email, conn=None):
        return next((u for u in self.users.values() if u.email.casefold() == email.casefold()), None)

    async def find_user_by_username(self, username, conn=None):
        return next((u for u in self.users.values() if u.username == username), None)

    async def find_user_by_login(self, login):
        return next(
            (u for u in self.users.values() if u.username == login or u.email.casefold() == login.casefold()),
            None,
        )

    async def save_user(self, user, conn=None):
        self._check("save_user")
        self.writes += 1
        if user.address is not None:
            self.addresses.setdefault(user.address.id, user.address)
        user.created_at = user.updated_at = self.now()
        self.users[user.id] = user
        return user

    async def update_login_state(self, user):
        self.writes += 1
        self.users[user.id] = user

    async def update_password(self, user_id, password_hash, conn=None):
        self.writes += 1
        self.users[user_id].password_hash = password_hash

    async def activate_user(self, user_id):
        user = self.users.get(user_id)
        if user is None:
            return False
        user.is_active = True
        return True

    async def find_address(self, address_id, conn=None):
        return self.addresses.get(address_id)

    async def find_matching_address(self, address, conn=None):
        return next((stored for stored in self.addresses.values() if stored.matches(address)), None)

    async def save_address(self, address, conn=None):
        self.addresses.setdefault(address.id, address)
        return address

    # checkout

    async def find_customer_by_email(self, email, conn=None):
        customer = next(
            (c for c in self.customers.values() if c.email.casefold() == email.casefold()),
            None,
        )
        return copy.copy(customer) if customer else None

    async def save_customer(self, customer, conn):
        self._check("save_customer")
        self.writes += 1
        stored = self.customers.setdefault(customer.id, customer)
        stored.first_name, stored.last_name = customer.first_name, customer.last_name
        for order in customer.orders:
            if order.id in self.orders:
                continue
            for address in (order.shipping_address, order.billing_address):
                self.addresses.setdefault(address.id, address)
            order.created_at = order.updated_at = self.now()
            self.orders[order.id] = order
            for item in order.order_items:
                self.order_items[item.id] = item
        return customer

    async def find_orders_by_customer_email(self, email):
        customer_ids = {c.id for c in self.customers.values() if c.email.casefold() == email.casefold()}
        orders = [order for order in self.orders.values() if order.customer_id in customer_ids]
        return sorted(orders, key=lambda order: order.created_at, reverse=True)

    async def order_exists(self, order_id):
        return order_id in self.orders

    async def find_order_items(self, order_id):
        items = [item for item in self.order_items.values() if item.order_id == order_id]
        return sorted(items, key=lambda item: item.title)

    def install(self, monkeypatch) -> None:
        patches = {
            book_repository: {
                "exists_by_id": self.book_exists,
                "find_by_id": self.find_book,
                "find_page": self.find_book_page,
                "search_by_keyword": self.search_books,
                "find_with_promo": self.find_books_with_promo,
                "find_active": self.find_active_books,
                "find_by_author_id": self.find_books_by_author,
                "find_by_category_id": self.find_books_by_category,
                "find_by_title": self.find_books_by_title,
                "lock_units_in_stock": self.lock_units_in_stock,
                "update_units_in_stock": self.update_units_in_stock,
                "save": self.save_book,
                "update_active": self.update_book_active,
                "delete": self.delete_book,
            },
            author_repository: {
                "exists_by_id": self.author_exists,
                "find_by_id": self.find_author,
                "find_by_name": self.find_author_by_name,
                "save": self.save_author,
            },
            category_repository: {
                "exists_by_id": self.category_exists,
                "find_by_id": self.find_category,
                "find_by_ids": self.find_categories,
                "find_by_name": self.find_category_by_name,
                "find_all_sorted_by_name": self.find_all_categories,
                "save": self.save_category,
            },
            comment_repository: {
                "find_by_book_id": self.find_comments,
                "save": self.save_comment,
                "delete": self.delete_comment,
            },
            rating_repository: {
                "find_by_book_id": self.find_ratings,
                "find_by_book_and_user": self.find_rating,
                "insert": self.insert_rating,
                "update_vote": self.update_rating_vote,
                "delete": self.delete_rating,
                "delete_by_book_id": self.delete_ratings_of_book,
            },
            user_repository: {
                "exists_by_id": self.user_exists,
                "find_by_id": self.find_user,
                "find_by_email": self.find_user_by_email,
                "find_by_username": self.find_user_by_username,
                "find_by_username_or_email": self.find_user_by_login,
                "save": self.save_user,
                "update_login_state": self.update_login_state,
                "update_password": self.update_password,
                "activate": self.activate_user,
                "find_page": self.find_user_page,
                "search_by_keyword": self.search_users,
                "update": self.update_user,
                "update_status": self.update_user_status,
                "delete": self.delete_user,
            },
            address_repository: {
                "find_by_id": self.find_address,
                "find_matching": self.find_matching_address,
                "save": self.save_address,
            },
            order_repository: {
                "find_customer_by_email": self.find_customer_by_email,
                "save_customer": self.save_customer,
                "find_by_customer_email": self.find_orders_by_customer_email,
                "exists_by_id": self.order_exists,
                "find_items_by_order_id": self.find_order_items,
            },
        }
        for module, functions in patches.items():
            for name, fake in functions.items():
                monkeypatch.setattr(module, name, fake)
        for service in (book_service, checkout_service, user_service):
            monkeypatch.setattr(service, "transaction", self.transaction)


@pytest.fixture
def db(monkeypatch):
    database = FakeDatabase()
    database.install(monkeypatch)
    return database


@pytest.fixture
def client(db):
    from fastapi.testclient import TestClient

    from app.main import app
    from app.services.login_attempt_service import LoginAttemptService

    app.state.login_attempts = LoginAttemptService()
    with TestClient(app) as test_client:
        yield test_client


def bearer(subject: str, authorities) -> dict:
    return {"Authorization": f"Bearer {create_access_token(subject=subject, authorities=authorities)}"}


@pytest.fixture
def moderator_headers():
    return bearer("moderator-1", MODERATOR_AUTHORITIES)


@pytest.fixture
def address():
    return Address(city="Kraków", street="Floriańska", location_number="12", zip_code="31-019")
