from decimal import Decimal

import pytest

from app.entities import Address, Author, Book, Category, Customer, Order, OrderItem, User
from app.entities.account import ADMIN_AUTHORITIES, USER_AUTHORITIES, Role
from app.models.book_model import BookCreate
from app.models.checkout_model import AddressCreate
from app.models.user_model import SignupRequest


def make_book_dto(**overrides):
    fields = dict(
        title="Solaris",
        subtitle="A novel",
        description="First paragraph\nSecond paragraph",
        image_url="https://covers.bookstore.pl/solaris.jpg",
        issue_year=1961,
        pages=204,
        is_hardcover=True,
        author={"first_name": "Stanisław", "last_name": "Lem"},
        base_price=Decimal("39.90"),
        promo_price=Decimal("29.90"),
        active=False,
        units_in_stock=7,
    )
    fields.update(overrides)
    return BookCreate(**fields)


def test_book_from_dto_copies_every_field():
    dto = make_book_dto()
    book = Book.from_dto(dto)

    assert book.id
    assert book.created_at is None and book.updated_at is None
    assert (book.title, book.subtitle, book.description) == (dto.title, dto.subtitle, dto.description)
    assert (book.image_url, book.issue_year, book.pages) == (dto.image_url, 1961, 204)
    assert book.is_hardcover is True and book.active is False
    assert book.base_price == Decimal("39.90") and book.promo_price == Decimal("29.90")
    assert book.units_in_stock == 7


def test_each_entity_gets_its_own_id():
    assert Book.from_dto(make_book_dto()).id != Book.from_dto(make_book_dto()).id


def test_address_from_dto_round_trip():
    dto = AddressCreate(city="Gdańsk", street="Długa", location_number="5/2", zip_code="80-827")
    address = Address.from_dto(dto)
    assert (address.city, address.street, address.location_number, address.zip_code) == (
        "Gdańsk", "Długa", "5/2", "80-827"
    )


def test_author_add_book_links_both_sides():
    author = Author(first_name="Olga", last_name="Tokarczuk")
    book = Book(title="Bieguni", base_price=Decimal("45"))

    author.add_book(book)
    author.add_book(book)

    assert author.books == [book]
    assert book.author is author
    assert book.author_id == author.id


def test_moving_a_book_to_another_author_updates_the_previous_one():
    first = Author(first_name="Olga", last_name="Tokarczuk")
    second = Author(first_name="Andrzej", last_name="Sapkowski")
    book = Book(title="Wiedźmin", base_price=Decimal("30"))

    first.add_book(book)
    second.add_book(book)

    assert first.books == []
    assert second.books == [book]
    assert book.author_id == second.id


def test_category_link_is_idempotent_and_bidirectional():
    category = Category(name="Fantasy")
    book = Book(title="Wiedźmin", base_price=Decimal("30"))

    category.add_book(book)
    book.add_category(category)

    assert category.books == [book]
    assert book.categories == [category]


def test_order_and_customer_links():
    customer = Customer(first_name="Anna", last_name="Nowak", email="anna@bookstore.pl")
    order = Order(total_quantity=2, total_price=Decimal("50"))
    item = OrderItem(book_id="b1", title="Solaris", unit_price=Decimal("25"), quantity=2)

    order.add_order_item(item)
    order.add_order_item(item)
    customer.add_order(order)

    assert order.order_items == [item]
    assert item.order is order and item.order_id == order.id
    assert customer.orders == [order]
    assert order.customer is customer and order.customer_id == customer.id


def test_book_rating_removal_drops_it_from_the_cache():
    from app.entities import Rating

    book = Book(title="Solaris", base_price=Decimal("39.90"))
    kept, removed = Rating(vote=4), Rating(vote=2)
    book.add_rating(kept)
    book.add_rating(removed)

    book.remove_rating(removed)

    assert book.ratings == [kept]
    assert removed.book is None
    assert kept.book_id == book.id


def test_description_paragraphs_skip_blank_lines():
    book = Book(title="Solaris", base_price=Decimal("1"), description="One\n\n   \nTwo  \nThree")
    assert book.description_paragraphs() == ["One", "Two  ", "Three"]
    assert Book(title="Eden", base_price=Decimal("1")).description_paragraphs() == []


def test_address_matching_ignores_case():
    address = Address(city="Kraków", street="Floriańska", location_number="12a", zip_code="31-019")
    other = Address(city="KRAKÓW", street="floriańska", location_number="12A", zip_code="31-019")
    assert address.matches(other)
    other.location_number = "13"
    assert not address.matches(other)


def test_user_from_signup_derives_authorities_from_role():
    signup = SignupRequest(
        username="janek",
        email="jan@bookstore.pl",
        password="Secret#123",
        first_name="Jan",
        last_name="Kowalski",
    )
    user = User.from_signup(signup, "hash")
    admin = User.from_signup(signup, "hash", Role.ADMIN)

    assert user.role == "ROLE_USER" and user.authorities == USER_AUTHORITIES
    assert user.is_active is False and user.is_not_locked is True
    assert admin.authorities == ADMIN_AUTHORITIES
    assert user.login_name == "janek"


@pytest.mark.parametrize("name, role", [("moderator", Role.MODERATOR), ("ROLE_ADMIN", Role.ADMIN), (" User ", Role.USER)])
def test_role_from_name(name, role):
    assert Role.from_name(name) is role


def test_role_from_unknown_name():
    with pytest.raises(ValueError):
        Role.from_name("superuser")


def test_grant_role_replaces_authorities():
    user = User(first_name="Jan", last_name="Kowalski", email="jan@bookstore.pl")

    user.grant_role(Role.ADMIN)

    assert user.role == "ROLE_ADMIN"
    assert user.authorities == ADMIN_AUTHORITIES
    assert user.authorities is not ADMIN_AUTHORITIES
