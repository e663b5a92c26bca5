from decimal import Decimal

import pytest

from app.entities import Address
from app.errors import ForbiddenError, InsufficientStockError, NotFoundError, ServiceError, ValidationFailure
from app.models.checkout_model import Purchase
from app.services import checkout_service
from conftest import run

SHIPPING = {"city": "Kraków", "street": "Floriańska", "location_number": "12", "zip_code": "31-019"}


def make_purchase(books, quantities=None, email="anna@bookstore.pl", billing=None):
    quantities = quantities or [1] * len(books)
    items = [
        {
            "book_id": book.id,
            "title": book.title,
            "image_url": None,
            "unit_price": str(book.base_price),
            "quantity": quantity,
        }
        for book, quantity in zip(books, quantities)
    ]
    total_price = sum(book.base_price * quantity for book, quantity in zip(books, quantities))
    return Purchase(
        customer={"first_name": "Anna", "last_name": "Nowak", "email": email},
        shipping_address=SHIPPING,
        billing_address=billing or {**SHIPPING, "city": "KRAKÓW"},
        order={"total_quantity": sum(quantities), "total_price": str(total_price)},
        order_items=items,
    )


@pytest.fixture
def books(db):
    author = db.add_author()
    return [
        db.add_book(author=author, title=title, units_in_stock=5, base_price=Decimal(price))
        for title, price in (("Solaris", "39.90"), ("Eden", "29.50"), ("Niezwyciężony", "35.00"))
    ]


def test_place_order_persists_the_whole_graph(db, books):
    confirmation = run(checkout_service.place_order(make_purchase(books, [1, 2, 1])))

    assert confirmation.order_tracking_number
    [order] = db.orders.values()
    [customer] = db.customers.values()
    assert order.order_tracking_number == confirmation.order_tracking_number
    assert len(order.order_items) == 3
    assert all(item.order_id == order.id for item in order.order_items)
    assert order.customer_id == customer.id
    assert customer.email == "anna@bookstore.pl"
    assert order.shipping_address_id and order.billing_address_id
    assert [book.units_in_stock for book in books] == [4, 3, 4]


def test_tracking_numbers_are_unique(db, books):
    numbers = {run(checkout_service.place_order(make_purchase(books[:1]))).order_tracking_number for _ in range(5)}
    assert len(numbers) == 5


def test_matching_billing_address_is_stored_once(db, books):
    run(checkout_service.place_order(make_purchase(books[:1])))

    [order] = db.orders.values()
    assert order.shipping_address_id == order.billing_address_id
    assert len(db.addresses) == 1


def test_different_billing_address_is_stored_separately(db, books):
    billing = {"city": "Warszawa", "street": "Nowy Świat", "location_number": "3", "zip_code": "00-001"}
    run(checkout_service.place_order(make_purchase(books[:1], billing=billing)))

    [order] = db.orders.values()
    assert order.shipping_address_id != order.billing_address_id
    assert len(db.addresses) == 2


def test_stored_address_is_reused(db, books):
    stored = Address(city="kraków", street="FLORIAŃSKA", location_number="12", zip_code="31-019")
    db.addresses[stored.id] = stored

    run(checkout_service.place_order(make_purchase(books[:1])))

    [order] = db.orders.values()
    assert order.shipping_address_id == stored.id
    assert len(db.addresses) == 1


def test_returning_customer_is_reused(db, books):
    run(checkout_service.place_order(make_purchase(books[:1])))
    run(checkout_service.place_order(make_purchase(books[1:2], email="ANNA@bookstore.pl")))

    assert len(db.customers) == 1
    assert len(db.orders) == 2


def test_returning_customer_takes_the_latest_name(db, books):
    run(checkout_service.place_order(make_purchase(books[:1])))
    renamed = make_purchase(books[1:2])
    renamed.customer.last_name = "Kowalska"

    run(checkout_service.place_order(renamed))

    [customer] = db.customers.values()
    assert (customer.first_name, customer.last_name) == ("Anna", "Kowalska")
    assert {order.customer_id for order in db.orders.values()} == {customer.id}


def test_insufficient_stock_rolls_everything_back(db, books):
    with pytest.raises(InsufficientStockError):
        run(checkout_service.place_order(make_purchase(books[:2], [2, 6])))

    assert db.orders == {} and db.customers == {} and db.addresses == {}
    assert [db.books[book.id].units_in_stock for book in books[:2]] == [5, 5]


def test_unknown_book_is_rejected(db, books):
    purchase = make_purchase(books[:1])
    purchase.order_items[0].book_id = "missing"

    with pytest.raises(InsufficientStockError):
        run(checkout_service.place_order(purchase))
    assert db.orders == {}


def test_persistence_failure_leaves_no_partial_order(db, books):
    db.fail_on.add("save_customer")

    with pytest.raises(ServiceError):
        run(checkout_service.place_order(make_purchase(books, [1, 1, 1])))

    assert db.orders == {} and db.customers == {} and db.order_items == {}
    assert [db.books[book.id].units_in_stock for book in books] == [5, 5, 5]


def test_user_lists_only_their_own_orders(db, books):
    for _ in range(3):
        run(checkout_service.place_order(make_purchase(books[:1])))

    page = run(checkout_service.find_user_orders("anna@bookstore.pl", "Anna@Bookstore.pl", 0, 2))
    assert len(page.content) == 2
    assert page.total_elements == 3

    with pytest.raises(ForbiddenError):
        run(checkout_service.find_user_orders("anna@bookstore.pl", "jan@bookstore.pl", 0, 2))


def test_orders_of_unknown_customer(db):
    with pytest.raises(ValidationFailure):
        run(checkout_service.find_user_orders("jan@bookstore.pl", "jan@bookstore.pl", 0, 20))


def test_order_items(db, books):
    run(checkout_service.place_order(make_purchase(books)))
    [order] = db.orders.values()

    items = run(checkout_service.find_order_items(order.id))

    assert [item.title for item in items] == ["Eden", "Niezwyciężony", "Solaris"]
    with pytest.raises(NotFoundError):
        run(checkout_service.find_order_items("missing"))
