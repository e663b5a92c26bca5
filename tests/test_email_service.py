import smtplib
from decimal import Decimal

import pytest

from app.entities import Order, OrderItem
from app.errors import ServiceError
from app.services import email_service
from conftest import run


@pytest.mark.parametrize(
    "price, expected",
    [(Decimal("39.90"), "39.9"), (Decimal("40.00"), "40"), (Decimal("12.05"), "12.05"), (Decimal("1000"), "1000")],
)
def test_format_price(price, expected):
    assert email_service.format_price(price) == expected


def test_build_message_headers(monkeypatch):
    monkeypatch.setattr(email_service.settings, "mail_from", "shop@bookstore.pl")
    monkeypatch.setattr(email_service.settings, "mail_cc", "archive@bookstore.pl")

    message = email_service.build_message("anna@bookstore.pl", "Hello", "Body")

    assert message["From"] == "shop@bookstore.pl"
    assert message["To"] == "anna@bookstore.pl"
    assert message["Cc"] == "archive@bookstore.pl"
    assert message["Subject"] == "Hello"
    assert message.get_content().strip() == "Body"


def test_disabled_smtp_only_logs(monkeypatch):
    def deliver(message):
        raise AssertionError("nothing should be delivered")

    monkeypatch.setattr(email_service.settings, "smtp_enabled", False)
    monkeypatch.setattr(email_service, "_deliver", deliver)

    run(email_service.send(email_service.build_message("anna@bookstore.pl", "Hello", "Body")))


def test_delivery_failure_becomes_service_error(monkeypatch):
    def deliver(message):
        raise smtplib.SMTPServerDisconnected("connection closed")

    monkeypatch.setattr(email_service.settings, "smtp_enabled", True)
    monkeypatch.setattr(email_service, "_deliver", deliver)

    with pytest.raises(ServiceError) as exc_info:
        run(email_service.send_activation_email("Anna", "http://localhost/activate", "anna@bookstore.pl"))
    assert "anna@bookstore.pl" in exc_info.value.message


def test_order_summary_lists_items_and_totals(monkeypatch):
    sent = []

    async def send(message):
        sent.append(message)

    monkeypatch.setattr(email_service, "send", send)
    order = Order(total_quantity=3, total_price=Decimal("109.30"), order_tracking_number="abc123")
    order.add_order_item(OrderItem(book_id="b1", title="Solaris", unit_price=Decimal("39.90"), quantity=2))
    order.add_order_item(OrderItem(book_id="b2", title="Eden", unit_price=Decimal("29.50"), quantity=1))

    run(email_service.send_order_summary_email("anna@bookstore.pl", "Anna", order))

    [message] = sent
    body = message.get_content()
    assert message["Subject"] == email_service.ORDER_SUMMARY_SUBJECT
    assert "abc123" in body
    assert "Solaris x 2 - 39.9" in body
    assert "Eden x 1 - 29.5" in body
    assert "Total price: 109.3" in body


def test_new_account_email_carries_password_and_link(monkeypatch):
    sent = []

    async def send(message):
        sent.append(message)

    monkeypatch.setattr(email_service, "send", send)

    run(email_service.send_new_account_email("Ewa", "http://localhost/users/activate?userId=u1", "Xy#12345ab",
                                             "ewa@bookstore.pl"))

    [message] = sent
    body = message.get_content()
    assert message["Subject"] == email_service.NEW_ACCOUNT_SUBJECT
    assert message["To"] == "ewa@bookstore.pl"
    assert "Your password: Xy#12345ab" in body
    assert "http://localhost/users/activate?userId=u1" in body
