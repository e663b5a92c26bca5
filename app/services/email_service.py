"""Outbound email for account lifecycle and order events."""
import smtplib
from decimal import Decimal
from email.message import EmailMessage

from starlette.concurrency import run_in_threadpool

from app.config import settings
from app.entities import Order
from app.errors import ServiceError
from app.utils.logger import get_logger

logger = get_logger(__name__)

ACTIVATION_SUBJECT = "Bookstore - activate your account"
PASSWORD_RESET_SUBJECT = "Bookstore - new password"
NEW_ACCOUNT_SUBJECT = "Bookstore - your new account"
ORDER_SUMMARY_SUBJECT = "Bookstore - order summary"
SIGNATURE = "Bookstore - The Support Team"


def build_message(recipient: str, subject: str, body: str) -> EmailMessage:
    message = EmailMessage()
    message["From"] = settings.mail_from
    message["To"] = recipient
    if settings.mail_cc:
        message["Cc"] = settings.mail_cc
    message["Subject"] = subject
    message.set_content(body)
    return message


def format_price(price: Decimal) -> str:
    """At most two decimal places, no trailing zeros, no grouping."""
    text = f"{price.quantize(Decimal('0.01')):f}"
    return text.rstrip("0").rstrip(".") if "." in text else text


def _deliver(message: EmailMessage) -> None:
    with smtplib.SMTP(settings.smtp_host, settings.smtp_port, timeout=30) as smtp:
        smtp.starttls()
        if settings.smtp_username:
            smtp.login(settings.smtp_username, settings.smtp_password)
        smtp.send_message(message)


async def send(message: EmailMessage) -> None:
    """Deliver ``message``; delivery failures surface as ``ServiceError``."""
    if not settings.smtp_enabled:
        logger.info("SMTP disabled, not sending '%s' to %s", message["Subject"], message["To"])
        return
    try:
        await run_in_threadpool(_deliver, message)
    except (smtplib.SMTPException, OSError) as exc:
        error = f"An error occurred during sending email to {message['To']}"
        logger.error(error, exc_info=exc)
        raise ServiceError(error) from exc
    logger.info("Sent '%s' to %s", message["Subject"], message["To"])


async def send_activation_email(first_name: str, activation_link: str, email: str) -> None:
    body = (
        f"Hello {first_name},\n\n"
        "You have just registered at Bookstore.\n\n"
        f"To activate your account open the activation link: {activation_link}\n\n"
        f"{SIGNATURE}"
    )
    await send(build_message(email, ACTIVATION_SUBJECT, body))


async def send_new_account_email(first_name: str, activation_link: str, password: str, email: str) -> None:
    """Sent when a moderator opens an account on someone's behalf."""
    body = (
        f"Hello {first_name},\n\n"
        "An account at Bookstore has been created for you.\n\n"
        f"Your password: {password}\n"
        f"To activate your account open the activation link: {activation_link}\n\n"
        f"{SIGNATURE}"
    )
    await send(build_message(email, NEW_ACCOUNT_SUBJECT, body))


async def send_password_reset_email(first_name: str, password: str, email: str) -> None:
    body = (
        f"Hello {first_name},\n\n"
        "Your password has been reset.\n\n"
        f"Log in with the new password: {password}\n\n"
        f"{SIGNATURE}"
    )
    await send(build_message(email, PASSWORD_RESET_SUBJECT, body))


async def send_order_summary_email(email: str, first_name: str, order: Order) -> None:
    lines = [
        f"  {item.title} x {item.quantity} - {format_price(item.unit_price)}"
        for item in order.order_items
    ]
    body = (
        f"Hello {first_name},\n\n"
        f"Thank you for your order {order.order_tracking_number}.\n\n"
        + "\n".join(lines)
        + f"\n\nTotal quantity: {order.total_quantity}\n"
        f"Total price: {format_price(order.total_price)}\n\n"
        f"{SIGNATURE}"
    )
    await send(build_message(email, ORDER_SUMMARY_SUBJECT, body))
