"""Checkout: turns a purchase into a persisted customer order."""
from typing import List

import asyncpg

from app.db.connection import transaction
from app.entities import Address, Customer, Order, OrderItem
from app.errors import (
    ForbiddenError,
    InsufficientStockError,
    NotFoundError,
    ServiceError,
    ValidationFailure,
    wrap_persistence_errors,
)
from app.models.checkout_model import AddressCreate, Purchase, PurchaseConfirmation
from app.repositories import address_repository, book_repository, order_repository
from app.services import email_service
from app.utils.ids import new_tracking_number
from app.utils.logger import get_logger
from app.utils.pagination import PageSlice, paginate

logger = get_logger(__name__)


async def _reserve_stock(item: OrderItem, conn: asyncpg.Connection) -> None:
    units_in_stock = await book_repository.lock_units_in_stock(item.book_id, conn)
    if units_in_stock is None:
        raise InsufficientStockError(f"Book with id: {item.book_id} cannot be found")
    if units_in_stock < item.quantity:
        raise InsufficientStockError(
            f"Not enough units of '{item.title}' in stock: requested {item.quantity}, available {units_in_stock}"
        )
    await book_repository.update_units_in_stock(item.book_id, units_in_stock - item.quantity, conn)


async def _resolve_address(dto: AddressCreate, conn: asyncpg.Connection) -> Address:
    address = Address.from_dto(dto)
    stored = await address_repository.find_matching(address, conn=conn)
    return stored or address


@wrap_persistence_errors("An error occurred during placing order")
async def place_order(purchase: Purchase) -> PurchaseConfirmation:
    """Persist the purchase as one order; nothing is stored if any step fails."""
    async with transaction() as conn:
        order = Order.from_dto(purchase.order)
        order.order_tracking_number = new_tracking_number()

        for item_dto in purchase.order_items:
            item = OrderItem.from_dto(item_dto)
            await _reserve_stock(item, conn)
            order.add_order_item(item)

        shipping_address = await _resolve_address(purchase.shipping_address, conn)
        if shipping_address.matches(purchase.billing_address):
            billing_address = shipping_address
        else:
            billing_address = await _resolve_address(purchase.billing_address, conn)
        order.set_shipping_address(shipping_address)
        order.set_billing_address(billing_address)

        customer = await order_repository.find_customer_by_email(purchase.customer.email, conn=conn)
        if customer is None:
            customer = Customer.from_dto(purchase.customer)
        else:
            customer.first_name = purchase.customer.first_name
            customer.last_name = purchase.customer.last_name
        customer.add_order(order)

        await order_repository.save_customer(customer, conn)

    logger.info(
        "Placed order %s with %d items for %s",
        order.order_tracking_number,
        len(order.order_items),
        customer.email,
    )
    try:
        await email_service.send_order_summary_email(customer.email, customer.first_name, order)
    except ServiceError:
        logger.warning("Order %s placed but its summary email was not sent", order.order_tracking_number)
    return PurchaseConfirmation(order_tracking_number=order.order_tracking_number)


@wrap_persistence_errors("An error occurred during retrieving orders")
async def find_user_orders(email: str, current_email: str, page: int, size: int) -> PageSlice[Order]:
    """Orders of the customer with ``email``, newest first. Users may only list their own."""
    if email.casefold() != current_email.casefold():
        raise ForbiddenError("You can only view your own orders")
    customer = await order_repository.find_customer_by_email(email)
    if customer is None:
        raise ValidationFailure(f"Customer with email: {email} has not placed any order")
    orders = await order_repository.find_by_customer_email(email)
    return paginate(orders, page, size)


@wrap_persistence_errors("An error occurred during retrieving order items")
async def find_order_items(order_id: str) -> List[OrderItem]:
    if not await order_repository.exists_by_id(order_id):
        raise NotFoundError(f"Order with id: {order_id} cannot be found")
    return await order_repository.find_items_by_order_id(order_id)
