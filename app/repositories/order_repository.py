"""Customer, order and order item persistence."""
from typing import List, Optional

import asyncpg

from app.db.connection import connection
from app.entities import Customer, Order, OrderItem
from app.repositories import address_repository


async def find_customer_by_email(email: str, conn: Optional[asyncpg.Connection] = None) -> Optional[Customer]:
    async with connection(conn) as conn:
        record = await conn.fetchrow(
            "SELECT * FROM customers WHERE lower(email) = lower($1) LIMIT 1",
            email,
        )
    return Customer.from_record(record) if record else None


async def save_customer(customer: Customer, conn: asyncpg.Connection) -> Customer:
    """Persist the customer with its new orders, their addresses and items.

    A returning customer keeps its id and takes the name given with the latest order.

    Must run inside a transaction so that the whole graph lands or nothing does.
    """
    await conn.execute(
        """
        INSERT INTO customers (id, first_name, last_name, email)
        VALUES ($1, $2, $3, $4)
        ON CONFLICT (id) DO UPDATE SET
            first_name = EXCLUDED.first_name,
            last_name = EXCLUDED.last_name
        """,
        customer.id,
        customer.first_name,
        customer.last_name,
        customer.email,
    )
    for order in customer.orders:
        for address in (order.shipping_address, order.billing_address):
            if address is not None:
                await address_repository.save(address, conn=conn)
        record = await conn.fetchrow(
            """
            INSERT INTO orders (id, order_tracking_number, total_quantity, total_price,
                                customer_id, shipping_address_id, billing_address_id)
            VALUES ($1, $2, $3, $4, $5, $6, $7)
            ON CONFLICT (id) DO NOTHING
            RETURNING created_at, updated_at
            """,
            order.id,
            order.order_tracking_number,
            order.total_quantity,
            order.total_price,
            order.customer_id,
            order.shipping_address_id,
            order.billing_address_id,
        )
        if record is None:
            continue
        order.created_at = record["created_at"]
        order.updated_at = record["updated_at"]
        if order.order_items:
            await conn.executemany(
                """
                INSERT INTO order_items (id, order_id, book_id, title, image_url, unit_price, quantity)
                VALUES ($1, $2, $3, $4, $5, $6, $7)
                """,
                [
                    (item.id, item.order_id, item.book_id, item.title, item.image_url,
                     item.unit_price, item.quantity)
                    for item in order.order_items
                ],
            )
    return customer


async def find_by_customer_email(email: str) -> List[Order]:
    async with connection() as conn:
        rows = await conn.fetch(
            """
            SELECT o.* FROM orders o
            JOIN customers c ON c.id = o.customer_id
            WHERE lower(c.email) = lower($1)
            ORDER BY o.created_at DESC, o.id
            """,
            email,
        )
    return [Order.from_record(row) for row in rows]


async def exists_by_id(order_id: str) -> bool:
    async with connection() as conn:
        return await conn.fetchval("SELECT EXISTS(SELECT 1 FROM orders WHERE id=$1)", order_id)


async def find_items_by_order_id(order_id: str) -> List[OrderItem]:
    async with connection() as conn:
        rows = await conn.fetch("SELECT * FROM order_items WHERE order_id=$1 ORDER BY title", order_id)
    return [OrderItem.from_record(row) for row in rows]
