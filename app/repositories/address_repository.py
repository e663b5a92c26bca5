"""Address persistence."""
from typing import Optional

import asyncpg

from app.db.connection import connection
from app.entities import Address


async def find_by_id(address_id: str, conn: Optional[asyncpg.Connection] = None) -> Optional[Address]:
    async with connection(conn) as conn:
        record = await conn.fetchrow("SELECT * FROM addresses WHERE id=$1", address_id)
    return Address.from_record(record) if record else None


async def find_matching(address: Address, conn: Optional[asyncpg.Connection] = None) -> Optional[Address]:
    """A stored address with the same street, city, location number and zip code, ignoring case."""
    async with connection(conn) as conn:
        record = await conn.fetchrow(
            """
            SELECT * FROM addresses
            WHERE lower(street) = lower($1) AND lower(city) = lower($2)
              AND lower(location_number) = lower($3) AND lower(zip_code) = lower($4)
            LIMIT 1
            """,
            address.street,
            address.city,
            address.location_number,
            address.zip_code,
        )
    return Address.from_record(record) if record else None


async def save(address: Address, conn: Optional[asyncpg.Connection] = None) -> Address:
    """Insert ``address``; an already stored address is left untouched."""
    async with connection(conn) as conn:
        await conn.execute(
            """
            INSERT INTO addresses (id, city, street, location_number, zip_code)
            VALUES ($1, $2, $3, $4, $5)
            ON CONFLICT (id) DO NOTHING
            """,
            address.id,
            address.city,
            address.street,
            address.location_number,
            address.zip_code,
        )
    return address
