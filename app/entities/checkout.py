"""Checkout entities: customers, addresses, orders and order items."""
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING, List, Optional

from app.utils.ids import new_id

if TYPE_CHECKING:
    from app.models.checkout_model import (
        AddressCreate,
        CustomerCreate,
        OrderCreate,
        OrderItemCreate,
    )

ADDRESS_FIELDS = ("street", "city", "location_number", "zip_code")


@dataclass
class Address:
    city: str
    street: str
    location_number: str
    zip_code: str
    id: str = field(default_factory=new_id)

    @classmethod
    def from_dto(cls, dto: "AddressCreate") -> "Address":
        return cls(
            city=dto.city,
            street=dto.street,
            location_number=dto.location_number,
            zip_code=dto.zip_code,
        )

    @classmethod
    def from_record(cls, record) -> "Address":
        return cls(
            id=record["id"],
            city=record["city"],
            street=record["street"],
            location_number=record["location_number"],
            zip_code=record["zip_code"],
        )

    def matches(self, other) -> bool:
        """Same location, ignoring case. ``other`` may be an entity or a transfer object."""
        return all(
            getattr(self, name).casefold() == getattr(other, name).casefold()
            for name in ADDRESS_FIELDS
        )


@dataclass
class OrderItem:
    book_id: str
    title: str
    unit_price: Decimal
    quantity: int
    image_url: Optional[str] = None
    order_id: Optional[str] = None
    id: str = field(default_factory=new_id)
    order: Optional["Order"] = field(default=None, repr=False, compare=False)

    @classmethod
    def from_dto(cls, dto: "OrderItemCreate") -> "OrderItem":
        return cls(
            book_id=dto.book_id,
            title=dto.title,
            unit_price=dto.unit_price,
            quantity=dto.quantity,
            image_url=dto.image_url,
        )

    @classmethod
    def from_record(cls, record) -> "OrderItem":
        return cls(
            id=record["id"],
            order_id=record["order_id"],
            book_id=record["book_id"],
            title=record["title"],
            unit_price=record["unit_price"],
            quantity=record["quantity"],
            image_url=record["image_url"],
        )


@dataclass
class Order:
    total_quantity: int
    total_price: Decimal
    order_tracking_number: Optional[str] = None
    customer_id: Optional[str] = None
    shipping_address_id: Optional[str] = None
    billing_address_id: Optional[str] = None
    id: str = field(default_factory=new_id)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    order_items: List[OrderItem] = field(default_factory=list, repr=False, compare=False)
    customer: Optional["Customer"] = field(default=None, repr=False, compare=False)
    shipping_address: Optional[Address] = field(default=None, repr=False, compare=False)
    billing_address: Optional[Address] = field(default=None, repr=False, compare=False)

    @classmethod
    def from_dto(cls, dto: "OrderCreate") -> "Order":
        return cls(total_quantity=dto.total_quantity, total_price=dto.total_price)

    @classmethod
    def from_record(cls, record) -> "Order":
        return cls(
            id=record["id"],
            order_tracking_number=record["order_tracking_number"],
            total_quantity=record["total_quantity"],
            total_price=record["total_price"],
            customer_id=record["customer_id"],
            shipping_address_id=record["shipping_address_id"],
            billing_address_id=record["billing_address_id"],
            created_at=record["created_at"],
            updated_at=record["updated_at"],
        )

    def add_order_item(self, item: OrderItem) -> None:
        if all(existing.id != item.id for existing in self.order_items):
            self.order_items.append(item)
        item.order_id = self.id
        item.order = self

    def set_shipping_address(self, address: Address) -> None:
        self.shipping_address = address
        self.shipping_address_id = address.id

    def set_billing_address(self, address: Address) -> None:
        self.billing_address = address
        self.billing_address_id = address.id


@dataclass
class Customer:
    first_name: str
    last_name: str
    email: str
    id: str = field(default_factory=new_id)
    orders: List[Order] = field(default_factory=list, repr=False, compare=False)

    @classmethod
    def from_dto(cls, dto: "CustomerCreate") -> "Customer":
        return cls(first_name=dto.first_name, last_name=dto.last_name, email=dto.email)

    @classmethod
    def from_record(cls, record) -> "Customer":
        return cls(
            id=record["id"],
            first_name=record["first_name"],
            last_name=record["last_name"],
            email=record["email"],
        )

    def add_order(self, order: Order) -> None:
        if all(existing.id != order.id for existing in self.orders):
            self.orders.append(order)
        order.customer_id = self.id
        order.customer = self
