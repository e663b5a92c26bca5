"""Checkout models."""
from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, EmailStr, Field

from app.models.book_model import MAX_PRICE

ZIP_CODE_PATTERN = r"^\d{2}-\d{3}$"


class AddressCreate(BaseModel):
    city: str = Field(..., min_length=1, max_length=100)
    street: str = Field(..., min_length=1, max_length=150)
    location_number: str = Field(..., min_length=1, max_length=20)
    zip_code: str = Field(..., pattern=ZIP_CODE_PATTERN)


class CustomerCreate(BaseModel):
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr


class OrderCreate(BaseModel):
    total_quantity: int = Field(..., ge=1)
    total_price: Decimal = Field(..., gt=0)


class OrderItemCreate(BaseModel):
    book_id: str = Field(..., min_length=1)
    title: str = Field(..., min_length=1)
    image_url: Optional[str] = None
    unit_price: Decimal = Field(..., gt=0, le=MAX_PRICE)
    quantity: int = Field(..., ge=1)


class Purchase(BaseModel):
    customer: CustomerCreate
    shipping_address: AddressCreate
    billing_address: AddressCreate
    order: OrderCreate
    order_items: List[OrderItemCreate] = Field(..., min_length=1)


class PurchaseConfirmation(BaseModel):
    order_tracking_number: str


class Address(BaseModel):
    id: str
    city: str
    street: str
    location_number: str
    zip_code: str

    model_config = {"from_attributes": True}


class OrderItem(BaseModel):
    id: str
    book_id: str
    title: str
    image_url: Optional[str] = None
    unit_price: Decimal
    quantity: int

    model_config = {"from_attributes": True}


class Order(BaseModel):
    id: str
    order_tracking_number: str
    total_quantity: int
    total_price: Decimal
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}
