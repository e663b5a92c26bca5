"""Checkout endpoints."""
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query, status

from app.config import settings
from app.models.checkout_model import Order, OrderItem, Purchase, PurchaseConfirmation
from app.models.page_model import Page
from app.models.user_model import TokenData
from app.services import checkout_service, user_service
from app.utils.dependencies import require_authority

router = APIRouter()


@router.post("/purchase", response_model=PurchaseConfirmation, status_code=status.HTTP_201_CREATED)
async def place_order(purchase: Purchase):
    """Place an order and return its tracking number."""
    return await checkout_service.place_order(purchase)


@router.get("/orders", response_model=Page[Order])
async def list_orders(
    email: str = Query(..., min_length=3),
    page: int = Query(0, ge=0),
    size: int = Query(settings.orders_page_size, ge=1, le=100),
    current_user: TokenData = Depends(require_authority("order:read")),
):
    """Orders placed with the caller's own email, newest first."""
    user = await user_service.find_user_by_id(current_user.subject)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token cannot be verified",
        )
    orders = await checkout_service.find_user_orders(email, user.email, page, size)
    return Page[Order].from_slice(orders, Order)


@router.get(
    "/orders/{order_id}/items",
    response_model=List[OrderItem],
    dependencies=[Depends(require_authority("order:read"))],
)
async def list_order_items(order_id: str):
    return [OrderItem.model_validate(item) for item in await checkout_service.find_order_items(order_id)]
