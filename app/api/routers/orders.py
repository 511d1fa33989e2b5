# app/api/routers/orders.py
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.api.deps import get_lock_service
from app.data.database import get_db
from app.domain.schemas import CheckoutIn, CheckoutOut, OrderOut, OrderStatusIn
from app.services.cart_resolver import CartSelection
from app.services.checkout_service import CheckoutService
from app.services.lock_service import LockService
from app.services.order_service import OrderService

router = APIRouter(prefix="/api", tags=["orders"])


@router.post("/orders/checkout", response_model=CheckoutOut)
def checkout(
    payload: Optional[CheckoutIn] = None,
    user_id: int = Query(...),
    db: Session = Depends(get_db),
    lock_service: LockService = Depends(get_lock_service),
):
    """
    Składa zamówienie z koszyka (całego albo wybranych pozycji).
    Wysyła powiadomienie asynchronicznie.
    """
    payload = payload or CheckoutIn()
    svc = CheckoutService(db, lock_service=lock_service)
    return svc.checkout(
        buyer_id=user_id,
        selection=CartSelection.parse(payload.selected_item_ids),
        shipping_address=payload.shipping_address,
        voucher_code=payload.voucher_code,
        payment_method=payload.payment_method,
    )


@router.get("/user/orders", response_model=List[OrderOut])
def list_orders(
    user_id: int = Query(...),
    db: Session = Depends(get_db),
):
    return OrderService(db).list_buyer_orders(user_id)


@router.get("/user/orders/{order_id}", response_model=OrderOut)
def get_order(
    order_id: int,
    user_id: int = Query(...),
    db: Session = Depends(get_db),
):
    """
    Pobiera szczegóły zamówienia (tylko kupujący).
    """
    return OrderService(db).get_buyer_order(order_id, user_id)


@router.put("/user/orders/{order_id}/status", response_model=OrderOut)
def update_order_status(
    order_id: int,
    payload: OrderStatusIn,
    user_id: int = Query(...),
    db: Session = Depends(get_db),
):
    return OrderService(db).update_status(order_id, user_id, payload.order_status)
