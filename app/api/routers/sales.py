# app/api/routers/sales.py
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.data.database import get_db
from app.domain.schemas import DeliverIn, OrderOut
from app.services.order_service import OrderService

router = APIRouter(prefix="/api/user/sales", tags=["sales"])


@router.get("", response_model=List[OrderOut])
def list_sales(
    user_id: int = Query(...),
    db: Session = Depends(get_db),
):
    return OrderService(db).list_seller_orders(user_id)


@router.get("/{order_id}", response_model=OrderOut)
def get_sale(
    order_id: int,
    user_id: int = Query(...),
    db: Session = Depends(get_db),
):
    return OrderService(db).get_seller_order(order_id, user_id)


@router.put("/{order_id}/deliver", response_model=OrderOut)
def mark_delivered(
    order_id: int,
    payload: Optional[DeliverIn] = None,
    user_id: int = Query(...),
    db: Session = Depends(get_db),
):
    payload = payload or DeliverIn()
    return OrderService(db).mark_delivered(order_id, user_id, payload.delivery_confirmation_image)
