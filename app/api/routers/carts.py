#app/api/routers/carts.py
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.data.database import get_db
from app.domain.schemas import (
    CartAddOut,
    CartOut,
    ItemIn,
    ItemUpdate,
)
from app.services.cart_service import CartService

router = APIRouter(prefix="/api/cart", tags=["cart"])


def get_service(db: Session):
    return CartService(db)


@router.get("", response_model=CartOut)
def get_cart(
    user_id: int = Query(...),
    db: Session = Depends(get_db),
):
    return get_service(db).get_cart(user_id)


@router.post("/add", response_model=CartAddOut)
def add_item(
    payload: ItemIn,
    user_id: int = Query(...),
    db: Session = Depends(get_db),
):
    return get_service(db).add_product(
        user_id=user_id,
        product_id=payload.product_id,
        quantity=payload.quantity,
    )


@router.put("/items/{item_id}", response_model=CartOut)
def update_item(
    item_id: int,
    payload: ItemUpdate,
    user_id: int = Query(...),
    db: Session = Depends(get_db),
):
    return get_service(db).update_item(user_id, item_id, payload.quantity)


@router.delete("/items/{item_id}", response_model=CartOut)
def remove_item(
    item_id: int,
    user_id: int = Query(...),
    db: Session = Depends(get_db),
):
    return get_service(db).remove_item(user_id, item_id)
