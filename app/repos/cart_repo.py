# app/repos/cart_repo.py
from typing import Any, Iterable

from sqlalchemy import select, delete
from sqlalchemy.orm import Session

from app.data.models.cart import CartModel
from app.data.models.cart_item import CartItemModel


class CartRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_cart(self, cart_id: int) -> CartModel | None:
        return self.db.get(CartModel, cart_id)

    def get_cart_by_user(self, user_id: int) -> CartModel | None:
        return self.db.execute(
            select(CartModel).where(CartModel.user_id == user_id)
        ).scalar_one_or_none()

    def create_cart(self, cart: CartModel) -> CartModel:
        self.db.add(cart)
        self.db.commit()
        self.db.refresh(cart)
        return cart

    def get_cart_item(self, item_id: int) -> CartItemModel | None:
        return self.db.get(CartItemModel, item_id)

    def get_cart_item_by_product(self, cart_id: int, product_id: int) -> CartItemModel | None:
        return self.db.execute(
            select(CartItemModel).where(
                CartItemModel.cart_id == cart_id,
                CartItemModel.product_id == product_id,
            )
        ).scalar_one_or_none()

    def add_cart_item(self, item: CartItemModel) -> CartItemModel:
        self.db.add(item)
        self.db.flush()
        return item

    def delete_cart_item(self, item: CartItemModel) -> None:
        self.db.delete(item)
        self.db.flush()

    def delete_cart_items(self, cart_id: int, item_ids: Iterable[int] | None = None) -> int:
        """Usuwa wskazane pozycje koszyka, a bez ``item_ids`` wszystkie."""
        stmt = delete(CartItemModel).where(CartItemModel.cart_id == cart_id)
        if item_ids is not None:
            stmt = stmt.where(CartItemModel.id.in_(list(item_ids)))
        result = self.db.execute(stmt.execution_options(synchronize_session=False))
        # kolekcja cart.items musi zobaczyc usuniecie
        cart = self.db.get(CartModel, cart_id)
        if cart is not None:
            self.db.expire(cart, ["items"])
        return result.rowcount

    def update_cart_version(self, cart_id: int, old_version: int, new_data: dict[str, Any]) -> int:
        # update carts set ... where id = :id and version = :old_version
        return (
            self.db.query(CartModel)
            .filter(CartModel.id == cart_id, CartModel.version == old_version)
            .update(new_data, synchronize_session="evaluate")
        )

    def commit(self):
        self.db.commit()

    def rollback(self):
        self.db.rollback()
