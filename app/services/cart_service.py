from datetime import datetime, timezone
from decimal import Decimal
from typing import Dict, Any
from sqlalchemy.orm import Session
from app.data.models.cart import CartModel
from app.data.models.cart_item import CartItemModel
from app.domain.errors import (
    INVALID_QUANTITY,
    INSUFFICIENT_STOCK,
    ConflictError,
    ForbiddenError,
    NotFoundError,
    ValidationFailure,
)
from app.domain.types import CART_ACTIVE, ProductStatus
from app.repos.cart_repo import CartRepo
from app.repos.product_repo import ProductRepo
from app.repos.user_repo import UserRepo
from app.utils.logging import get_logger

logger = get_logger(__name__)


def _now():
    return datetime.now(timezone.utc)


class CartService:
    """
    Prosta implementacja cqrs i proste use case dla domeny cart
    commands (add, update, remove) modyfikuja stan
    query (get) tylko odczyt (tworzy pusty koszyk przy pierwszym wejsciu)
    """

    def __init__(self, db: Session):
        self.repo = CartRepo(db)
        self.product_repo = ProductRepo(db)
        self.user_repo = UserRepo(db)

    def _get_or_create_cart(self, user_id: int) -> CartModel:
        cart = self.repo.get_cart_by_user(user_id)
        if cart:
            return cart

        if not self.user_repo.get_user(user_id):
            raise NotFoundError("User not found")

        created = self.repo.create_cart(
            CartModel(user_id=user_id, status=CART_ACTIVE, version=1)
        )
        logger.info(f"Utworzono nowy koszyk {created.id} dla uzytkownika {user_id}")
        return created

    def _get_owned_item(self, user_id: int, item_id: int) -> CartItemModel:
        item = self.repo.get_cart_item(item_id)
        if not item:
            raise NotFoundError("Cart item not found")
        if item.cart.user_id != user_id:
            raise ForbiddenError("Brak dostepu do koszyka")
        return item

    def _bump_version(self, cart: CartModel):
        # Optimistic locking
        # np w bazie update set version 2 where id 1 and version 1
        rowcount = self.repo.update_cart_version(
            cart_id=cart.id,
            old_version=cart.version,
            new_data={"version": cart.version + 1, "updated_at": _now()},
        )
        if rowcount == 0: #jesli tj 0 rows affected
            self.repo.rollback()
            raise ConflictError(
                "Cart was modified by another operation, please retry"
            )
        self.repo.commit()

    #query - odczyt
    def get_cart(self, user_id: int) -> Dict[str, Any]:
        cart = self._get_or_create_cart(user_id)

        items = []
        total = Decimal("0.00")
        for i in cart.items:
            product = i.product
            price = i.price_at_addition if i.price_at_addition is not None else product.price
            total += price * i.quantity
            items.append(
                {
                    "id": i.id,
                    "quantity": i.quantity,
                    "price_at_addition": i.price_at_addition,
                    "added_at": i.added_at,
                    "product": {
                        "product_id": product.id,
                        "product_name": product.product_name,
                        "price": product.price,
                        "quantity_available": product.quantity_available,
                        "seller_id": product.seller_id,
                    },
                }
            )

        #dict przyksztalcany w jsona
        return {
            "cart_id": cart.id,
            "user_id": cart.user_id,
            "status": cart.status,
            "items": items,
            "total": total,
        }

    #commands
    def add_product(self, user_id: int, product_id: int, quantity: int) -> Dict[str, Any]:
        # Walidacje
        if quantity <= 0:
            raise ValidationFailure("Quantity must be greater than 0", reason=INVALID_QUANTITY)

        product = self.product_repo.get_product(product_id)
        if not product:
            raise NotFoundError("Product not found")

        if product.status != ProductStatus.ACTIVE.value:
            raise ValidationFailure(f"Product {product.product_name} is not available")

        cart = self._get_or_create_cart(user_id)

        # Sprawdz czy produkt juz jest w koszyku
        existing_item = self.repo.get_cart_item_by_product(cart.id, product_id)

        if existing_item:
            logger.info(
                f"Produkt {product_id} juz jest w koszyku, zwiekszam ilosc "
                f"z {existing_item.quantity} do {existing_item.quantity + quantity}"
            )
            existing_item.quantity += quantity
            existing_item.price_at_addition = product.price  # update ceny
            self.repo.add_cart_item(existing_item)
        else:
            logger.info(f"Dodaje nowy produkt {product_id} do koszyka {cart.id}")
            self.repo.add_cart_item(
                CartItemModel(
                    cart_id=cart.id,
                    product_id=product_id,
                    quantity=quantity,
                    price_at_addition=product.price,
                )
            )

        self._bump_version(cart)

        return {
            "message": "Product added to cart successfully",
            "cart_item_count": len(self.repo.get_cart(cart.id).items),
        }

    def update_item(self, user_id: int, item_id: int, quantity: int) -> Dict[str, Any]:
        if quantity < 0:
            raise ValidationFailure("Quantity cannot be negative", reason=INVALID_QUANTITY)

        item = self._get_owned_item(user_id, item_id)
        cart = item.cart

        # 0 = usun pozycje
        if quantity == 0:
            return self.remove_item(user_id, item_id)

        available = item.product.quantity_available
        if available < quantity:
            raise ValidationFailure(
                f"Only {available} item{'s' if available != 1 else ''} available in stock",
                reason=INSUFFICIENT_STOCK,
                productName=item.product.product_name,
                available=available,
                requested=quantity,
            )

        item.quantity = quantity
        self.repo.add_cart_item(item)
        self._bump_version(cart)

        logger.info(f"Pozycja {item_id} w koszyku {cart.id}: ilosc {quantity}")
        return self.get_cart(user_id)

    def remove_item(self, user_id: int, item_id: int) -> Dict[str, Any]:
        item = self._get_owned_item(user_id, item_id)
        cart = item.cart

        logger.info(f"Usuwanie pozycji {item_id} z koszyka {cart.id}")
        self.repo.delete_cart_item(item)
        self._bump_version(cart)

        return self.get_cart(user_id)
