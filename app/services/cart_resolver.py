# app/services/cart_resolver.py
from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, Sequence

from app.data.models.cart_item import CartItemModel
from app.data.models.product import ProductModel
from app.domain.errors import (
    EMPTY_CART,
    INSUFFICIENT_STOCK,
    INVALID_SELECTION,
    NO_MATCHING_ITEMS,
    ValidationFailure,
)


@dataclass(frozen=True)
class CartSelection:
    """
    Ktore pozycje koszyka ida do zamowienia.

    ``item_ids is None`` -> caly koszyk (i potem czyszczenie calego koszyka),
    w przeciwnym razie tylko wskazane pozycje (i usuniecie tylko ich).
    """

    item_ids: frozenset[int] | None = None

    @property
    def is_partial(self) -> bool:
        return self.item_ids is not None

    @classmethod
    def whole_cart(cls) -> "CartSelection":
        return cls()

    @classmethod
    def of(cls, item_ids: Iterable[int]) -> "CartSelection":
        return cls(item_ids=frozenset(item_ids))

    @classmethod
    def parse(cls, raw: str | None) -> "CartSelection":
        """Parsuje "1,2,3". Pusty napis oznacza caly koszyk."""
        if raw is None:
            return cls.whole_cart()

        ids = []
        for token in raw.split(","):
            token = token.strip()
            if not token:
                continue
            try:
                ids.append(int(token))
            except ValueError:
                raise ValidationFailure(
                    f"Invalid cart item id: {token}", reason=INVALID_SELECTION
                ) from None

        if not ids:
            return cls.whole_cart()
        return cls.of(ids)


@dataclass(frozen=True)
class ResolvedLine:
    cart_item_id: int
    product: ProductModel
    quantity: int
    unit_price: Decimal

    @property
    def subtotal(self) -> Decimal:
        return self.unit_price * self.quantity


def resolve_lines(
    cart_items: Sequence[CartItemModel],
    selection: CartSelection,
) -> list[ResolvedLine]:
    """
    Zamienia pozycje koszyka na linie zamowienia.

    - pusty koszyk -> EmptyCart (sprawdzane przed filtrowaniem)
    - wybor nie pasuje do zadnej pozycji -> NoMatchingItems
    - pierwsza pozycja bez pokrycia w magazynie -> InsufficientStock
    """
    if not cart_items:
        raise ValidationFailure("Cart is empty", reason=EMPTY_CART)

    if selection.is_partial:
        chosen = [i for i in cart_items if i.id in selection.item_ids]
        if not chosen:
            raise ValidationFailure(
                "None of the selected items are in the cart", reason=NO_MATCHING_ITEMS
            )
    else:
        chosen = list(cart_items)

    lines = []
    for item in chosen:
        product = item.product
        if product.quantity_available < item.quantity:
            raise ValidationFailure(
                f"Insufficient stock for product: {product.product_name}",
                reason=INSUFFICIENT_STOCK,
                productName=product.product_name,
                available=product.quantity_available,
                requested=item.quantity,
            )

        # stare koszyki nie maja zapisanej ceny
        unit_price = item.price_at_addition
        if unit_price is None:
            unit_price = product.price

        lines.append(
            ResolvedLine(
                cart_item_id=item.id,
                product=product,
                quantity=item.quantity,
                unit_price=Decimal(unit_price),
            )
        )

    return lines
