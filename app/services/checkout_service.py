# app/services/checkout_service.py
from datetime import datetime, timezone
from typing import Any, Dict

from redis.exceptions import RedisError
from sqlalchemy.orm import Session

from app.domain.errors import ConflictError, DomainError, NotFoundError
from app.repos.cart_repo import CartRepo
from app.repos.order_repo import OrderRepo
from app.repos.product_repo import ProductRepo
from app.repos.user_repo import UserRepo
from app.repos.voucher_repo import VoucherRepo
from app.services.cart_resolver import CartSelection, resolve_lines
from app.services.lock_service import LockService
from app.services.notification_service import NotificationService
from app.services.order_assembler import OrderAssembler
from app.services.voucher_service import VoucherValidator
from app.utils.logging import get_logger

logger = get_logger(__name__)


class CheckoutService:
    """
    Checkout koszyka w jednej transakcji.

    Kolejnosc: linie koszyka + stany -> zamowienie + voucher -> zmniejszenie
    stanow -> licznik vouchera -> zapis zamowienia -> czyszczenie koszyka.
    Dowolny blad = rollback calosci.
    """

    def __init__(
        self,
        db: Session,
        lock_service: LockService,
        notification_service: NotificationService | None = None,
    ):
        self.db = db
        self.cart_repo = CartRepo(db)
        self.order_repo = OrderRepo(db)
        self.product_repo = ProductRepo(db)
        self.user_repo = UserRepo(db)
        self.voucher_repo = VoucherRepo(db)
        self.assembler = OrderAssembler(VoucherValidator(self.voucher_repo))
        self.lock_service = lock_service
        self.notification_service = notification_service or NotificationService()

    def checkout(
        self,
        buyer_id: int,
        selection: CartSelection | None = None,
        shipping_address: str | None = None,
        voucher_code: str | None = None,
        payment_method: str | None = None,
    ) -> Dict[str, Any]:
        selection = selection or CartSelection.whole_cart()

        buyer = self.user_repo.get_user(buyer_id)
        if not buyer:
            raise NotFoundError("User not found")

        cart = self.cart_repo.get_cart_by_user(buyer_id)
        if not cart:
            raise NotFoundError("Cart not found")

        # jeden checkout na koszyk naraz (podwojne klikniecie itp.)
        token = self.lock_service.new_token()
        if not self.lock_service.acquire_checkout_lock(cart.id, token):
            raise ConflictError("Checkout already in progress for this cart")

        try:
            summary = self._checkout_locked(buyer, cart, selection, shipping_address, voucher_code, payment_method)
        finally:
            self._release_lock(cart.id, token)

        self.notification_service.send_order_placed(buyer_id, summary["order_id"], summary["order_number"])
        return summary

    def _release_lock(self, cart_id: int, token: str) -> None:
        # zamowienie moze byc juz zapisane, lock i tak wygasnie po TTL
        try:
            self.lock_service.release_checkout_lock(cart_id, token)
        except RedisError:
            logger.warning(f"Failed to release checkout lock for cart {cart_id}", exc_info=True)

    def _checkout_locked(self, buyer, cart, selection, shipping_address, voucher_code, payment_method):
        buyer_id = buyer.id
        try:
            lines = resolve_lines(cart.items, selection)

            assembled = self.assembler.assemble(
                buyer=buyer,
                lines=lines,
                shipping_address=shipping_address,
                voucher_code=voucher_code,
                payment_method=payment_method,
            )
            order = assembled.order

            for line in lines:
                if self.product_repo.decrement_stock(line.product.id, line.quantity) == 0:
                    raise ConflictError(
                        f"Stock for product {line.product.product_name} changed during checkout",
                        productName=line.product.product_name,
                        requested=line.quantity,
                    )

            if assembled.discount is not None:
                voucher = assembled.discount.voucher
                if self.voucher_repo.increment_usage(voucher.id) == 0:
                    raise ConflictError("This voucher has reached its usage limit")

            self.order_repo.add_order(order)

            if selection.is_partial:
                removed = self.cart_repo.delete_cart_items(cart.id, [l.cart_item_id for l in lines])
            else:
                removed = self.cart_repo.delete_cart_items(cart.id)

            rowcount = self.cart_repo.update_cart_version(
                cart_id=cart.id,
                old_version=cart.version,
                new_data={
                    "version": cart.version + 1,
                    "updated_at": datetime.now(timezone.utc),
                },
            )
            if rowcount == 0:
                raise ConflictError("Cart was modified during checkout")

            summary = {
                "order_id": order.id,
                "order_number": order.order_number,
                "subtotal": assembled.subtotal,
                "shipping_fee": assembled.shipping_fee,
                "discount_amount": assembled.discount_amount,
                "total_amount": order.total_amount,
                "order_status": order.order_status,
                "payment_status": order.payment_status,
                "payment_method": order.payment_method,
                "shipping_address": order.shipping_address,
                "voucher_code": assembled.discount.voucher.discount_code if assembled.discount else None,
                "message": "Order placed successfully",
            }

            self.cart_repo.commit()

        except DomainError as e:
            self.cart_repo.rollback()
            logger.warning(f"Checkout rejected for user {buyer_id}: {e.reason} - {e.message}")
            raise
        except Exception:
            self.cart_repo.rollback()
            raise

        logger.info(
            f"Order {summary['order_number']} placed by user {buyer_id}: "
            f"{len(lines)} lines, total {summary['total_amount']}, "
            f"{removed} cart items {'pruned' if selection.is_partial else 'cleared'}"
        )
        return summary
