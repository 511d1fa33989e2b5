# app/services/order_service.py
from datetime import datetime, timezone
from typing import Any, Dict, List

from sqlalchemy.orm import Session

from app.data.models.order import OrderModel
from app.domain.errors import (
    INVALID_STATUS_TRANSITION,
    ForbiddenError,
    NotFoundError,
    ValidationFailure,
)
from app.domain.types import OrderStatus
from app.repos.order_repo import OrderRepo
from app.services.notification_service import NotificationService
from app.utils.logging import get_logger

logger = get_logger(__name__)


def is_seller_of(order: OrderModel, user_id: int) -> bool:
    return any(item.product.seller_id == user_id for item in order.items)


def order_to_dict(order: OrderModel) -> Dict[str, Any]:
    """Projekcja zamowienia (z pozycjami) do slownika pod OrderOut."""
    return {
        "order_id": order.id,
        "order_number": order.order_number,
        "subtotal": order.subtotal,
        "shipping_fee": order.shipping_fee,
        "discount_amount": order.discount_amount,
        "total_amount": order.total_amount,
        "order_status": order.order_status,
        "payment_status": order.payment_status,
        "payment_method": order.payment_method,
        "shipping_address": order.shipping_address,
        "voucher_code": order.voucher.discount_code if order.voucher else None,
        "delivery_confirmation_image": order.delivery_confirmation_image,
        "order_date": order.order_date,
        "updated_at": order.updated_at,
        "buyer": {
            "user_id": order.buyer.id,
            "username": order.buyer.username,
        },
        "items": [
            {
                "id": item.id,
                "product_id": item.product_id,
                "product_name": item.product.product_name,
                "seller_id": item.product.seller_id,
                "quantity": item.quantity,
                "unit_price": item.unit_price,
                "subtotal": item.subtotal,
            }
            for item in order.items
        ],
    }


class OrderService:
    """
    Odczyt zamowien (kupujacy / sprzedajacy) i przejscia statusu.

    Pending -> Cancelled  (kupujacy)
    Pending -> Delivered  (sprzedajacy)
    """

    def __init__(self, db: Session, notification_service: NotificationService | None = None):
        self.db = db
        self.repo = OrderRepo(db)
        self.notification_service = notification_service or NotificationService()

    def _get(self, order_id: int) -> OrderModel:
        order = self.repo.get_order(order_id)
        if not order:
            raise NotFoundError("Order not found")
        return order

    def _get_for_buyer(self, order_id: int, user_id: int) -> OrderModel:
        order = self._get(order_id)
        if order.buyer_id != user_id:
            raise ForbiddenError("Unauthorized access to this order")
        return order

    def _get_for_seller(self, order_id: int, user_id: int) -> OrderModel:
        order = self._get(order_id)
        if not is_seller_of(order, user_id):
            raise ForbiddenError("You are not a seller of any item in this order")
        return order

    # query
    def list_buyer_orders(self, user_id: int) -> List[Dict[str, Any]]:
        return [order_to_dict(o) for o in self.repo.list_by_buyer(user_id)]

    def get_buyer_order(self, order_id: int, user_id: int) -> Dict[str, Any]:
        return order_to_dict(self._get_for_buyer(order_id, user_id))

    def list_seller_orders(self, user_id: int) -> List[Dict[str, Any]]:
        return [order_to_dict(o) for o in self.repo.list_by_seller(user_id)]

    def get_seller_order(self, order_id: int, user_id: int) -> Dict[str, Any]:
        return order_to_dict(self._get_for_seller(order_id, user_id))

    # commands
    def update_status(self, order_id: int, user_id: int, new_status: str) -> Dict[str, Any]:
        """Kupujacy moze tylko anulowac zamowienie, ktore jest jeszcze Pending."""
        order = self._get_for_buyer(order_id, user_id)

        if new_status != OrderStatus.CANCELLED.value:
            raise ValidationFailure(
                f"Order status cannot be changed to {new_status}",
                reason=INVALID_STATUS_TRANSITION,
            )

        if order.order_status != OrderStatus.PENDING.value:
            raise ValidationFailure(
                f"Only pending orders can be cancelled (current status: {order.order_status})",
                reason=INVALID_STATUS_TRANSITION,
            )

        order.order_status = OrderStatus.CANCELLED.value
        order.updated_at = datetime.now(timezone.utc)
        self.repo.commit()

        logger.info(f"Order {order.order_number} cancelled by buyer {user_id}")
        self.notification_service.send_order_status_changed(user_id, order.id, order.order_status)

        return order_to_dict(order)

    def mark_delivered(self, order_id: int, user_id: int, image: str | None = None) -> Dict[str, Any]:
        order = self._get_for_seller(order_id, user_id)

        if order.order_status == OrderStatus.CANCELLED.value:
            raise ValidationFailure(
                "Cancelled orders cannot be marked as delivered",
                reason=INVALID_STATUS_TRANSITION,
            )

        order.order_status = OrderStatus.DELIVERED.value
        if image:
            order.delivery_confirmation_image = image
        order.updated_at = datetime.now(timezone.utc)
        self.repo.commit()

        logger.info(f"Order {order.order_number} marked delivered by seller {user_id}")
        self.notification_service.send_order_status_changed(order.buyer_id, order.id, order.order_status)

        return order_to_dict(order)
