# app/services/order_assembler.py
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal
from typing import Sequence

from app.data.models.order import OrderModel
from app.data.models.order_item import OrderItemModel
from app.data.models.user import UserModel
from app.domain.money import ZERO, to_money
from app.domain.types import OrderStatus, PaymentStatus
from app.services.cart_resolver import ResolvedLine
from app.services.voucher_service import AppliedDiscount, VoucherValidator
from app.utils.settings import DEFAULT_PAYMENT_METHOD, ORDER_NUMBER_PREFIX, SHIPPING_FEE_RATE


@dataclass
class AssembledOrder:
    order: OrderModel
    subtotal: Decimal
    shipping_fee: Decimal
    discount: AppliedDiscount | None

    @property
    def discount_amount(self) -> Decimal:
        return self.discount.amount if self.discount else ZERO


def generate_order_number() -> str:
    # unikalnosc pilnuje constraint w bazie
    return ORDER_NUMBER_PREFIX + uuid.uuid4().hex[:8].upper()


def compute_subtotal(lines: Sequence[ResolvedLine]) -> Decimal:
    return sum((line.subtotal for line in lines), ZERO)


def compute_shipping_fee(subtotal: Decimal) -> Decimal:
    return to_money(subtotal * SHIPPING_FEE_RATE)


class OrderAssembler:
    """
    Buduje (niezapisane) zamowienie z rozwiazanych linii koszyka.

    total = subtotal + shipping_fee - discount. Walidacja vouchera dzieje sie
    tutaj, zanim ktokolwiek dotknie stanow magazynowych.
    """

    def __init__(self, voucher_validator: VoucherValidator):
        self.voucher_validator = voucher_validator

    def assemble(
        self,
        buyer: UserModel,
        lines: Sequence[ResolvedLine],
        shipping_address: str | None = None,
        voucher_code: str | None = None,
        payment_method: str | None = None,
        now: datetime | None = None,
    ) -> AssembledOrder:
        now = now or datetime.now(timezone.utc)

        subtotal = compute_subtotal(lines)
        shipping_fee = compute_shipping_fee(subtotal)

        discount = None
        if voucher_code and voucher_code.strip():
            discount = self.voucher_validator.validate(voucher_code, subtotal, shipping_fee, now)
        discount_amount = discount.amount if discount else ZERO

        if not shipping_address or not shipping_address.strip():
            shipping_address = buyer.shipping_address

        order = OrderModel(
            buyer_id=buyer.id,
            voucher_id=discount.voucher.id if discount else None,
            order_number=generate_order_number(),
            subtotal=to_money(subtotal),
            shipping_fee=shipping_fee,
            discount_amount=discount_amount,
            total_amount=to_money(subtotal + shipping_fee - discount_amount),
            order_status=OrderStatus.PENDING.value,
            payment_status=PaymentStatus.PENDING.value,
            payment_method=(payment_method or "").strip() or DEFAULT_PAYMENT_METHOD,
            shipping_address=shipping_address,
            order_date=now,
            updated_at=now,
        )
        order.items = [
            OrderItemModel(
                product_id=line.product.id,
                quantity=line.quantity,
                unit_price=to_money(line.unit_price),
                subtotal=to_money(line.subtotal),
            )
            for line in lines
        ]

        return AssembledOrder(
            order=order,
            subtotal=to_money(subtotal),
            shipping_fee=shipping_fee,
            discount=discount,
        )
