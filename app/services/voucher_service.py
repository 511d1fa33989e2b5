# app/services/voucher_service.py
from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy.orm import Session

from app.data.models.voucher import VoucherModel
from app.domain.errors import NotFoundError, ValidationFailure
from app.domain.money import ZERO, to_money
from app.domain.types import DiscountType
from app.repos.voucher_repo import VoucherRepo
from app.utils.logging import get_logger

logger = get_logger(__name__)

# kody odrzucenia vouchera
INVALID_CODE = "InvalidCode"
INACTIVE = "Inactive"
NOT_YET_VALID = "NotYetValid"
EXPIRED = "Expired"
LIMIT_REACHED = "LimitReached"
MINIMUM_NOT_MET = "MinimumNotMet"


@dataclass(frozen=True)
class AppliedDiscount:
    voucher: VoucherModel
    amount: Decimal


def _as_utc(value: datetime) -> datetime:
    # sqlite zwraca daty bez strefy
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def raw_discount(voucher: VoucherModel, subtotal: Decimal, shipping_fee: Decimal) -> Decimal:
    discount_type = DiscountType(voucher.discount_type)
    if discount_type is DiscountType.PERCENTAGE:
        return to_money(subtotal * Decimal(voucher.discount_value) / Decimal(100))
    if discount_type is DiscountType.FIXED_AMOUNT:
        return to_money(voucher.discount_value)
    if discount_type is DiscountType.SHIPPING:
        return to_money(shipping_fee)
    raise AssertionError(f"Unhandled discount type: {discount_type}")


def evaluate_voucher(
    voucher: VoucherModel | None,
    subtotal: Decimal,
    shipping_fee: Decimal,
    now: datetime,
) -> AppliedDiscount:
    """
    Sprawdza voucher wzgledem sumy zamowienia. Niczego nie zapisuje.

    Kolejnosc regul: istnieje, aktywny, juz wazny, jeszcze wazny, limit uzyc,
    minimalna kwota. Pierwsza niespelniona regula konczy walidacje.
    Rabat nigdy nie przekracza ``subtotal + shipping_fee``.
    """
    if voucher is None:
        raise ValidationFailure("Invalid voucher code", reason=INVALID_CODE)

    if not voucher.is_active:
        raise ValidationFailure("This voucher is no longer active", reason=INACTIVE)

    now = _as_utc(now)
    if now < _as_utc(voucher.valid_from):
        raise ValidationFailure("This voucher is not yet valid", reason=NOT_YET_VALID)

    if now > _as_utc(voucher.valid_until):
        raise ValidationFailure("This voucher has expired", reason=EXPIRED)

    if voucher.usage_limit is not None and voucher.usage_count >= voucher.usage_limit:
        raise ValidationFailure("This voucher has reached its usage limit", reason=LIMIT_REACHED)

    if voucher.minimum_order_amount is not None and subtotal < voucher.minimum_order_amount:
        raise ValidationFailure(
            "Minimum order amount not met for this voucher",
            reason=MINIMUM_NOT_MET,
            minimumOrderAmount=str(to_money(voucher.minimum_order_amount)),
        )

    amount = raw_discount(voucher, subtotal, shipping_fee)
    amount = min(amount, subtotal + shipping_fee)
    return AppliedDiscount(voucher=voucher, amount=max(amount, ZERO))


class VoucherValidator:
    """Wyszukuje voucher po kodzie i ocenia go, bez efektow ubocznych."""

    def __init__(self, repo: VoucherRepo):
        self.repo = repo

    def validate(
        self,
        code: str,
        subtotal: Decimal,
        shipping_fee: Decimal,
        now: datetime | None = None,
    ) -> AppliedDiscount:
        code = (code or "").strip()
        voucher = self.repo.get_by_code(code) if code else None
        applied = evaluate_voucher(
            voucher,
            subtotal,
            shipping_fee,
            now or datetime.now(timezone.utc),
        )
        logger.info(f"Voucher {code} authorizes discount {applied.amount} on subtotal {subtotal}")
        return applied


class VoucherService:
    def __init__(self, db: Session):
        self.repo = VoucherRepo(db)

    def list_active(self) -> list[VoucherModel]:
        return self.repo.list_active()

    def get_voucher(self, voucher_id: int) -> VoucherModel:
        voucher = self.repo.get_voucher(voucher_id)
        if not voucher:
            raise NotFoundError("Voucher not found")
        return voucher
