from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from app.data.models import ProductModel, UserModel, VoucherModel
from app.domain.errors import ValidationFailure
from app.domain.types import DiscountType
from app.services.cart_resolver import ResolvedLine
from app.services.order_assembler import (
    OrderAssembler,
    compute_shipping_fee,
    generate_order_number,
)
from app.services.voucher_service import VoucherValidator

NOW = datetime(2025, 6, 1, 12, 0, tzinfo=timezone.utc)


class FakeVoucherRepo:
    def __init__(self, *vouchers):
        self.by_code = {v.discount_code: v for v in vouchers}

    def get_by_code(self, code):
        return self.by_code.get(code)


def voucher(code, discount_type, value, minimum=None):
    return VoucherModel(
        id=7,
        discount_code=code,
        discount_type=discount_type,
        discount_value=Decimal(value),
        minimum_order_amount=Decimal(minimum) if minimum else None,
        valid_from=NOW - timedelta(days=1),
        valid_until=NOW + timedelta(days=1),
        usage_limit=None,
        usage_count=0,
        is_active=True,
    )


@pytest.fixture
def assembler():
    repo = FakeVoucherRepo(
        voucher("SAVE10", DiscountType.PERCENTAGE, "10", minimum="200"),
        voucher("FREESHIP", DiscountType.SHIPPING, "0"),
        voucher("HUGE", DiscountType.FIXED_AMOUNT, "10000"),
    )
    return OrderAssembler(VoucherValidator(repo))


@pytest.fixture
def buyer():
    return UserModel(id=1, username="buyer", shipping_address="1 Buyer Lane")


def lines_of(*specs):
    out = []
    for n, (price, qty) in enumerate(specs, start=1):
        product = ProductModel(
            id=n, seller_id=2, product_name=f"P{n}", price=Decimal(price), quantity_available=100
        )
        out.append(ResolvedLine(cart_item_id=n, product=product, quantity=qty, unit_price=Decimal(price)))
    return out


def test_plain_order_totals(assembler, buyer):
    result = assembler.assemble(buyer, lines_of(("100.00", 2)), now=NOW)
    order = result.order

    assert result.subtotal == Decimal("200.00")
    assert result.shipping_fee == Decimal("10.00")
    assert result.discount_amount == Decimal("0.00")
    assert order.total_amount == Decimal("210.00")
    assert order.order_status == "Pending"
    assert order.payment_status == "Pending"
    assert order.voucher_id is None
    assert order.order_date == NOW


def test_one_item_per_line_with_frozen_subtotal(assembler, buyer):
    order = assembler.assemble(buyer, lines_of(("19.99", 3), ("5.00", 1)), now=NOW).order

    assert [(i.product_id, i.quantity, i.unit_price, i.subtotal) for i in order.items] == [
        (1, 3, Decimal("19.99"), Decimal("59.97")),
        (2, 1, Decimal("5.00"), Decimal("5.00")),
    ]
    assert order.subtotal == Decimal("64.97")


def test_percentage_voucher(assembler, buyer):
    result = assembler.assemble(buyer, lines_of(("100.00", 2)), voucher_code="SAVE10", now=NOW)
    assert result.discount_amount == Decimal("20.00")
    assert result.order.total_amount == Decimal("190.00")
    assert result.order.discount_amount == Decimal("20.00")
    assert result.order.voucher_id == 7


def test_shipping_voucher_cancels_the_fee(assembler, buyer):
    result = assembler.assemble(buyer, lines_of(("100.00", 2)), voucher_code="FREESHIP", now=NOW)
    assert result.discount_amount == Decimal("10.00")
    assert result.order.total_amount == Decimal("200.00")


def test_total_never_negative(assembler, buyer):
    result = assembler.assemble(buyer, lines_of(("3.00", 1)), voucher_code="HUGE", now=NOW)
    assert result.order.total_amount == Decimal("0.00")


def test_rejected_voucher_aborts_assembly(assembler, buyer):
    with pytest.raises(ValidationFailure) as excinfo:
        assembler.assemble(buyer, lines_of(("10.00", 1)), voucher_code="SAVE10", now=NOW)
    assert excinfo.value.reason == "MinimumNotMet"


def test_blank_voucher_code_is_ignored(assembler, buyer):
    result = assembler.assemble(buyer, lines_of(("10.00", 1)), voucher_code="   ", now=NOW)
    assert result.discount is None


def test_shipping_address_falls_back_to_buyer_default(assembler, buyer):
    lines = lines_of(("10.00", 1))
    assert assembler.assemble(buyer, lines, shipping_address="  ", now=NOW).order.shipping_address == "1 Buyer Lane"
    assert assembler.assemble(buyer, lines, shipping_address="9 Other Rd", now=NOW).order.shipping_address == "9 Other Rd"


def test_payment_method_defaults(assembler, buyer):
    lines = lines_of(("10.00", 1))
    assert assembler.assemble(buyer, lines, now=NOW).order.payment_method == "Cash on Delivery"
    assert assembler.assemble(buyer, lines, payment_method="GCash", now=NOW).order.payment_method == "GCash"


def test_shipping_fee_is_five_percent_rounded():
    assert compute_shipping_fee(Decimal("200.00")) == Decimal("10.00")
    assert compute_shipping_fee(Decimal("0.30")) == Decimal("0.02")  # 0.015 -> 0.02


def test_order_numbers_are_prefixed_and_distinct():
    numbers = {generate_order_number() for _ in range(50)}
    assert len(numbers) == 50
    assert all(n.startswith("ORD-") and len(n) == 12 for n in numbers)
