# app/data/seed.py
from datetime import datetime, timezone, timedelta
from decimal import Decimal

from app.data.database import Base, SessionLocal, engine
from app.data.models.voucher import VoucherModel
from app.domain.types import DiscountType
from app.repos.voucher_repo import VoucherRepo
from app.utils.logging import get_logger

logger = get_logger(__name__)


def sample_vouchers(now: datetime | None = None) -> list[VoucherModel]:
    now = now or datetime.now(timezone.utc)
    since = now - timedelta(days=1)
    return [
        VoucherModel(
            discount_code="SAVE10",
            discount_type=DiscountType.PERCENTAGE,
            discount_value=Decimal("10"),
            minimum_order_amount=Decimal("200"),
            valid_from=since,
            valid_until=now + timedelta(days=90),
            usage_limit=100,
            is_active=True,
        ),
        VoucherModel(
            discount_code="SAVE100",
            discount_type=DiscountType.FIXED_AMOUNT,
            discount_value=Decimal("100"),
            minimum_order_amount=Decimal("500"),
            valid_from=since,
            valid_until=now + timedelta(days=60),
            usage_limit=50,
            is_active=True,
        ),
        VoucherModel(
            discount_code="FREESHIP",
            discount_type=DiscountType.SHIPPING,
            discount_value=Decimal("0"),  # nieuzywane dla SHIPPING
            minimum_order_amount=Decimal("300"),
            valid_from=since,
            valid_until=now + timedelta(days=30),
            usage_limit=30,
            is_active=True,
        ),
    ]


def seed(session_factory=SessionLocal) -> int:
    db = session_factory()
    try:
        repo = VoucherRepo(db)
        # not forcing: only seed if empty
        if repo.count() > 0:
            logger.info("Vouchers already exist, skipping initialization")
            return 0

        vouchers = sample_vouchers()
        for voucher in vouchers:
            repo.add_voucher(voucher)
            logger.info(f"Created voucher: {voucher.discount_code}")
        repo.commit()
        return len(vouchers)
    finally:
        db.close()


if __name__ == "__main__":
    from app.data import models  # noqa: F401

    Base.metadata.create_all(bind=engine)
    seed()
