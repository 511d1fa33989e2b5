from datetime import datetime, timezone

from sqlalchemy import Boolean, Column, DateTime, Enum, Integer, Numeric, String

from app.data.database import Base
from app.domain.types import DiscountType


class VoucherModel(Base):
    __tablename__ = "vouchers"

    id = Column(Integer, primary_key=True)
    discount_code = Column(String(64), nullable=False, unique=True, index=True)

    discount_type = Column(Enum(DiscountType, native_enum=False, length=20), nullable=False)
    # procent albo kwota, nieuzywane dla SHIPPING
    discount_value = Column(Numeric(12, 2), nullable=False, default=0)
    minimum_order_amount = Column(Numeric(12, 2), nullable=True)

    valid_from = Column(DateTime(timezone=True), nullable=False)
    valid_until = Column(DateTime(timezone=True), nullable=False)

    usage_limit = Column(Integer, nullable=True)
    usage_count = Column(Integer, nullable=False, default=0)
    is_active = Column(Boolean, nullable=False, default=True)

    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
