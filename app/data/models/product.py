from datetime import datetime, timezone

from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, Integer, Numeric, String
from sqlalchemy.orm import relationship

from app.data.database import Base
from app.domain.types import ProductStatus


def _now():
    return datetime.now(timezone.utc)


class ProductModel(Base):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True)
    seller_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    product_name = Column(String(200), nullable=False)
    price = Column(Numeric(12, 2), nullable=False)
    quantity_available = Column(Integer, nullable=False, default=0)
    status = Column(String(20), nullable=False, default=ProductStatus.ACTIVE.value)
    category = Column(String(50), nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=_now)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_now, onupdate=_now)

    seller = relationship("UserModel")

    __table_args__ = (
        CheckConstraint("quantity_available >= 0", name="ck_product_stock_non_negative"),
    )
