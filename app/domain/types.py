# app/domain/types.py
from enum import Enum


class DiscountType(str, Enum):
    PERCENTAGE = "PERCENTAGE"
    FIXED_AMOUNT = "FIXED_AMOUNT"
    SHIPPING = "SHIPPING"


class OrderStatus(str, Enum):
    PENDING = "Pending"
    CANCELLED = "Cancelled"
    DELIVERED = "Delivered"


class PaymentStatus(str, Enum):
    PENDING = "Pending"


class ProductStatus(str, Enum):
    ACTIVE = "active"
    SOLD = "sold"


CART_ACTIVE = "active"
