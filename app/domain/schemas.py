# app/domain/schemas.py
from pydantic import BaseModel, Field, ConfigDict
from pydantic.alias_generators import to_camel
from typing import List, Optional
from decimal import Decimal
from datetime import datetime

from app.domain.types import DiscountType


class ApiModel(BaseModel):
    """JSON w camelCase, ale przyjmuje tez snake_case."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


# ---------------------------------------------------------------- users
class UserCreate(BaseModel):
    """Schema dla tworzenia użytkownika."""

    id: int = Field(..., gt=0, description="ID użytkownika (musi być > 0)")
    username: str = Field(..., min_length=1, max_length=100)
    shipping_address: Optional[str] = Field(None, max_length=500)


class UserRead(BaseModel):
    id: int
    username: str
    shipping_address: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


# ---------------------------------------------------------------- cart
class ItemIn(ApiModel):
    """Schema dla dodawania produktu do koszyka."""

    product_id: int = Field(..., gt=0, description="ID produktu (musi być > 0)")
    quantity: int = Field(..., gt=0, description="Ilość produktu (musi być > 0)")


class ItemUpdate(ApiModel):
    # walidacja ujemnych w serwisie, zeby zwrocic nasz format bledu
    quantity: int


class CartProductOut(ApiModel):
    product_id: int
    product_name: str
    price: Decimal
    quantity_available: int
    seller_id: int


class CartItemOut(ApiModel):
    id: int
    quantity: int
    price_at_addition: Optional[Decimal] = None
    added_at: Optional[datetime] = None
    product: CartProductOut


class CartOut(ApiModel):
    cart_id: int
    user_id: int
    status: str
    items: List[CartItemOut]
    total: Decimal


class CartAddOut(ApiModel):
    message: str
    cart_item_count: int


# ---------------------------------------------------------------- checkout
class CheckoutIn(ApiModel):
    shipping_address: Optional[str] = None
    payment_method: Optional[str] = None
    voucher_code: Optional[str] = None
    # "1,2,3" - pozycje koszyka do kupienia, puste = caly koszyk
    selected_item_ids: Optional[str] = None


class CheckoutOut(ApiModel):
    order_id: int
    order_number: str
    subtotal: Decimal
    shipping_fee: Decimal
    discount_amount: Decimal
    total_amount: Decimal
    order_status: str
    payment_status: str
    payment_method: Optional[str] = None
    shipping_address: Optional[str] = None
    voucher_code: Optional[str] = None
    message: str


# ---------------------------------------------------------------- orders
class OrderBuyerOut(ApiModel):
    user_id: int
    username: str


class OrderItemOut(ApiModel):
    id: int
    product_id: int
    product_name: str
    seller_id: int
    quantity: int
    unit_price: Decimal
    subtotal: Decimal


class OrderOut(ApiModel):
    order_id: int
    order_number: str
    subtotal: Decimal
    shipping_fee: Decimal
    discount_amount: Decimal
    total_amount: Decimal
    order_status: str
    payment_status: str
    payment_method: Optional[str] = None
    shipping_address: Optional[str] = None
    voucher_code: Optional[str] = None
    delivery_confirmation_image: Optional[str] = None
    order_date: datetime
    updated_at: datetime
    buyer: OrderBuyerOut
    items: List[OrderItemOut]


class OrderStatusIn(ApiModel):
    order_status: str


class DeliverIn(ApiModel):
    delivery_confirmation_image: Optional[str] = None


# ---------------------------------------------------------------- vouchers
class VoucherOut(ApiModel):
    id: int
    discount_code: str
    discount_type: DiscountType
    discount_value: Decimal
    minimum_order_amount: Optional[Decimal] = None
    valid_from: datetime
    valid_until: datetime
    usage_limit: Optional[int] = None
    usage_count: int
    is_active: bool
