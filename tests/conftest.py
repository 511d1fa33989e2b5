import os

# przed importem aplikacji: baza in-memory i celery bez brokera
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["CELERY_TASK_ALWAYS_EAGER"] = "1"

from datetime import datetime, timedelta, timezone
from decimal import Decimal

import fakeredis
import pytest
from fastapi.testclient import TestClient

from app.api.deps import get_lock_service
from app.data.database import Base, SessionLocal, engine
from app.data.models import (
    CartItemModel,
    CartModel,
    ProductModel,
    UserModel,
    VoucherModel,
)
from app.domain.types import DiscountType
from app.main import app
from app.services.lock_service import LockService


@pytest.fixture(autouse=True)
def tables():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def lock_service():
    return LockService(client=fakeredis.FakeRedis(decode_responses=True))


@pytest.fixture
def client(lock_service):
    app.dependency_overrides[get_lock_service] = lambda: lock_service
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(db):
    def _make(user_id, username=None, shipping_address="12 Default St"):
        user = UserModel(
            id=user_id,
            username=username or f"user{user_id}",
            shipping_address=shipping_address,
        )
        db.add(user)
        db.commit()
        return user

    return _make


@pytest.fixture
def make_product(db):
    def _make(seller_id, name="Keyboard", price="100.00", quantity=10, status="active"):
        product = ProductModel(
            seller_id=seller_id,
            product_name=name,
            price=Decimal(price),
            quantity_available=quantity,
            status=status,
        )
        db.add(product)
        db.commit()
        return product

    return _make


@pytest.fixture
def make_voucher(db):
    def _make(
        code,
        discount_type=DiscountType.PERCENTAGE,
        value="10",
        minimum=None,
        usage_limit=None,
        usage_count=0,
        is_active=True,
        valid_from=None,
        valid_until=None,
    ):
        now = datetime.now(timezone.utc)
        voucher = VoucherModel(
            discount_code=code,
            discount_type=discount_type,
            discount_value=Decimal(value),
            minimum_order_amount=Decimal(minimum) if minimum is not None else None,
            valid_from=valid_from or now - timedelta(days=1),
            valid_until=valid_until or now + timedelta(days=30),
            usage_limit=usage_limit,
            usage_count=usage_count,
            is_active=is_active,
        )
        db.add(voucher)
        db.commit()
        return voucher

    return _make


@pytest.fixture
def fill_cart(db):
    """Wklada pozycje prosto do bazy: fill_cart(user_id, (product, qty[, price]), ...)."""

    def _fill(user_id, *lines):
        cart = db.query(CartModel).filter_by(user_id=user_id).one_or_none()
        if cart is None:
            cart = CartModel(user_id=user_id, status="active", version=1)
            db.add(cart)
            db.flush()
        items = []
        for line in lines:
            product, qty = line[0], line[1]
            price = line[2] if len(line) > 2 else product.price
            item = CartItemModel(
                cart_id=cart.id,
                product_id=product.id,
                quantity=qty,
                price_at_addition=Decimal(price) if price is not None else None,
            )
            db.add(item)
            items.append(item)
        db.commit()
        return items

    return _fill


@pytest.fixture
def shop(make_user, make_product):
    """Kupujacy 1, sprzedawca 2, produkt po 100.00 (10 sztuk)."""
    buyer = make_user(1, "buyer", shipping_address="1 Buyer Lane")
    seller = make_user(2, "seller")
    product = make_product(seller.id, "Keyboard", "100.00", 10)
    return buyer, seller, product
