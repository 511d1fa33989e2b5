from datetime import datetime, timedelta, timezone

from app.data.database import SessionLocal
from app.data.models import VoucherModel
from app.data.seed import seed
from app.domain.types import DiscountType
from app.main import init_db
from app.repos.voucher_repo import VoucherRepo


def test_list_returns_only_active_vouchers(client, make_voucher):
    make_voucher("SAVE10")
    make_voucher("OLD", is_active=False)
    make_voucher("FREESHIP", DiscountType.SHIPPING, "0")

    data = client.get("/api/vouchers").json()

    assert [v["discountCode"] for v in data] == ["SAVE10", "FREESHIP"]
    assert data[1]["discountType"] == "SHIPPING"
    assert data[0]["isActive"] is True


def test_get_voucher_by_id(client, make_voucher):
    voucher = make_voucher("SAVE10", minimum="200", usage_limit=100)

    resp = client.get(f"/api/vouchers/{voucher.id}")

    assert resp.status_code == 200
    assert resp.json()["usageLimit"] == 100
    assert client.get("/api/vouchers/999").status_code == 404


def test_startup_seeds_vouchers(client):
    init_db()

    codes = [v["discountCode"] for v in client.get("/api/vouchers").json()]
    assert codes == ["SAVE10", "SAVE100", "FREESHIP"]


def test_seed_is_idempotent(db):
    assert seed(SessionLocal) == 3
    assert seed(SessionLocal) == 0

    codes = {v.discount_code: v for v in db.query(VoucherModel)}
    assert set(codes) == {"SAVE10", "SAVE100", "FREESHIP"}
    assert codes["FREESHIP"].discount_type is DiscountType.SHIPPING
    assert codes["SAVE100"].usage_limit == 50


def test_increment_usage_stops_at_limit(db, make_voucher):
    voucher = make_voucher("ONCE", usage_limit=1)
    repo = VoucherRepo(db)

    assert repo.increment_usage(voucher.id) == 1
    assert repo.increment_usage(voucher.id) == 0
    db.commit()
    assert repo.get_voucher(voucher.id).usage_count == 1


def test_increment_usage_without_limit(db, make_voucher):
    voucher = make_voucher("FOREVER", usage_limit=None, usage_count=41)
    repo = VoucherRepo(db)

    assert repo.increment_usage(voucher.id) == 1
    assert repo.get_voucher(voucher.id).usage_count == 42


def test_expired_voucher_rejected_at_checkout(client, shop, fill_cart, make_voucher):
    buyer, _, product = shop
    fill_cart(buyer.id, (product, 1))
    now = datetime.now(timezone.utc)
    make_voucher("GONE", valid_from=now - timedelta(days=10), valid_until=now - timedelta(days=1))

    resp = client.post("/api/orders/checkout?user_id=1", json={"voucherCode": "GONE"})

    assert resp.status_code == 400
    assert resp.json() == {"error": "This voucher has expired", "reason": "Expired"}
