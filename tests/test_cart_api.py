from decimal import Decimal

from app.data.models import CartItemModel, CartModel


def test_get_cart_creates_empty_cart(client, db, shop):
    resp = client.get("/api/cart?user_id=1")

    assert resp.status_code == 200
    data = resp.json()
    assert data["userId"] == 1
    assert data["status"] == "active"
    assert data["items"] == []
    assert Decimal(data["total"]) == Decimal("0")
    assert db.query(CartModel).filter_by(user_id=1).count() == 1


def test_get_cart_for_unknown_user(client):
    assert client.get("/api/cart?user_id=42").status_code == 404


def test_add_snapshots_price_and_merges_lines(client, db, shop):
    _, _, product = shop

    resp = client.post("/api/cart/add?user_id=1", json={"productId": product.id, "quantity": 2})
    assert resp.status_code == 200, resp.text
    assert resp.json() == {"message": "Product added to cart successfully", "cartItemCount": 1}

    product.price = Decimal("120.00")
    db.commit()

    resp = client.post("/api/cart/add?user_id=1", json={"productId": product.id, "quantity": 1})
    assert resp.json()["cartItemCount"] == 1

    cart = client.get("/api/cart?user_id=1").json()
    (item,) = cart["items"]
    assert item["quantity"] == 3
    assert Decimal(item["priceAtAddition"]) == Decimal("120.00")
    assert item["product"]["productName"] == "Keyboard"
    assert Decimal(cart["total"]) == Decimal("360.00")


def test_add_bumps_cart_version(client, db, shop):
    _, _, product = shop
    client.get("/api/cart?user_id=1")
    client.post("/api/cart/add?user_id=1", json={"productId": product.id, "quantity": 1})

    db.expire_all()
    assert db.query(CartModel).filter_by(user_id=1).one().version == 2


def test_add_rejects_bad_input(client, shop, make_product):
    _, seller, _ = shop
    sold = make_product(seller.id, "Old", "5.00", 0, status="sold")

    assert client.post("/api/cart/add?user_id=1", json={"productId": 999, "quantity": 1}).status_code == 404
    assert client.post("/api/cart/add?user_id=1", json={"productId": sold.id, "quantity": 1}).status_code == 400
    # pydantic: quantity > 0
    assert client.post("/api/cart/add?user_id=1", json={"productId": sold.id, "quantity": 0}).status_code == 422


def test_update_item_quantity(client, shop, fill_cart):
    buyer, _, product = shop
    (item,) = fill_cart(buyer.id, (product, 1))

    resp = client.put(f"/api/cart/items/{item.id}?user_id=1", json={"quantity": 4})

    assert resp.status_code == 200, resp.text
    assert resp.json()["items"][0]["quantity"] == 4


def test_update_item_above_stock(client, shop, fill_cart):
    buyer, _, product = shop
    (item,) = fill_cart(buyer.id, (product, 1))

    resp = client.put(f"/api/cart/items/{item.id}?user_id=1", json={"quantity": 11})

    assert resp.status_code == 400
    assert resp.json()["error"] == "Only 10 items available in stock"


def test_update_to_zero_removes_item(client, db, shop, fill_cart):
    buyer, _, product = shop
    (item,) = fill_cart(buyer.id, (product, 1))

    resp = client.put(f"/api/cart/items/{item.id}?user_id=1", json={"quantity": 0})

    assert resp.status_code == 200
    assert resp.json()["items"] == []


def test_negative_quantity_rejected(client, shop, fill_cart):
    buyer, _, product = shop
    (item,) = fill_cart(buyer.id, (product, 1))

    resp = client.put(f"/api/cart/items/{item.id}?user_id=1", json={"quantity": -1})
    assert resp.status_code == 400
    assert resp.json()["reason"] == "InvalidQuantity"


def test_remove_item(client, db, shop, fill_cart):
    buyer, _, product = shop
    (item,) = fill_cart(buyer.id, (product, 1))

    resp = client.delete(f"/api/cart/items/{item.id}?user_id=1")

    assert resp.status_code == 200
    db.expire_all()
    assert db.query(CartItemModel).count() == 0


def test_cannot_touch_someone_elses_cart(client, shop, fill_cart):
    buyer, seller, product = shop
    (item,) = fill_cart(buyer.id, (product, 1))

    assert client.delete(f"/api/cart/items/{item.id}?user_id={seller.id}").status_code == 403
    assert client.put(f"/api/cart/items/{item.id}?user_id={seller.id}", json={"quantity": 2}).status_code == 403
    assert client.delete("/api/cart/items/999?user_id=1").status_code == 404
