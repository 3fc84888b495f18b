import pytest

from models.cart import Cart
from models.order import Order
from models.product import Product

from conftest import HOME_ADDRESS, auth_header, make_user


def _fill_cart(client, headers, product, quantity=1):
    response = client.post("/api/cart", json={"product_id": product.id, "quantity": quantity}, headers=headers)
    assert response.status_code == 200
    return response.json()["data"]


def _place(client, headers, **overrides):
    body = {"address_id": "addr-home", "payment_method": "cod", **overrides}
    return client.post("/api/orders", json=body, headers=headers)


def _stock(db, product_id):
    db.expire_all()
    return db.query(Product).filter(Product.id == product_id).one().stock


def test_place_order_snapshots_cart(client, db, customer, customer_headers, make_product):
    product = make_product(base_price=2000, stock=10)
    _fill_cart(client, customer_headers, product, quantity=2)

    response = _place(client, customer_headers, notes="Gift wrap please", shipping_method="express")

    assert response.status_code == 201
    order = response.json()["data"]
    assert order["order_number"].startswith("EJ-")
    assert order["user_email"] == customer.email
    assert order["user_name"] == "Asha Rao"
    assert order["subtotal"] == 4000
    assert order["tax"] == 720
    assert order["shipping_cost"] == 199
    assert order["total"] == 4919
    assert order["status"] == "confirmed"
    assert order["payment_status"] == "pending"
    assert order["shipping_address"]["city"] == "Mumbai"
    assert order["notes"] == "Gift wrap please"
    [item] = order["items"]
    assert (item["product_id"], item["quantity"], item["price"], item["total_price"]) == (product.id, 2, 2000, 4000)

    # Cart is consumed and stock reserved
    db.expire_all()
    assert db.query(Cart).filter(Cart.user_id == customer.id).first() is None
    assert _stock(db, product.id) == 8


def test_free_shipping_above_threshold(client, customer_headers, make_product):
    product = make_product(base_price=3000, stock=10)
    _fill_cart(client, customer_headers, product, quantity=2)

    order = _place(client, customer_headers, payment_method="card").json()["data"]

    assert order["total"] == 7080
    assert order["shipping_cost"] == 0
    assert order["status"] == "pending"


def test_invalid_address(client, customer_headers, product):
    _fill_cart(client, customer_headers, product)

    response = _place(client, customer_headers, address_id="nowhere")

    assert response.status_code == 400
    assert response.json()["error"] == "Invalid address"


def test_empty_cart(client, customer_headers):
    response = _place(client, customer_headers)

    assert response.status_code == 400
    assert response.json()["error"] == "Cart is empty"


def test_unknown_payment_method(client, customer_headers, product):
    _fill_cart(client, customer_headers, product)

    assert _place(client, customer_headers, payment_method="barter").status_code == 400


def test_list_and_get_own_orders(client, db, customer_headers, make_product):
    product = make_product(stock=10)
    _fill_cart(client, customer_headers, product)
    first = _place(client, customer_headers).json()["data"]
    _fill_cart(client, customer_headers, product)
    second = _place(client, customer_headers).json()["data"]

    listed = client.get("/api/orders", headers=customer_headers).json()["data"]
    assert [o["id"] for o in listed] == [second["id"], first["id"]]

    assert client.get(f"/api/orders/{first['id']}", headers=customer_headers).status_code == 200

    stranger = make_user(db, "stranger@example.com", addresses=[dict(HOME_ADDRESS)])
    assert client.get(f"/api/orders/{first['id']}", headers=auth_header(stranger)).status_code == 404


def test_cancel_restores_stock(client, db, customer_headers, make_product):
    ring = make_product(name="Ring", stock=10)
    chain = make_product(name="Chain", stock=5)
    _fill_cart(client, customer_headers, ring, quantity=3)
    _fill_cart(client, customer_headers, chain, quantity=2)
    order = _place(client, customer_headers).json()["data"]
    assert (_stock(db, ring.id), _stock(db, chain.id)) == (7, 3)

    response = client.post(
        f"/api/orders/{order['id']}/cancel", json={"reason": "Changed my mind"}, headers=customer_headers
    )

    assert response.status_code == 200
    cancelled = response.json()["data"]
    assert cancelled["status"] == "cancelled"
    assert cancelled["cancel_reason"] == "Changed my mind"
    assert (_stock(db, ring.id), _stock(db, chain.id)) == (10, 5)


def test_cancel_without_body(client, customer_headers, product):
    _fill_cart(client, customer_headers, product)
    order = _place(client, customer_headers, payment_method="upi").json()["data"]

    response = client.post(f"/api/orders/{order['id']}/cancel", headers=customer_headers)

    assert response.status_code == 200
    assert response.json()["data"]["cancel_reason"] is None


@pytest.mark.parametrize("status", ["processing", "shipped", "delivered", "cancelled", "refunded"])
def test_cancel_only_from_pending_or_confirmed(client, db, customer_headers, product, status):
    _fill_cart(client, customer_headers, product, quantity=2)
    order_id = _place(client, customer_headers).json()["data"]["id"]
    db.query(Order).filter(Order.id == order_id).update({"status": status})
    db.commit()
    stock_before = _stock(db, product.id)

    response = client.post(f"/api/orders/{order_id}/cancel", json={}, headers=customer_headers)

    assert response.status_code == 400
    assert response.json()["error"] == "Order cannot be cancelled"
    assert _stock(db, product.id) == stock_before
