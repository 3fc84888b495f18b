def _product_ids(response):
    return [p["id"] for p in response.json()["data"]["products"]]


def test_empty_wishlist(client, customer_headers):
    response = client.get("/api/wishlist", headers=customer_headers)

    assert response.status_code == 200
    assert response.json()["data"] == {"products": []}


def test_add_is_idempotent(client, customer_headers, product):
    client.post("/api/wishlist", json={"product_id": product.id}, headers=customer_headers)
    response = client.post("/api/wishlist", json={"product_id": product.id}, headers=customer_headers)

    assert response.status_code == 200
    assert _product_ids(response) == [product.id]
    card = response.json()["data"]["products"][0]
    assert set(card) == {
        "id", "name", "slug", "thumbnail", "base_price", "discount_price", "metal_type", "is_active", "stock",
    }


def test_add_inactive_product_not_found(client, customer_headers, make_product):
    retired = make_product(name="Retired", is_active=False)

    response = client.post("/api/wishlist", json={"product_id": retired.id}, headers=customer_headers)

    assert response.status_code == 404


def test_remove_and_clear(client, customer_headers, make_product):
    ring = make_product(name="Ring")
    chain = make_product(name="Chain")
    for p in (ring, chain):
        client.post("/api/wishlist", json={"product_id": p.id}, headers=customer_headers)

    after_remove = client.delete(f"/api/wishlist/{ring.id}", headers=customer_headers)
    assert _product_ids(after_remove) == [chain.id]

    assert client.delete("/api/wishlist", headers=customer_headers).status_code == 200
    assert _product_ids(client.get("/api/wishlist", headers=customer_headers)) == []


def test_wishlists_are_per_user(client, db, customer_headers, product):
    from conftest import auth_header, make_user

    other = make_user(db, "other@example.com")
    client.post("/api/wishlist", json={"product_id": product.id}, headers=customer_headers)

    assert _product_ids(client.get("/api/wishlist", headers=auth_header(other))) == []
