import pytest

from models.order import Order
from models.product import Product

from conftest import HOME_ADDRESS, auth_header, make_user


def _review(client, headers, product_id, rating, comment="Lovely piece"):
    return client.post(
        "/api/reviews",
        json={"product_id": product_id, "rating": rating, "title": "Review", "comment": comment},
        headers=headers,
    )


def _product(db, product_id):
    db.expire_all()
    return db.query(Product).filter(Product.id == product_id).one()


def test_create_review_updates_rating(client, db, customer, customer_headers, product):
    response = _review(client, customer_headers, product.id, 4)

    assert response.status_code == 201
    review = response.json()["data"]
    assert review["user_name"] == "Asha Rao"
    assert review["is_verified"] is False
    refreshed = _product(db, product.id)
    assert (refreshed.rating, refreshed.review_count) == (4.0, 1)


def test_duplicate_review_conflicts(client, customer_headers, product):
    assert _review(client, customer_headers, product.id, 5).status_code == 201

    response = _review(client, customer_headers, product.id, 1)

    assert response.status_code == 409


def test_unknown_product(client, customer_headers):
    assert _review(client, customer_headers, 9999, 5).status_code == 404


def test_rating_bounds(client, customer_headers, product):
    assert _review(client, customer_headers, product.id, 0).status_code == 400
    assert _review(client, customer_headers, product.id, 6).status_code == 400


def test_rating_is_mean_of_all_reviews(client, db, product):
    ratings = [5, 4, 2]
    for i, rating in enumerate(ratings):
        user = make_user(db, f"reviewer{i}@example.com")
        assert _review(client, auth_header(user), product.id, rating).status_code == 201

    refreshed = _product(db, product.id)
    assert refreshed.review_count == 3
    assert refreshed.rating == pytest.approx(sum(ratings) / 3)

    listing = client.get(f"/api/products/{product.id}/reviews").json()["data"]
    assert listing["count"] == 3
    assert listing["avg_rating"] == pytest.approx(sum(ratings) / 3)
    # Newest first
    assert [r["rating"] for r in listing["reviews"]] == [2, 4, 5]


def test_verified_purchase(client, db, customer, customer_headers, product):
    client.post("/api/cart", json={"product_id": product.id, "quantity": 1}, headers=customer_headers)
    order_id = client.post(
        "/api/orders", json={"address_id": HOME_ADDRESS["id"], "payment_method": "cod"}, headers=customer_headers
    ).json()["data"]["id"]
    db.query(Order).filter(Order.id == order_id).update({"status": "delivered"})
    db.commit()

    review = _review(client, customer_headers, product.id, 5).json()["data"]

    assert review["is_verified"] is True


def test_update_own_review_recomputes(client, db, customer_headers, product):
    review_id = _review(client, customer_headers, product.id, 2).json()["data"]["id"]

    response = client.put(f"/api/reviews/{review_id}", json={"rating": 5}, headers=customer_headers)

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["rating"] == 5
    assert data["comment"] == "Lovely piece"
    assert _product(db, product.id).rating == 5.0


def test_update_someone_elses_review_is_not_found(client, db, customer_headers, product):
    review_id = _review(client, customer_headers, product.id, 3).json()["data"]["id"]
    other = make_user(db, "other@example.com")

    response = client.put(f"/api/reviews/{review_id}", json={"rating": 1}, headers=auth_header(other))

    assert response.status_code == 404


def test_delete_by_owner_and_admin(client, db, customer_headers, admin_headers, product):
    own_id = _review(client, customer_headers, product.id, 4).json()["data"]["id"]
    other = make_user(db, "other@example.com", addresses=[dict(HOME_ADDRESS)])
    other_id = _review(client, auth_header(other), product.id, 2).json()["data"]["id"]

    # Another customer cannot see it
    foreign = client.delete(f"/api/reviews/{other_id}", headers=customer_headers)
    assert foreign.status_code == 404
    assert foreign.json()["error"] == "Review not found"

    assert client.delete(f"/api/reviews/{own_id}", headers=customer_headers).status_code == 200
    refreshed = _product(db, product.id)
    assert (refreshed.rating, refreshed.review_count) == (2.0, 1)

    assert client.delete(f"/api/reviews/{other_id}", headers=admin_headers).status_code == 200
    refreshed = _product(db, product.id)
    assert (refreshed.rating, refreshed.review_count) == (0.0, 0)
