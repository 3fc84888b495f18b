def _names(response):
    return [p["name"] for p in response.json()["data"]]


def test_list_products_defaults_and_pagination(client, make_product):
    for i in range(14):
        make_product(name=f"Ring {i:02d}", base_price=1000 + i)
    make_product(name="Hidden Ring", is_active=False)

    response = client.get("/api/products")

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["page"] == 1
    assert body["limit"] == 12
    assert body["total"] == 14
    assert body["total_pages"] == 2
    assert len(body["data"]) == 12
    # Newest first by default
    assert body["data"][0]["name"] == "Ring 13"

    second = client.get("/api/products", params={"page": 2}).json()
    assert len(second["data"]) == 2
    assert "Hidden Ring" not in _names(client.get("/api/products", params={"limit": 50}))


def test_list_products_filters(client, make_product):
    make_product(name="Gold Band", base_price=20000, metal_type="gold", purity="22K", tags=["wedding"])
    make_product(name="Silver Chain", base_price=3000, metal_type="silver", purity="925 Sterling")
    make_product(name="Platinum Studs", base_price=60000, metal_type="platinum", purity="950", is_featured=True)

    assert _names(client.get("/api/products", params={"metal_type": "silver"})) == ["Silver Chain"]
    assert _names(client.get("/api/products", params={"purity": "22K"})) == ["Gold Band"]
    assert _names(client.get("/api/products", params={"is_featured": "true"})) == ["Platinum Studs"]
    assert _names(client.get("/api/products", params={"search": "WEDDING"})) == ["Gold Band"]

    in_range = client.get("/api/products", params={"min_price": 2500, "max_price": 25000, "sort_by": "price",
                                                   "sort_order": "asc"})
    assert _names(in_range) == ["Silver Chain", "Gold Band"]

    # Non-positive bounds are ignored
    unbounded = client.get("/api/products", params={"min_price": 0, "max_price": -1})
    assert unbounded.json()["total"] == 3


def test_list_products_sorting(client, make_product):
    make_product(name="Beta", base_price=300, rating=4.1)
    make_product(name="Alpha", base_price=200, rating=4.9)
    make_product(name="Gamma", base_price=100, rating=3.5)

    assert _names(client.get("/api/products", params={"sort_by": "name", "sort_order": "asc"})) == [
        "Alpha", "Beta", "Gamma"]
    assert _names(client.get("/api/products", params={"sort_by": "price", "sort_order": "desc"})) == [
        "Beta", "Alpha", "Gamma"]
    assert _names(client.get("/api/products", params={"sort_by": "rating"})) == ["Alpha", "Beta", "Gamma"]


def test_list_products_unknown_sort_falls_back_to_newest(client, make_product):
    make_product(name="Older", base_price=300)
    make_product(name="Newer", base_price=100)

    response = client.get("/api/products", params={"sort_by": "popularity", "sort_order": "sideways"})

    assert response.status_code == 200
    assert _names(response) == ["Newer", "Older"]
    # Only "asc" flips the direction
    assert _names(client.get("/api/products", params={"sort_by": "popularity", "sort_order": "asc"})) == [
        "Older", "Newer"]


def test_highlight_lists(client, make_product):
    make_product(name="Featured", is_featured=True)
    make_product(name="Fresh", is_new_arrival=True)
    make_product(name="Popular", is_best_seller=True, review_count=50)
    make_product(name="Less Popular", is_best_seller=True, review_count=5)
    make_product(name="Retired", is_featured=True, is_active=False)

    assert _names(client.get("/api/products/featured")) == ["Featured"]
    assert _names(client.get("/api/products/new-arrivals")) == ["Fresh"]
    assert _names(client.get("/api/products/best-sellers")) == ["Popular", "Less Popular"]


def test_search(client, make_product):
    make_product(name="Pearl Necklace", description="Freshwater pearls")
    make_product(name="Gold Ring", tags=["engagement"])

    assert _names(client.get("/api/products/search", params={"q": "pearl"})) == ["Pearl Necklace"]
    assert _names(client.get("/api/products/search", params={"q": "engage"})) == ["Gold Ring"]
    # Category name matches too
    assert len(client.get("/api/products/search", params={"q": "rings"}).json()["data"]) == 2


def test_search_requires_query(client):
    response = client.get("/api/products/search", params={"q": "  "})

    assert response.status_code == 400
    assert response.json()["error"] == "Search query is required"


def test_get_product_by_id_or_slug(client, product):
    by_id = client.get(f"/api/products/{product.id}")
    by_slug = client.get(f"/api/products/{product.slug}")

    assert by_id.status_code == 200
    assert by_slug.status_code == 200
    assert by_id.json()["data"]["id"] == by_slug.json()["data"]["id"] == product.id
    assert client.get("/api/products/no-such-thing").status_code == 404
    assert client.get("/api/products/9999").status_code == 404


def test_categories(client, db, category):
    from models.category import Category

    db.add(Category(name="Anklets", slug="anklets", is_active=True, sort_order=0))
    db.add(Category(name="Archived", slug="archived", is_active=False, sort_order=2))
    db.commit()

    listed = client.get("/api/categories").json()["data"]
    assert [c["name"] for c in listed] == ["Anklets", "Rings"]

    assert client.get(f"/api/categories/{category.id}").json()["data"]["slug"] == "rings"
    assert client.get("/api/categories/rings").json()["data"]["id"] == category.id
    assert client.get("/api/categories/missing").status_code == 404
