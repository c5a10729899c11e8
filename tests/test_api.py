"""Route tests: FastAPI TestClient with in-memory repositories injected."""
from datetime import datetime, timedelta, timezone

from fakes import make_category, make_product, new_id


def _recent():
    return datetime.now(timezone.utc) - timedelta(hours=1)


def _product_body(**overrides):
    body = {
        "name": "Linen Shirt",
        "slug": "Linen-Shirt",
        "price": 49.5,
        "category": "shirts",
        "sizes": ["S", "M"],
        "colors": ["white"],
        "fit": "slim",
        "material": "linen",
        "image_url": "https://img.example.com/linen.jpg",
    }
    body.update(overrides)
    return body


def test_health_reports_unconnected_mongo(client):
    response = client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "error"
    assert data["checks"]["redis"] == "skipped"


# ----- products -------------------------------------------------------------

def test_create_product_resolves_category_slug(client, categories, products):
    shirts = make_category(slug="shirts")
    categories.items[shirts.id] = shirts

    response = client.post("/api/products", json=_product_body())

    assert response.status_code == 201
    data = response.json()["data"]
    assert data["slug"] == "linen-shirt"
    assert data["category"] == shirts.id
    assert data["views"] == 0
    assert len(products.items) == 1


def test_create_product_unknown_category_lists_available(client, categories):
    shirts = make_category(slug="shirts", name="Shirts")
    categories.items[shirts.id] = shirts

    response = client.post("/api/products", json=_product_body(category="hats"))

    assert response.status_code == 404
    body = response.json()
    assert body["error_code"] == "CATEGORY_NOT_FOUND"
    assert body["details"]["available_categories"] == [{"slug": "shirts", "name": "Shirts"}]


def test_create_product_duplicate_slug_conflicts(client, categories, products):
    shirts = make_category(slug="shirts")
    categories.items[shirts.id] = shirts
    products.add(make_product(slug="linen-shirt"))

    response = client.post("/api/products", json=_product_body())

    assert response.status_code == 409
    assert response.json()["error_code"] == "SLUG_TAKEN"


def test_create_product_rejects_negative_price(client):
    assert client.post("/api/products", json=_product_body(price=-1)).status_code == 422


def test_get_update_delete_product(client, products):
    p = make_product(slug="tee")
    products.add(p)

    assert client.get(f"/api/products/find/{p.id}").json()["data"]["id"] == p.id
    assert client.get("/api/products/slug/tee").json()["data"]["id"] == p.id

    response = client.put(f"/api/products/{p.id}", json={"price": 12.0})
    assert response.status_code == 200
    assert response.json()["data"]["price"] == 12.0

    assert client.delete(f"/api/products/{p.id}").status_code == 200
    assert client.get(f"/api/products/find/{p.id}").status_code == 404


def test_bad_product_id_is_400(client):
    response = client.get("/api/products/find/nope")
    assert response.status_code == 400
    assert response.json()["error_code"] == "INVALID_PRODUCT_ID"


def test_list_products_filters_by_category(client, products):
    products.add(make_product(category="c1"), make_product(category="c2"))

    data = client.get("/api/products", params={"category": "c1"}).json()["data"]

    assert [p["category"] for p in data] == ["c1"]


def test_engagement_counters(client, products):
    p = make_product()
    products.add(p)

    viewed = client.post(f"/api/products/{p.id}/view").json()
    assert viewed["views"] == 1
    assert viewed["last_viewed"] is not None

    assert client.patch(f"/api/products/{p.id}/cart-addition", json={"increment": 2}).json()["cart_additions"] == 2

    response = client.post("/api/products/update-purchases", json={"product_ids": [p.id, new_id()]})
    assert response.json() == {"success": True, "matched": 1, "modified": 1}


def test_update_purchases_rejects_bad_ids(client):
    response = client.post("/api/products/update-purchases", json={"product_ids": ["x"]})
    assert response.status_code == 400


def test_trending_orders_by_weighted_engagement(client, products):
    products.add(
        make_product(name="viewed", views=12),
        make_product(name="bought", purchases=2, cart_additions=1),   # 13
        make_product(name="fresh", views=1, last_viewed=_recent()),    # 11
    )

    names = [p["name"] for p in client.get("/api/products/trending").json()]

    assert names == ["bought", "viewed", "fresh"]


# ----- search ---------------------------------------------------------------

def test_search_requires_two_characters(client):
    response = client.get("/api/products/search", params={"q": " a "})
    assert response.status_code == 400


def test_search_matches_products_and_categories(client, products, categories):
    products.add(make_product(name="Denim Jacket"), make_product(name="Wool Scarf"))
    cat = make_category(name="Denim")
    categories.items[cat.id] = cat

    data = client.get("/api/products/search", params={"q": "denim"}).json()["data"]

    assert [p["name"] for p in data["products"]] == ["Denim Jacket"]
    assert data["meta"] == {"product_count": 1, "category_count": 1}


def test_suggestions_short_query_is_empty_not_error(client):
    response = client.get("/api/products/suggestions", params={"q": "d"})
    assert response.status_code == 200
    assert response.json()["data"] == {"products": [], "categories": []}


# ----- ratings --------------------------------------------------------------

def test_update_ratings_endpoint(client, products):
    p = make_product()
    products.add(p)

    client.post("/api/products/update-ratings", json={"product_id": p.id, "rating": 4})
    response = client.post("/api/products/update-ratings", json={"product_id": p.id, "rating": 2})

    assert response.status_code == 200
    assert response.json()["data"] == {"average_rating": 3.0, "rating_count": 2, "weighted_average": 0.0}


def test_update_ratings_error_codes(client, products):
    p = make_product()
    products.add(p)

    bad_rating = client.post("/api/products/update-ratings", json={"product_id": p.id, "rating": 7})
    missing = client.post("/api/products/update-ratings", json={"product_id": new_id(), "rating": 3})

    assert (bad_rating.status_code, bad_rating.json()["error_code"]) == (400, "INVALID_RATING")
    assert (missing.status_code, missing.json()["error_code"]) == (404, "PRODUCT_NOT_FOUND")


# ----- recommendations ------------------------------------------------------

def test_homepage_recommendations_are_popular_products(client, products, interactions):
    a, b = make_product(name="a"), make_product(name="b")
    products.add(a, b)
    interactions.log(b.id, "view", _recent())
    interactions.log(b.id, "purchase", _recent())
    interactions.log(a.id, "view", _recent())

    response = client.get("/api/products/recommendations")

    assert response.status_code == 200
    assert response.headers["X-Recommendation-Status"] == "ok"
    assert [p["name"] for p in response.json()] == ["b", "a"]


def test_product_recommendations_put_similar_first(client, products, interactions):
    target = make_product(name="target", category="A", material="cotton", price=50, colors=["red"])
    twin = make_product(name="twin", category="A", material="cotton", price=50, colors=["red"])
    popular = make_product(name="popular", category="B", material="wool", price=500, colors=[])
    products.add(target, twin, popular)
    interactions.log(popular.id, "view", _recent())

    response = client.get(f"/api/products/recommendations/{target.id}", params={"limit": 3})

    names = [p["name"] for p in response.json()]
    assert names[0] == "twin"
    assert "target" not in names
    assert len(names) == len(set(names))


def test_unknown_product_recommendations_fall_back_to_popularity(client, products, interactions):
    hit = make_product(name="hit")
    products.add(hit)
    interactions.log(hit.id, "view", _recent())

    response = client.get(f"/api/products/recommendations/{new_id()}")

    assert [p["name"] for p in response.json()] == ["hit"]


def test_similar_endpoint_accepts_weight_overrides(client, products):
    target = make_product(category="A", material="cotton", price=100, colors=["red"])
    other = make_product(category="B", material="wool", price=100, colors=["blue"])
    products.add(target, other)

    response = client.get(f"/api/products/{target.id}/similar", params={"w_price": 0.5})

    body = response.json()
    assert body["count"] == 1
    assert body["items"][0]["score"] == 0.5


def test_user_recommendations(client, products, interactions):
    p = make_product(name="p")
    products.add(p)
    interactions.log(p.id, "purchase", _recent())

    assert [x["name"] for x in client.get("/api/products/recommendations/users/u-1").json()] == ["p"]


# ----- categories & interactions -------------------------------------------

def test_category_endpoints(client, categories, products):
    created = client.post("/api/categories", json={"name": "Men", "slug": "men"})
    assert created.status_code == 201
    child = client.post("/api/categories", json={"name": "Shirts", "slug": "shirts", "parentslug": "men"})
    assert child.json()["data"]["parentslug"] == "men"

    tree = client.get("/api/categories").json()["data"]
    assert tree[0]["slug"] == "men"
    assert tree[0]["subcategories"][0]["slug"] == "shirts"

    assert client.get("/api/categories/slug/shirts").status_code == 200
    assert client.get("/api/categories/slug/hats").status_code == 404

    products.add(make_product(name="in-shirts", category=child.json()["data"]["id"]))
    listed = client.get("/api/categories/shirts/products").json()["data"]
    assert [p["name"] for p in listed] == ["in-shirts"]


def test_category_missing_name_is_400(client):
    response = client.post("/api/categories", json={"slug": "x"})
    assert response.status_code == 400


def test_record_interaction(client, products, interactions):
    p = make_product()
    products.add(p)

    response = client.post(
        "/api/interactions",
        json={"user_id": "u1", "product_id": p.id, "type": "cart", "metadata": {"device_type": "mobile"}},
    )

    assert response.status_code == 201
    assert response.json()["data"]["type"] == "cart"
    assert len(interactions.entries) == 1
    assert interactions.entries[0].metadata.device_type == "mobile"


def test_record_interaction_unknown_product(client):
    response = client.post("/api/interactions", json={"user_id": "u1", "product_id": new_id(), "type": "view"})
    assert response.status_code == 404
