"""
Catalog tests: stores, categories, products and product images.
"""
from models.product import Product, ProductImage


def product_payload(store, category, **overrides):
    payload = {
        "name": "Atlas",
        "price": 49.99,
        "stock": 3,
        "status": "active",
        "store_id": store,
        "category_id": category,
    }
    payload.update(overrides)
    return payload


class TestStores:
    def test_create_and_get_round_trip(self, client, seller):
        created = client.post("/stores", json={"name": "Gadget Hub", "city": "Krakow"}, headers=seller["headers"])

        assert created.status_code == 201
        fetched = client.get(f"/stores/{created.json()['id']}")
        assert fetched.status_code == 200
        assert fetched.json()["name"] == "Gadget Hub"
        assert fetched.json()["city"] == "Krakow"

    def test_customer_cannot_create_store(self, client, customer):
        response = client.post("/stores", json={"name": "Nope", "city": "Lodz"}, headers=customer["headers"])

        assert response.status_code == 403

    def test_listing_is_public_and_sorted_by_name(self, client, seller):
        for name in ("Zeta", "Alpha", "Mid"):
            client.post("/stores", json={"name": name, "city": "Poznan"}, headers=seller["headers"])

        body = client.get("/stores").json()

        assert [store["name"] for store in body["items"]] == ["Alpha", "Mid", "Zeta"]
        assert body["total"] == 3
        assert body["last_page"] == 1

    def test_pagination(self, client, seller):
        for i in range(5):
            client.post("/stores", json={"name": f"Store {i}", "city": "Poznan"}, headers=seller["headers"])

        body = client.get("/stores", params={"per_page": 2, "page": 3}).json()

        assert body["page"] == 3
        assert body["per_page"] == 2
        assert body["last_page"] == 3
        assert [store["name"] for store in body["items"]] == ["Store 4"]

    def test_search_and_city(self, client, store):
        assert client.get("/stores/search", params={"name": "corner"}).json()["total"] == 1
        assert client.get("/stores/city/Warsaw").json()["total"] == 1
        assert client.get("/stores/city/Paris").json()["total"] == 0

    def test_missing_required_field(self, client, seller):
        response = client.post("/stores", json={"name": "No City"}, headers=seller["headers"])

        assert response.status_code == 422
        assert "city" in response.json()["errors"]

    def test_delete_removes_products(self, client, db_session, admin, store, product):
        response = client.delete(f"/stores/{store}", headers=admin["headers"])

        assert response.status_code == 200
        assert db_session.query(Product).count() == 0

    def test_store_products_for_missing_store(self, client):
        assert client.get("/stores/999/products").status_code == 404


class TestCategories:
    def test_create_requires_admin(self, client, seller):
        response = client.post("/categories", json={"name": "Toys"}, headers=seller["headers"])

        assert response.status_code == 403

    def test_duplicate_name(self, client, admin, category):
        response = client.post("/categories", json={"name": "Books"}, headers=admin["headers"])

        assert response.status_code == 422
        assert response.json()["errors"]["name"] == ["The name has already been taken."]

    def test_get_with_products(self, client, category, product):
        plain = client.get(f"/categories/{category}").json()
        embedded = client.get(f"/categories/{category}", params={"with_products": True}).json()

        assert "products" not in plain
        assert [item["id"] for item in embedded["products"]] == [product]

    def test_delete_blocked_while_products_exist(self, client, db_session, admin, category, product):
        response = client.delete(f"/categories/{category}", headers=admin["headers"])

        assert response.status_code == 409
        assert response.json()["message"] == (
            "Cannot delete category that has products. Remove products first or reassign them."
        )
        assert client.get(f"/categories/{category}").status_code == 200

    def test_delete_empty_category(self, client, admin, category):
        response = client.delete(f"/categories/{category}", headers=admin["headers"])

        assert response.status_code == 200
        assert client.get(f"/categories/{category}").status_code == 404


class TestProducts:
    def test_create_and_get_round_trip(self, client, seller, store, category):
        created = client.post("/products", json=product_payload(store, category), headers=seller["headers"])

        assert created.status_code == 201
        detail = client.get(f"/products/{created.json()['id']}").json()
        assert detail["name"] == "Atlas"
        assert detail["price"] == 49.99
        assert detail["store"]["id"] == store
        assert detail["category"]["id"] == category
        assert detail["images"] == []
        assert detail["reviews"] == []

    def test_unknown_foreign_keys(self, client, seller, store):
        response = client.post("/products", json=product_payload(store, 999), headers=seller["headers"])

        assert response.status_code == 422
        assert response.json()["errors"] == {"category_id": ["The selected category_id is invalid."]}

    def test_negative_price(self, client, seller, store, category):
        response = client.post("/products", json=product_payload(store, category, price=-1), headers=seller["headers"])

        assert response.status_code == 422

    def test_invalid_status(self, client, seller, store, category):
        response = client.post(
            "/products", json=product_payload(store, category, status="archived"), headers=seller["headers"]
        )

        assert response.status_code == 422

    def test_filters(self, client, seller, store, category):
        client.post("/products", json=product_payload(store, category, name="Cheap", price=5), headers=seller["headers"])
        client.post("/products", json=product_payload(store, category, name="Pricey", price=500), headers=seller["headers"])
        client.post(
            "/products",
            json=product_payload(store, category, name="Hidden", price=50, status="inactive"),
            headers=seller["headers"],
        )

        assert [p["name"] for p in client.get("/products", params={"max_price": 100}).json()["items"]] == ["Cheap", "Hidden"]
        assert [p["name"] for p in client.get("/products", params={"status": "inactive"}).json()["items"]] == ["Hidden"]
        assert client.get("/products", params={"name": "pri"}).json()["total"] == 1
        # Unknown filters are ignored
        assert client.get("/products", params={"colour": "red"}).json()["total"] == 3

    def test_partial_update(self, client, seller, product):
        response = client.put(f"/products/{product}", json={"price": 12.5}, headers=seller["headers"])

        assert response.status_code == 200
        assert response.json()["price"] == 12.5
        assert response.json()["name"] == "Novel"

    def test_update_missing_product(self, client, seller):
        response = client.put("/products/999", json={"price": 1}, headers=seller["headers"])

        assert response.status_code == 404
        assert response.json() == {"message": "Product not found"}

    def test_delete(self, client, admin, product):
        assert client.delete(f"/products/{product}", headers=admin["headers"]).status_code == 200
        assert client.get(f"/products/{product}").status_code == 404


class TestProductImages:
    def test_create_and_list_for_product(self, client, seller, product):
        created = client.post(
            "/product-images",
            json={"name": "Front", "path": "images/front.jpg", "product_id": product},
            headers=seller["headers"],
        )

        assert created.status_code == 201
        body = client.get(f"/products/{product}/images").json()
        assert body["per_page"] == 10
        assert [image["name"] for image in body["items"]] == ["Front"]
        detail = client.get(f"/product-images/{created.json()['id']}").json()
        assert detail["product"]["id"] == product

    def test_unknown_product(self, client, seller):
        response = client.post(
            "/product-images",
            json={"name": "Front", "path": "images/front.jpg", "product_id": 999},
            headers=seller["headers"],
        )

        assert response.status_code == 422
        assert "product_id" in response.json()["errors"]

    def test_images_go_with_product(self, client, db_session, admin, product):
        db_session.add(ProductImage(name="Side", path="images/side.jpg", product_id=product))
        db_session.commit()

        client.delete(f"/products/{product}", headers=admin["headers"])

        assert db_session.query(ProductImage).count() == 0
