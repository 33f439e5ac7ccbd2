"""
Review tests: one live review per (user, product), soft delete and averages.
"""
from models.review import Review


def post_review(client, auth, product, rating=4, text="Solid"):
    return client.post(
        "/reviews",
        json={"user_id": auth["id"], "product_id": product, "rating": rating, "review": text},
        headers=auth["headers"],
    )


class TestReviewWrites:
    def test_create_and_get(self, client, customer, product):
        created = post_review(client, customer, product)

        assert created.status_code == 201
        detail = client.get(f"/reviews/{created.json()['id']}").json()
        assert detail["rating"] == 4
        assert detail["user"]["id"] == customer["id"]
        assert detail["product"]["id"] == product

    def test_second_review_for_same_product(self, client, db_session, customer, product):
        post_review(client, customer, product)

        response = post_review(client, customer, product, rating=1)

        assert response.status_code == 409
        assert db_session.query(Review).count() == 1

    def test_requires_authentication(self, client, customer, product):
        response = client.post("/reviews", json={"user_id": customer["id"], "product_id": product, "rating": 3})

        assert response.status_code == 401

    def test_rating_out_of_range(self, client, customer, product):
        response = post_review(client, customer, product, rating=6)

        assert response.status_code == 422
        assert "rating" in response.json()["errors"]

    def test_unknown_product(self, client, customer):
        response = post_review(client, customer, 999)

        assert response.status_code == 422
        assert response.json()["errors"] == {"product_id": ["The selected product_id is invalid."]}

    def test_update_only_touches_rating_and_text(self, client, customer, seller, product):
        review_id = post_review(client, customer, product).json()["id"]

        response = client.put(
            f"/reviews/{review_id}",
            json={"rating": 2, "user_id": seller["id"]},
            headers=customer["headers"],
        )

        assert response.status_code == 200
        assert response.json()["rating"] == 2
        assert response.json()["review"] == "Solid"
        assert response.json()["user_id"] == customer["id"]


class TestReviewDelete:
    def test_soft_delete_hides_review(self, client, db_session, customer, product):
        review_id = post_review(client, customer, product).json()["id"]

        response = client.delete(f"/reviews/{review_id}", headers=customer["headers"])

        assert response.status_code == 200
        assert client.get(f"/reviews/{review_id}").status_code == 404
        assert client.get("/reviews").json()["total"] == 0
        row = db_session.query(Review).filter(Review.id == review_id).one()
        assert row.deleted_at is not None

    def test_can_review_again_after_soft_delete(self, client, customer, product):
        review_id = post_review(client, customer, product).json()["id"]
        client.delete(f"/reviews/{review_id}", headers=customer["headers"])

        assert post_review(client, customer, product).status_code == 201

    def test_force_delete_removes_row(self, client, db_session, customer, product):
        review_id = post_review(client, customer, product).json()["id"]

        response = client.delete(f"/reviews/{review_id}", params={"force": True}, headers=customer["headers"])

        assert response.status_code == 200
        assert db_session.query(Review).count() == 0


class TestProductReviews:
    def test_average_rating(self, client, customer, seller, admin, product):
        post_review(client, customer, product, rating=5)
        post_review(client, seller, product, rating=4)
        post_review(client, admin, product, rating=4)

        body = client.get(f"/products/{product}/reviews").json()

        assert body["average_rating"] == 4.3
        assert body["reviews"]["total"] == 3
        assert body["reviews"]["per_page"] == 10
        assert body["reviews"]["items"][0]["user"]["id"] is not None

    def test_average_without_reviews(self, client, product):
        body = client.get(f"/products/{product}/reviews").json()

        assert body["average_rating"] == 0.0
        assert body["reviews"]["items"] == []

    def test_soft_deleted_reviews_do_not_count(self, client, customer, seller, product):
        post_review(client, customer, product, rating=5)
        review_id = post_review(client, seller, product, rating=1).json()["id"]
        client.delete(f"/reviews/{review_id}", headers=seller["headers"])

        body = client.get(f"/products/{product}/reviews").json()

        assert body["average_rating"] == 5.0
        assert body["reviews"]["total"] == 1

    def test_filter_by_rating(self, client, customer, seller, product):
        post_review(client, customer, product, rating=5)
        post_review(client, seller, product, rating=2)

        body = client.get("/reviews", params={"rating": 2}).json()

        assert [review["user_id"] for review in body["items"]] == [seller["id"]]

    def test_missing_product(self, client):
        assert client.get("/products/999/reviews").status_code == 404
