"""
User administration tests: role guard, CRUD, role replacement and nested listings.
"""
from models.cart import Cart
from models.log import Log
from models.review import Review


class TestRoleGuard:
    def test_customer_cannot_list_users(self, client, customer):
        response = client.get("/users", headers=customer["headers"])

        assert response.status_code == 403
        assert response.json()["message"] == "Unauthorized. You do not have the required role to access this resource."

    def test_admin_can_list_users(self, client, admin, customer):
        response = client.get("/users", headers=admin["headers"])

        assert response.status_code == 200
        body = response.json()
        assert body["total"] == 2
        assert body["per_page"] == 15
        assert [user["name"] for user in body["items"]] == ["Admin", "Customer"]

    def test_anonymous_gets_401(self, client):
        assert client.get("/users").status_code == 401


class TestUserCrud:
    def test_create_and_get(self, client, admin):
        response = client.post(
            "/users",
            json={"name": "Bob", "email": "bob@example.com", "password": "secret1", "address": "1 Main St"},
            headers=admin["headers"],
        )
        assert response.status_code == 201
        user_id = response.json()["id"]

        fetched = client.get(f"/users/{user_id}", headers=admin["headers"]).json()

        assert fetched["name"] == "Bob"
        assert fetched["address"] == "1 Main St"
        assert [role["name"] for role in fetched["roles"]] == ["customer"]

    def test_filter_by_email_substring(self, client, admin, customer):
        response = client.get("/users", params={"email": "custom"}, headers=admin["headers"])

        assert [user["id"] for user in response.json()["items"]] == [customer["id"]]

    def test_unknown_sort_column_falls_back(self, client, admin, customer):
        response = client.get("/users", params={"sort_by": "password_hash"}, headers=admin["headers"])

        assert response.status_code == 200
        assert [user["name"] for user in response.json()["items"]] == ["Admin", "Customer"]

    def test_update_keeps_omitted_fields(self, client, admin, customer):
        response = client.put(f"/users/{customer['id']}", json={"address": "2 High St"}, headers=admin["headers"])

        assert response.status_code == 200
        assert response.json()["address"] == "2 High St"
        assert response.json()["name"] == "Customer"

    def test_update_to_taken_email(self, client, admin, customer):
        response = client.put(f"/users/{customer['id']}", json={"email": "admin@example.com"}, headers=admin["headers"])

        assert response.status_code == 422
        assert response.json()["errors"]["email"] == ["The email has already been taken."]

    def test_update_own_email_is_allowed(self, client, admin, customer):
        response = client.put(f"/users/{customer['id']}", json={"email": "customer@example.com"}, headers=admin["headers"])

        assert response.status_code == 200

    def test_null_for_required_field(self, client, admin, customer):
        response = client.put(f"/users/{customer['id']}", json={"name": None}, headers=admin["headers"])

        assert response.status_code == 422
        assert "name" in response.json()["errors"]

    def test_missing_user(self, client, admin):
        response = client.get("/users/999", headers=admin["headers"])

        assert response.status_code == 404
        assert response.json() == {"message": "User not found"}

    def test_delete_cascades(self, client, db_session, admin, customer, product):
        db_session.add(Cart(quantity=1, total_price=10.0, product_id=product, user_id=customer["id"]))
        db_session.add(Review(user_id=customer["id"], product_id=product, rating=4))
        db_session.commit()

        response = client.delete(f"/users/{customer['id']}", headers=admin["headers"])

        assert response.status_code == 200
        assert response.json() == {"message": "User deleted successfully"}
        assert db_session.query(Cart).count() == 0
        assert db_session.query(Review).count() == 0
        assert client.get(f"/users/{customer['id']}", headers=admin["headers"]).status_code == 404

    def test_admin_deletes_own_account(self, client, db_session, admin):
        response = client.delete(f"/users/{admin['id']}", headers=admin["headers"])

        assert response.status_code == 200
        assert response.json() == {"message": "User deleted successfully"}
        entry = db_session.query(Log).filter(Log.action == "USER_DELETE").one()
        assert entry.user_id is None
        assert entry.meta["id"] == admin["id"]
        assert client.get("/auth/check", headers=admin["headers"]).status_code == 401

    def test_delete_is_audited_with_actor(self, client, db_session, admin, customer):
        client.delete(f"/users/{customer['id']}", headers=admin["headers"])

        entry = db_session.query(Log).filter(Log.action == "USER_DELETE").one()
        assert entry.user_id == admin["id"]


class TestUserRoles:
    def test_roles_are_replaced(self, client, admin, customer):
        response = client.put(
            f"/users/{customer['id']}/roles", json={"roles": ["seller", "admin"]}, headers=admin["headers"]
        )

        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "User roles updated successfully"
        assert sorted(role["name"] for role in body["user"]["roles"]) == ["admin", "seller"]

    def test_new_role_takes_effect(self, client, admin, customer):
        client.put(f"/users/{customer['id']}/roles", json={"roles": ["admin"]}, headers=admin["headers"])

        assert client.get("/users", headers=customer["headers"]).status_code == 200

    def test_unknown_role(self, client, admin, customer):
        response = client.put(
            f"/users/{customer['id']}/roles", json={"roles": ["seller", "wizard"]}, headers=admin["headers"]
        )

        assert response.status_code == 422
        assert response.json()["errors"] == {"roles.1": ["The selected roles.1 is invalid."]}

    def test_empty_role_list(self, client, admin, customer):
        response = client.put(f"/users/{customer['id']}/roles", json={"roles": []}, headers=admin["headers"])

        assert response.status_code == 422

    def test_customer_cannot_change_roles(self, client, customer):
        response = client.put(f"/users/{customer['id']}/roles", json={"roles": ["admin"]}, headers=customer["headers"])

        assert response.status_code == 403


class TestNestedListings:
    def test_user_carts_and_with_carts(self, client, db_session, customer, product):
        db_session.add(Cart(quantity=2, total_price=20.0, product_id=product, user_id=customer["id"]))
        db_session.commit()

        carts = client.get(f"/users/{customer['id']}/carts", headers=customer["headers"]).json()
        with_carts = client.get(f"/users/{customer['id']}/with-carts", headers=customer["headers"]).json()

        assert len(carts) == 1
        assert carts[0]["product"]["id"] == product
        assert carts[0]["order"] is None
        assert with_carts["carts"][0]["total_price"] == 20.0

    def test_user_reviews_are_public(self, client, db_session, customer, product):
        db_session.add(Review(user_id=customer["id"], product_id=product, rating=5, review="Loved it"))
        db_session.commit()

        response = client.get(f"/users/{customer['id']}/reviews")

        assert response.status_code == 200
        body = response.json()
        assert body["per_page"] == 10
        assert body["items"][0]["product"]["id"] == product

    def test_nested_listing_for_missing_user(self, client, customer):
        response = client.get("/users/999/orders", headers=customer["headers"])

        assert response.status_code == 404
