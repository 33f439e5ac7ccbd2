"""
Cart and order tests: total price snapshot, one order per cart and delete guards.
"""
from models.order import Order
from models.payment import Payment
from models.product import Product
from repositories.order import OrderRepository


def create_cart(client, auth, product, quantity=3):
    return client.post(
        "/carts", json={"quantity": quantity, "product_id": product, "user_id": auth["id"]}, headers=auth["headers"]
    )


def create_payment(db):
    payment = Payment(payment_method="card", status="paid")
    db.add(payment)
    db.commit()
    return payment.id


def create_order(client, auth, cart_id, payment_id):
    return client.post(
        "/orders",
        json={"final_price": 30.0, "cart_id": cart_id, "payment_id": payment_id, "order_date": "2024-05-01"},
        headers=auth["headers"],
    )


class TestCarts:
    def test_total_price_is_computed(self, client, customer, product):
        response = create_cart(client, customer, product, quantity=3)

        assert response.status_code == 201
        body = response.json()
        assert body["total_price"] == 30.0
        assert body["product"]["id"] == product
        assert body["user"]["id"] == customer["id"]

    def test_total_is_a_snapshot(self, client, db_session, customer, product):
        cart_id = create_cart(client, customer, product, quantity=2).json()["id"]
        db_session.query(Product).filter(Product.id == product).update({"price": 99.0})
        db_session.commit()

        assert client.get(f"/carts/{cart_id}", headers=customer["headers"]).json()["total_price"] == 20.0

        # Writing the quantity recomputes against the current price
        response = client.put(f"/carts/{cart_id}", json={"quantity": 1}, headers=customer["headers"])
        assert response.json()["total_price"] == 99.0

    def test_unknown_product(self, client, customer):
        response = create_cart(client, customer, 999)

        assert response.status_code == 404
        assert response.json() == {"message": "Product not found"}
        assert client.get("/carts", headers=customer["headers"]).json()["total"] == 0

    def test_unknown_user(self, client, customer, product):
        response = client.post(
            "/carts", json={"quantity": 1, "product_id": product, "user_id": 999}, headers=customer["headers"]
        )

        assert response.status_code == 422
        assert response.json()["errors"] == {"user_id": ["The selected user_id is invalid."]}

    def test_zero_quantity(self, client, customer, product):
        assert create_cart(client, customer, product, quantity=0).status_code == 422

    def test_requires_authentication(self, client):
        assert client.get("/carts").status_code == 401

    def test_delete_without_order(self, client, customer, product):
        cart_id = create_cart(client, customer, product).json()["id"]

        response = client.delete(f"/carts/{cart_id}", headers=customer["headers"])

        assert response.status_code == 200
        assert client.get(f"/carts/{cart_id}", headers=customer["headers"]).status_code == 404

    def test_delete_blocked_by_order(self, client, db_session, customer, product):
        cart_id = create_cart(client, customer, product).json()["id"]
        create_order(client, customer, cart_id, create_payment(db_session))

        response = client.delete(f"/carts/{cart_id}", headers=customer["headers"])

        assert response.status_code == 409
        assert response.json() == {"message": "Cannot delete cart with existing orders"}


class TestOrders:
    def test_create_and_get(self, client, db_session, customer, product):
        cart_id = create_cart(client, customer, product).json()["id"]
        payment_id = create_payment(db_session)

        created = create_order(client, customer, cart_id, payment_id)

        assert created.status_code == 201
        detail = client.get(f"/orders/{created.json()['id']}", headers=customer["headers"]).json()
        assert detail["order_date"] == "2024-05-01"
        assert detail["cart"]["id"] == cart_id
        assert detail["cart"]["product"]["id"] == product
        assert detail["cart"]["user"]["id"] == customer["id"]
        assert detail["payment"]["status"] == "paid"

    def test_second_order_for_cart(self, client, db_session, customer, product):
        cart_id = create_cart(client, customer, product).json()["id"]
        payment_id = create_payment(db_session)
        create_order(client, customer, cart_id, payment_id)

        response = create_order(client, customer, cart_id, payment_id)

        assert response.status_code == 409
        assert response.json() == {"message": "This cart already has an associated order"}
        assert db_session.query(Order).count() == 1

    def test_unique_cart_constraint_reports_conflict(self, client, db_session, customer, product, monkeypatch):
        cart_id = create_cart(client, customer, product).json()["id"]
        payment_id = create_payment(db_session)
        create_order(client, customer, cart_id, payment_id)
        # Two requests racing past the lookup both reach the insert
        monkeypatch.setattr(OrderRepository, "cart_has_order", lambda self, *args, **kwargs: False)

        response = create_order(client, customer, cart_id, payment_id)

        assert response.status_code == 409
        assert response.json() == {"message": "This cart already has an associated order"}
        assert db_session.query(Order).count() == 1

    def test_move_order_to_taken_cart(self, client, db_session, customer, product):
        first = create_cart(client, customer, product).json()["id"]
        second = create_cart(client, customer, product).json()["id"]
        payment_id = create_payment(db_session)
        create_order(client, customer, first, payment_id)
        order_id = create_order(client, customer, second, payment_id).json()["id"]

        response = client.put(f"/orders/{order_id}", json={"cart_id": first}, headers=customer["headers"])

        assert response.status_code == 409

    def test_update_keeping_own_cart(self, client, db_session, customer, product):
        cart_id = create_cart(client, customer, product).json()["id"]
        order_id = create_order(client, customer, cart_id, create_payment(db_session)).json()["id"]

        response = client.put(
            f"/orders/{order_id}", json={"cart_id": cart_id, "final_price": 25.0}, headers=customer["headers"]
        )

        assert response.status_code == 200
        assert response.json()["final_price"] == 25.0

    def test_unknown_references(self, client, customer):
        response = create_order(client, customer, 999, 998)

        assert response.status_code == 422
        assert set(response.json()["errors"]) == {"cart_id", "payment_id"}

    def test_filter_by_order_date(self, client, db_session, customer, product):
        cart_id = create_cart(client, customer, product).json()["id"]
        create_order(client, customer, cart_id, create_payment(db_session))

        inside = client.get("/orders", params={"from_date": "2024-05-01", "to_date": "2024-05-01"}, headers=customer["headers"])
        outside = client.get("/orders", params={"from_date": "2024-06-01"}, headers=customer["headers"])

        assert inside.json()["total"] == 1
        assert outside.json()["total"] == 0

    def test_user_orders(self, client, db_session, customer, product):
        cart_id = create_cart(client, customer, product).json()["id"]
        order_id = create_order(client, customer, cart_id, create_payment(db_session)).json()["id"]

        response = client.get(f"/users/{customer['id']}/orders", headers=customer["headers"])

        assert [order["id"] for order in response.json()] == [order_id]

    def test_delete_frees_cart(self, client, db_session, customer, product):
        cart_id = create_cart(client, customer, product).json()["id"]
        order_id = create_order(client, customer, cart_id, create_payment(db_session)).json()["id"]

        assert client.delete(f"/orders/{order_id}", headers=customer["headers"]).status_code == 200
        assert client.delete(f"/carts/{cart_id}", headers=customer["headers"]).status_code == 200
