"""
Server cart endpoints: /api/cart.

Exercise the router, service and repository together against SQLite.
"""
import uuid

from fastapi.testclient import TestClient
from sqlmodel import select

from storefront.models.cart import CartRow
from storefront.repositories.cart_repo import CartRepository
from storefront.repositories.product_repo import ProductRepository
from storefront.services.cart_service import CartService


class TestGuestAccess:
    def test_guest_gets_empty_cart(self, test_client: TestClient):
        response = test_client.get("/api/cart")

        assert response.status_code == 200
        assert response.json() == {"items": [], "total": 0, "itemCount": 0}

    def test_guest_count_is_zero(self, test_client: TestClient):
        response = test_client.get("/api/cart/count")

        assert response.status_code == 200
        assert response.json() == {"count": 0}

    def test_guest_cannot_mutate(self, test_client: TestClient, make_product):
        product = make_product()

        response = test_client.post("/api/cart", json={"productId": str(product.id)})

        assert response.status_code == 401
        assert response.json()["detail"] == "Access token required"

    def test_garbage_token_reads_as_guest(self, test_client: TestClient):
        response = test_client.get(
            "/api/cart", headers={"Authorization": "Bearer not-a-jwt"}
        )

        assert response.status_code == 200
        assert response.json()["itemCount"] == 0

    def test_admin_cannot_add_to_cart(
        self, test_client: TestClient, make_product, admin_headers
    ):
        product = make_product()

        response = test_client.post(
            "/api/cart", json={"productId": str(product.id)}, headers=admin_headers
        )

        assert response.status_code == 403


class TestAddToCart:
    def test_add_creates_row_with_default_quantity(
        self, test_client: TestClient, make_product, customer_headers
    ):
        product = make_product()

        response = test_client.post(
            "/api/cart", json={"productId": str(product.id)}, headers=customer_headers
        )

        assert response.status_code == 201
        data = response.json()
        assert data["product_id"] == str(product.id)
        assert data["quantity"] == 1

    def test_repeated_add_increments_single_row(
        self, test_client: TestClient, session, make_product, customer, customer_headers
    ):
        """
        Adding the same product twice leaves one row holding the sum.
        """
        product = make_product()

        test_client.post(
            "/api/cart",
            json={"productId": str(product.id), "quantity": 2},
            headers=customer_headers,
        )
        response = test_client.post(
            "/api/cart",
            json={"productId": str(product.id), "quantity": 3},
            headers=customer_headers,
        )

        assert response.status_code == 201
        assert response.json()["quantity"] == 5

        rows = session.exec(
            select(CartRow).where(CartRow.customer_id == customer.id)
        ).all()
        assert len(rows) == 1
        assert rows[0].quantity == 5

    def test_missing_product_id(self, test_client: TestClient, customer_headers):
        response = test_client.post(
            "/api/cart", json={"quantity": 1}, headers=customer_headers
        )

        assert response.status_code == 400
        assert response.json()["detail"] == "Product ID is required"

    def test_zero_quantity_rejected(
        self, test_client: TestClient, make_product, customer_headers
    ):
        product = make_product()

        response = test_client.post(
            "/api/cart",
            json={"productId": str(product.id), "quantity": 0},
            headers=customer_headers,
        )

        assert response.status_code == 400

    def test_unknown_product(self, test_client: TestClient, customer_headers):
        response = test_client.post(
            "/api/cart",
            json={"productId": str(uuid.uuid4())},
            headers=customer_headers,
        )

        assert response.status_code == 404
        assert response.json()["detail"] == "Product not found"


class TestCartView:
    def test_total_applies_discount(
        self, test_client: TestClient, make_product, customer_headers
    ):
        """
        price 100, 20% off, qty 3 -> 240.00
        """
        product = make_product(price=100.0, discount_percent=20)
        test_client.post(
            "/api/cart",
            json={"productId": str(product.id), "quantity": 3},
            headers=customer_headers,
        )

        response = test_client.get("/api/cart", headers=customer_headers)

        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 240.0
        assert data["itemCount"] == 3

        line = data["items"][0]
        assert line["unit_price"] == 80.0
        assert line["line_total"] == 240.0
        assert line["product"]["id"] == str(product.id)
        assert line["product"]["discount_percent"] == 20

    def test_count_sums_quantities(
        self, test_client: TestClient, make_product, customer_headers
    ):
        rice = make_product()
        dal = make_product(name="Toor Dal 1kg", price=150.0)
        for product, qty in ((rice, 2), (dal, 3)):
            test_client.post(
                "/api/cart",
                json={"productId": str(product.id), "quantity": qty},
                headers=customer_headers,
            )

        response = test_client.get("/api/cart/count", headers=customer_headers)

        assert response.json() == {"count": 5}

    def test_price_edit_shows_on_next_read(
        self, test_client: TestClient, session, make_product, customer_headers
    ):
        product = make_product(price=100.0)
        test_client.post(
            "/api/cart",
            json={"productId": str(product.id), "quantity": 2},
            headers=customer_headers,
        )

        product.price = 120.0
        session.add(product)
        session.commit()

        response = test_client.get("/api/cart", headers=customer_headers)

        assert response.json()["total"] == 240.0

    def test_carts_are_per_customer(
        self, test_client: TestClient, make_product, make_user, customer_headers, headers_for
    ):
        product = make_product()
        other = headers_for(make_user(email="ravi@example.com", name="Ravi"))
        test_client.post(
            "/api/cart", json={"productId": str(product.id)}, headers=customer_headers
        )

        response = test_client.get("/api/cart", headers=other)

        assert response.json()["items"] == []


class TestUpdateAndRemove:
    def _add(self, client, product, headers, quantity=1) -> str:
        response = client.post(
            "/api/cart",
            json={"productId": str(product.id), "quantity": quantity},
            headers=headers,
        )
        return response.json()["id"]

    def test_update_overwrites_quantity(
        self, test_client: TestClient, make_product, customer_headers
    ):
        row_id = self._add(test_client, make_product(), customer_headers, quantity=2)

        response = test_client.put(
            f"/api/cart/{row_id}", json={"quantity": 7}, headers=customer_headers
        )

        assert response.status_code == 200
        assert response.json()["quantity"] == 7

    def test_update_to_zero_rejected(
        self, test_client: TestClient, make_product, customer_headers
    ):
        row_id = self._add(test_client, make_product(), customer_headers)

        response = test_client.put(
            f"/api/cart/{row_id}", json={"quantity": 0}, headers=customer_headers
        )

        assert response.status_code == 400
        assert response.json()["detail"] == "Valid quantity is required"

    def test_cannot_touch_other_customers_row(
        self, test_client: TestClient, make_product, make_user, customer_headers, headers_for
    ):
        row_id = self._add(test_client, make_product(), customer_headers)
        other = headers_for(make_user(email="ravi@example.com", name="Ravi"))

        update = test_client.put(
            f"/api/cart/{row_id}", json={"quantity": 4}, headers=other
        )
        delete = test_client.delete(f"/api/cart/{row_id}", headers=other)

        assert update.status_code == 404
        assert delete.status_code == 404

    def test_remove_row(self, test_client: TestClient, make_product, customer_headers):
        row_id = self._add(test_client, make_product(), customer_headers)

        response = test_client.delete(f"/api/cart/{row_id}", headers=customer_headers)

        assert response.status_code == 200
        assert response.json() == {"message": "Item removed from cart"}
        assert test_client.get("/api/cart/count", headers=customer_headers).json() == {
            "count": 0
        }

    def test_clear_then_read_is_empty(
        self, test_client: TestClient, make_product, customer_headers
    ):
        self._add(test_client, make_product(), customer_headers, quantity=2)
        self._add(test_client, make_product(name="Ghee 500ml"), customer_headers)

        response = test_client.delete("/api/cart", headers=customer_headers)
        cart = test_client.get("/api/cart", headers=customer_headers).json()

        assert response.json() == {"message": "Cart cleared"}
        assert cart == {"items": [], "total": 0, "itemCount": 0}


class TestCartRepository:
    def test_add_or_increment_upserts(self, session, customer, make_product):
        repo = CartRepository()
        product = make_product()

        first = repo.add_or_increment(
            session, customer_id=customer.id, product_id=product.id, quantity=1
        )
        second = repo.add_or_increment(
            session, customer_id=customer.id, product_id=product.id, quantity=4
        )

        assert first.id == second.id
        assert second.quantity == 5
        assert repo.count_quantity(session, customer.id) == 5

    def test_count_on_empty_cart(self, session, customer):
        assert CartRepository().count_quantity(session, customer.id) == 0


class TestCartService:
    def test_get_total_matches_view(self, session, customer, make_product):

        service = CartService(CartRepository(), ProductRepository())
        product = make_product(price=19.99, discount_percent=10)
        CartRepository().add_or_increment(
            session, customer_id=customer.id, product_id=product.id, quantity=3
        )

        assert service.get_total(session, customer.id) == 53.97
        assert service.get_count(session, customer.id) == 3
