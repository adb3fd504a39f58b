"""
Saved-for-later products: /api/wishlist.
"""
import uuid

from fastapi.testclient import TestClient


class TestWishlist:
    def test_guests_and_admins_see_an_empty_list(self, test_client: TestClient, admin_headers):
        assert test_client.get("/api/wishlist").json() == {"items": [], "count": 0}
        assert test_client.get("/api/wishlist/count").json() == {"count": 0}
        assert test_client.get("/api/wishlist", headers=admin_headers).json()["count"] == 0

    def test_guest_cannot_add(self, test_client: TestClient, make_product):
        response = test_client.post(
            "/api/wishlist", json={"productId": str(make_product().id)}
        )

        assert response.status_code == 401

    def test_add_list_and_count(self, test_client: TestClient, make_product, customer_headers):
        tea = make_product(name="Assam Tea 500g", price=220.0)

        added = test_client.post(
            "/api/wishlist", json={"productId": str(tea.id)}, headers=customer_headers
        )
        listing = test_client.get("/api/wishlist", headers=customer_headers).json()
        count = test_client.get("/api/wishlist/count", headers=customer_headers).json()

        assert added.status_code == 201
        assert listing["count"] == 1
        assert listing["items"][0]["product"]["name"] == "Assam Tea 500g"
        assert count == {"count": 1}

    def test_same_product_twice(self, test_client: TestClient, make_product, customer_headers):
        body = {"productId": str(make_product().id)}
        test_client.post("/api/wishlist", json=body, headers=customer_headers)

        response = test_client.post("/api/wishlist", json=body, headers=customer_headers)

        assert response.status_code == 400
        assert response.json()["detail"] == "Product already in wishlist"

    def test_missing_or_unknown_product(self, test_client: TestClient, customer_headers):
        missing = test_client.post("/api/wishlist", json={}, headers=customer_headers)
        unknown = test_client.post(
            "/api/wishlist", json={"productId": str(uuid.uuid4())}, headers=customer_headers
        )

        assert missing.json()["detail"] == "Product ID is required"
        assert unknown.status_code == 404

    def test_remove_and_clear(self, test_client: TestClient, make_product, customer_headers):
        rice = make_product(name="Rice")
        dal = make_product(name="Dal")
        oil = make_product(name="Oil")
        for product in (rice, dal, oil):
            test_client.post(
                "/api/wishlist", json={"productId": str(product.id)}, headers=customer_headers
            )

        test_client.delete(f"/api/wishlist/{rice.id}", headers=customer_headers)
        after_remove = test_client.get("/api/wishlist", headers=customer_headers).json()
        test_client.delete("/api/wishlist", headers=customer_headers)
        after_clear = test_client.get("/api/wishlist/count", headers=customer_headers).json()

        assert {i["product"]["name"] for i in after_remove["items"]} == {"Dal", "Oil"}
        assert after_clear == {"count": 0}

    def test_lists_are_per_customer(
        self, test_client: TestClient, make_product, make_user, customer_headers, headers_for
    ):
        test_client.post(
            "/api/wishlist", json={"productId": str(make_product().id)}, headers=customer_headers
        )
        other = headers_for(make_user(email="ravi@example.com", name="Ravi"))

        assert test_client.get("/api/wishlist/count", headers=other).json() == {"count": 0}
